import logging
import os

from runlab import create_app

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = create_app()

if __name__ == "__main__":
    # Must bind to 0.0.0.0 for Docker
    app.run(
        host='0.0.0.0',  # Listen on all interfaces
        port=int(os.getenv('PORT', '5000')),
        debug=os.getenv('DEBUG', 'False').lower() == 'true'
    )
