from flask_restx import Api

from runlab.errors import RunlabError

# Initialize API with Swagger documentation
api = Api(
    version='1.0',
    title='Runlab API',
    description='Run code against a sandboxed runtime, keep the history and report usage statistics',
    doc='/docs',
    prefix='/api/v1'
)


@api.errorhandler(RunlabError)
def handle_runlab_error(error):
    """Map domain errors to their HTTP status"""
    return {'error': error.message}, error.status_code
