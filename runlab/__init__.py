import logging

from flask import Flask, jsonify
from runlab.config import Config
from runlab.models.db import db
from runlab.api import api
from runlab.services.analytics_service import AnalyticsService
from runlab.services.code_execution_service import CodeExecutionService
from runlab.services.execution_store import ExecutionStore
from runlab.services.piston_client import PistonClient

logger = logging.getLogger(__name__)


def create_app(config_class=Config, piston_transport=None):
    app = Flask(__name__)
    app.config.from_object(config_class)

    db.init_app(app)

    with app.app_context():
        from runlab.models import execution_model, snippet_model, user_model
        db.create_all()

    logger.info("Connected to database")

    # Collaborators shared by the request handlers
    piston_client = PistonClient.from_config(app.config, transport=piston_transport)
    execution_store = ExecutionStore.from_config(app.config)
    app.extensions['piston_client'] = piston_client
    app.extensions['execution_store'] = execution_store
    app.extensions['execution_service'] = CodeExecutionService(
        piston_client,
        store=execution_store,
        free_tier_language=app.config['FREE_TIER_LANGUAGE'],
    )
    app.extensions['analytics_service'] = AnalyticsService(execution_store)

    # Initialize API with Swagger
    api.init_app(app)

    # Register API namespaces
    from runlab.routes.execution_api import ns as execution_ns
    from runlab.routes.user_api import ns as user_ns
    api.add_namespace(execution_ns, path='/executions')
    api.add_namespace(user_ns, path='/users')

    from runlab.routes import health_routes
    app.register_blueprint(health_routes.bp)

    @app.route("/")
    def home():
        return jsonify({
            "message": "Runlab API is running!",
            "status": "success",
            "documentation": "/docs"
        })

    @app.route("/health")
    def health():
        return jsonify({"status": "healthy"})

    return app
