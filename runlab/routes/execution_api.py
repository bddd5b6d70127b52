from flask import current_app
from flask_restx import Namespace, Resource, fields

from runlab.auth import current_identity
from runlab.languages import SUPPORTED_LANGUAGES

# Create namespace
ns = Namespace('executions', description='Code execution operations')

# Define models for Swagger documentation
run_request_model = ns.model('RunRequest', {
    'language': fields.String(
        required=True,
        description='Programming language',
        enum=SUPPORTED_LANGUAGES
    ),
    'code': fields.String(required=True, description='Source code')
})

run_response_model = ns.model('RunResponse', {
    'execution_id': fields.String(description='Stored execution ID, null when nothing was stored'),
    'status': fields.String(description='Outcome', enum=['SUCCEEDED', 'FAILED']),
    'output': fields.String(description='Trimmed standard output'),
    'error': fields.String(description='Error text'),
    'failure': fields.String(description='Failure layer', enum=['input', 'api', 'compile', 'runtime', 'transport', 'timeout'])
})

execution_item_model = ns.model('ExecutionItem', {
    'id': fields.String(description='Execution ID'),
    'user_id': fields.String(description='Owning user'),
    'language': fields.String(description='Programming language'),
    'code': fields.String(description='Source code'),
    'output': fields.String(description='Standard output'),
    'error': fields.String(description='Error text'),
    'created_at': fields.String(description='Creation timestamp')
})

execution_page_model = ns.model('ExecutionPage', {
    'user_id': fields.String(description='User ID'),
    'executions': fields.List(fields.Nested(execution_item_model)),
    'next_cursor': fields.String(description='Cursor for the next page'),
    'is_done': fields.Boolean(description='True on the last page')
})

stats_model = ns.model('UsageStats', {
    'total_executions': fields.Integer,
    'languages_count': fields.Integer,
    'languages': fields.List(fields.String),
    'last_24_hours': fields.Integer,
    'favorite_language': fields.String,
    'language_stats': fields.Raw(description='Executions per language'),
    'most_starred_language': fields.String
})

error_model = ns.model('Error', {
    'error': fields.String(description='Error message')
})

page_parser = ns.parser()
page_parser.add_argument('cursor', type=str, location='args', help='Cursor returned by the previous page')
page_parser.add_argument('limit', type=int, location='args', help='Page size')


@ns.route('/run')
class ExecutionRun(Resource):
    @ns.doc('run_code')
    @ns.expect(run_request_model, validate=True)
    @ns.marshal_with(run_response_model, code=201)
    @ns.response(201, 'Execution finished and stored')
    @ns.response(400, 'Invalid request data', error_model)
    @ns.response(200, 'Nothing to execute, nothing stored')
    @ns.response(401, 'Not authenticated', error_model)
    @ns.response(403, 'Pro subscription required', error_model)
    def post(self):
        """Run code and store the outcome

        Example payload:
        {
            "language": "javascript",
            "code": "console.log('Hello World!')"
        }
        """
        data = ns.payload or {}
        service = current_app.extensions['execution_service']

        outcome, execution_id = service.execute_for_user(
            current_identity(),
            data.get('language', ''),
            data.get('code', ''),
        )

        result = outcome.to_dict()
        result['execution_id'] = str(execution_id) if execution_id is not None else None
        return result, 201 if execution_id is not None else 200


@ns.route('/user/<string:user_id>')
@ns.param('user_id', 'The user identifier')
class UserExecutionList(Resource):
    @ns.doc('get_user_executions')
    @ns.expect(page_parser)
    @ns.marshal_with(execution_page_model)
    @ns.response(400, 'Invalid cursor', error_model)
    def get(self, user_id):
        """List a user's executions, newest first"""
        args = page_parser.parse_args()
        page = current_app.extensions['execution_store'].list_by_user(
            user_id, cursor=args.get('cursor'), page_size=args.get('limit')
        )

        return {
            "user_id": user_id,
            "executions": [execution.to_dict() for execution in page.items],
            "next_cursor": page.next_cursor,
            "is_done": page.is_done
        }, 200


@ns.route('/user/<string:user_id>/stats')
@ns.param('user_id', 'The user identifier')
class UserExecutionStats(Resource):
    @ns.doc('get_user_stats')
    @ns.marshal_with(stats_model)
    def get(self, user_id):
        """Usage statistics computed from the user's history"""
        stats = current_app.extensions['analytics_service'].compute_stats(user_id)
        return stats.to_dict(), 200
