from flask_restx import Namespace, Resource, fields

from runlab.services.entitlement_service import EntitlementService

# Create namespace
ns = Namespace('users', description='User entitlement operations')

user_sync_model = ns.model('UserSync', {
    'user_id': fields.String(required=True, description='Identity provider user ID'),
    'email': fields.String(required=True, description='Email address'),
    'name': fields.String(required=True, description='Display name')
})

user_response_model = ns.model('UserResponse', {
    'user_id': fields.String(description='User ID'),
    'email': fields.String(description='Email address'),
    'name': fields.String(description='Display name'),
    'is_pro': fields.Boolean(description='Pro subscription flag'),
    'pro_since': fields.String(description='Upgrade timestamp')
})

error_model = ns.model('Error', {
    'error': fields.String(description='Error message')
})


@ns.route('/sync')
class UserSync(Resource):
    @ns.doc('sync_user')
    @ns.expect(user_sync_model, validate=True)
    @ns.marshal_with(user_response_model)
    def post(self):
        """Create the user on first sign-in"""
        data = ns.payload
        user = EntitlementService.sync_user(data['user_id'], data['email'], data['name'])
        return user.to_dict(), 200


@ns.route('/<string:user_id>')
@ns.param('user_id', 'The user identifier')
class UserDetail(Resource):
    @ns.doc('get_user')
    @ns.marshal_with(user_response_model)
    @ns.response(404, 'User not found', error_model)
    def get(self, user_id):
        """Get a user's entitlement"""
        user = EntitlementService.get_entitlement(user_id)

        if user is None:
            ns.abort(404, "User not found")

        return user.to_dict(), 200
