from flask import Blueprint, jsonify

from app.api.common import get_json_body, missing_body
from app.services.user_service import UserService

bp = Blueprint('users', __name__, url_prefix='/api/users')


@bp.route('/sync-firebase', methods=['POST'])
def sync_firebase_user():
    """Sync Firebase User
    ---
    post:
        summary: Create or update the user for an identity-provider account
        requestBody:
            content:
              application/json:
                schema: UserSyncSchema
        responses:
            200:
                description: Existing user updated
                content:
                  application/json:
                    schema: UserSyncResponseSchema
            201:
                description: New user created
                content:
                  application/json:
                    schema: UserSyncResponseSchema
            400:
                description: Missing or malformed uid or email
                content:
                  application/json:
                    schema: ErrorSchema
    """
    data = get_json_body()
    if data is None:
        return missing_body()

    result, status_code = UserService.sync_firebase_user(data)
    return jsonify(result), status_code
