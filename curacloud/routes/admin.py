from flask import Blueprint, current_app, jsonify, request
from marshmallow import ValidationError

from curacloud.decorators import current_user, login_required, roles_required
from curacloud.extensions import get_storage
from curacloud.schemas import VerifyUserSchema, user_schema

admin_bp = Blueprint('admin', __name__, url_prefix='/api')
verify_schema = VerifyUserSchema()


@admin_bp.route('/pending-verifications', methods=['GET'])
@login_required
@roles_required('admin')
def pending_verifications():
    try:
        users = get_storage().get_pending_verifications()
        return jsonify({"users": user_schema.dump(users, many=True)}), 200
    except Exception as e:
        current_app.logger.error(f"Fetching pending verifications failed: {e}")
        return jsonify({"message": "Failed to fetch pending verifications", "error": str(e)}), 500


@admin_bp.route('/users', methods=['GET'])
@login_required
@roles_required('admin')
def list_users():
    try:
        return jsonify({"users": user_schema.dump(get_storage().get_all_users(), many=True)}), 200
    except Exception as e:
        current_app.logger.error(f"Fetching users failed: {e}")
        return jsonify({"message": "Failed to fetch users", "error": str(e)}), 500


@admin_bp.route('/verify-user', methods=['POST'])
@login_required
@roles_required('admin')
def verify_user():
    try:
        body = verify_schema.load(request.get_json(silent=True) or {})
    except ValidationError as e:
        return jsonify({"message": "Failed to update user verification", "error": e.messages}), 400

    try:
        if not get_storage().update_user_verification(body['user_id'], body['verified']):
            return jsonify({"message": "User not found"}), 404

        outcome = 'verified' if body['verified'] else 'rejected'
        current_app.logger.info(f"Admin {current_user()['id']} {outcome} user {body['user_id']}")
        return jsonify({"message": f"User {outcome} successfully"}), 200
    except Exception as e:
        current_app.logger.error(f"Updating verification of {body['user_id']} failed: {e}")
        return jsonify({"message": "Failed to update user verification", "error": str(e)}), 500
