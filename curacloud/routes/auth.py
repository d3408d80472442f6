from flask import Blueprint, current_app, jsonify, request, session
from marshmallow import ValidationError
from pymongo.errors import DuplicateKeyError
import bcrypt

from curacloud.decorators import current_user, login_required
from curacloud.extensions import get_storage
from curacloud.schemas import LoginSchema, insert_user_schema, session_user_schema

auth_bp = Blueprint('auth', __name__, url_prefix='/api')
login_schema = LoginSchema()


def hash_password(password):
    salt = bcrypt.gensalt(rounds=current_app.config["BCRYPT_ROUNDS"])
    return bcrypt.hashpw(password.encode(), salt).decode()


def check_password(password, password_hash):
    return bcrypt.checkpw(password.encode(), password_hash.encode())


@auth_bp.route('/register', methods=['POST'])
def register():
    storage = get_storage()
    try:
        data = insert_user_schema.load(request.get_json(silent=True) or {})
    except ValidationError as e:
        return jsonify({"message": "Registration failed", "error": e.messages}), 400

    try:
        if storage.get_user_by_email(data['email']):
            return jsonify({"message": "User already exists with this email"}), 400

        # Admins are trusted on creation, everyone else waits for an admin.
        data['verified'] = data['role'] == 'admin'
        data['password'] = hash_password(data['password'])

        user = storage.create_user(data)
        current_app.logger.info(f"Registered {user['role']} {user['email']} ({user['id']})")
        return jsonify({"message": "User registered successfully", "userId": user['id']}), 201

    except DuplicateKeyError:
        return jsonify({"message": "User already exists with this email"}), 400
    except Exception as e:
        current_app.logger.error(f"Registration failed for {data['email']}: {e}")
        return jsonify({"message": "Registration failed", "error": str(e)}), 500


@auth_bp.route('/login', methods=['POST'])
def login():
    try:
        data = login_schema.load(request.get_json(silent=True) or {})
    except ValidationError as e:
        return jsonify({"message": "Invalid credentials", "error": e.messages}), 400

    try:
        u = get_storage().get_user_by_email(data['email'])
        if not u or u['role'] != data['role'] or not check_password(data['password'], u['password']):
            current_app.logger.warning(f"Rejected login for {data['email']}")
            return jsonify({"message": "Invalid credentials"}), 401

        if not u['verified']:
            return jsonify({"message": "Account pending verification"}), 401

        session.clear()
        session.permanent = True
        session['user'] = {
            "id": u['id'],
            "email": u['email'],
            "role": u['role'],
            "name": u['name'],
            "verified": u['verified'],
        }
        current_app.logger.info(f"User {u['id']} logged in as {u['role']}")
        return jsonify({"message": "Login successful", "user": session_user_schema.dump(session['user'])}), 200

    except Exception as e:
        current_app.logger.error(f"Login failed for {data['email']}: {e}")
        return jsonify({"message": "Login failed", "error": str(e)}), 500


@auth_bp.route('/logout', methods=['POST'])
def logout():
    session.clear()
    return jsonify({"message": "Logout successful"}), 200


@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify({"user": session_user_schema.dump(current_user())}), 200
