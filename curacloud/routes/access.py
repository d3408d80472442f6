from flask import Blueprint, current_app, jsonify, request
from marshmallow import ValidationError

from curacloud.decorators import current_user, login_required, roles_required
from curacloud.extensions import get_storage
from curacloud.schemas import (
    GrantAccessSchema,
    RevokeAccessSchema,
    access_schema,
    insert_access_schema,
    user_schema,
)

access_bp = Blueprint('access', __name__, url_prefix='/api')
grant_schema = GrantAccessSchema()
revoke_schema = RevokeAccessSchema()


@access_bp.route('/grant-access', methods=['POST'])
@login_required
@roles_required('patient')
def grant_access():
    uid = current_user()['id']
    try:
        body = grant_schema.load(request.get_json(silent=True) or {})
    except ValidationError as e:
        return jsonify({"message": "Failed to grant access", "error": e.messages}), 400

    try:
        storage = get_storage()
        doctor = storage.get_user_by_email(body['doctor_email'])
        if not doctor or doctor['role'] != 'doctor' or not doctor['verified']:
            return jsonify({"message": "Doctor not found or not verified"}), 400

        data = insert_access_schema.load({
            "patientId": uid,
            "doctorId": doctor['id'],
            "granted": True,
        })
        access = storage.grant_access(data)
        current_app.logger.info(f"Patient {uid} granted access to doctor {doctor['id']}")
        return jsonify({"message": "Access granted successfully", "access": access_schema.dump(access)}), 200

    except Exception as e:
        current_app.logger.error(f"Granting access failed for patient {uid}: {e}")
        return jsonify({"message": "Failed to grant access", "error": str(e)}), 500


@access_bp.route('/revoke-access', methods=['POST'])
@login_required
@roles_required('patient')
def revoke_access():
    uid = current_user()['id']
    try:
        body = revoke_schema.load(request.get_json(silent=True) or {})
    except ValidationError as e:
        return jsonify({"message": "Failed to revoke access", "error": e.messages}), 400

    try:
        get_storage().revoke_access(uid, body['doctor_id'])
        current_app.logger.info(f"Patient {uid} revoked access of doctor {body['doctor_id']}")
        return jsonify({"message": "Access revoked successfully"}), 200
    except Exception as e:
        current_app.logger.error(f"Revoking access failed for patient {uid}: {e}")
        return jsonify({"message": "Failed to revoke access", "error": str(e)}), 500


@access_bp.route('/doctor-patients', methods=['GET'])
@login_required
@roles_required('doctor')
def doctor_patients():
    uid = current_user()['id']
    try:
        storage = get_storage()
        patients = [storage.get_user(a['patient_id']) for a in storage.get_doctor_access(uid)]
        patients = [p for p in patients if p is not None]
        return jsonify({"patients": user_schema.dump(patients, many=True)}), 200
    except Exception as e:
        current_app.logger.error(f"Fetching patients of doctor {uid} failed: {e}")
        return jsonify({"message": "Failed to fetch authorized patients", "error": str(e)}), 500


@access_bp.route('/patient-access', methods=['GET'])
@login_required
@roles_required('patient')
def patient_access():
    uid = current_user()['id']
    try:
        storage = get_storage()
        access_list = storage.get_patient_access(uid)
        doctors = [storage.get_user(a['doctor_id']) for a in access_list]
        doctors = [d for d in doctors if d is not None]
        return jsonify({
            "doctors": user_schema.dump(doctors, many=True),
            "access": access_schema.dump(access_list, many=True),
        }), 200
    except Exception as e:
        current_app.logger.error(f"Fetching access list of patient {uid} failed: {e}")
        return jsonify({"message": "Failed to fetch patient access", "error": str(e)}), 500
