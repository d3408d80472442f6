from flask import Blueprint, current_app, jsonify, request
from marshmallow import ValidationError

from curacloud.decorators import current_user, login_required, roles_required
from curacloud.extensions import get_storage
from curacloud.schemas import insert_note_schema, note_schema

notes_bp = Blueprint('notes', __name__, url_prefix='/api')


@notes_bp.route('/notes', methods=['POST'])
@login_required
@roles_required('doctor')
def add_note():
    uid = current_user()['id']
    body = request.get_json(silent=True) or {}
    payload = {**body, 'doctorId': uid} if isinstance(body, dict) else body
    try:
        data = insert_note_schema.load(payload)
    except ValidationError as e:
        return jsonify({"message": "Failed to add note", "error": e.messages}), 400

    try:
        storage = get_storage()
        if not storage.check_access(data['patient_id'], uid):
            return jsonify({"message": "Access denied to patient records"}), 403

        note = storage.create_note(data)
        current_app.logger.info(f"Doctor {uid} added note {note['id']} for patient {data['patient_id']}")
        return jsonify({"message": "Note added successfully", "note": note_schema.dump(note)}), 201
    except Exception as e:
        current_app.logger.error(f"Adding note failed for doctor {uid}: {e}")
        return jsonify({"message": "Failed to add note", "error": str(e)}), 500


@notes_bp.route('/notes', methods=['GET'])
@login_required
@roles_required('patient', 'doctor')
def list_notes():
    user = current_user()
    try:
        if user['role'] == 'patient':
            notes = get_storage().get_notes_by_patient(user['id'])
        else:
            notes = get_storage().get_notes_by_doctor(user['id'])
        return jsonify({"notes": note_schema.dump(notes, many=True)}), 200
    except Exception as e:
        current_app.logger.error(f"Listing notes failed for {user['id']}: {e}")
        return jsonify({"message": "Failed to fetch notes", "error": str(e)}), 500


@notes_bp.route('/notes/<patient_id>', methods=['GET'])
@login_required
@roles_required('doctor')
def patient_notes(patient_id):
    uid = current_user()['id']
    try:
        storage = get_storage()
        if not storage.check_access(patient_id, uid):
            return jsonify({"message": "Access denied to patient records"}), 403
        return jsonify({"notes": note_schema.dump(storage.get_notes_by_patient(patient_id), many=True)}), 200
    except Exception as e:
        current_app.logger.error(f"Doctor {uid} failed to fetch notes of {patient_id}: {e}")
        return jsonify({"message": "Failed to fetch notes", "error": str(e)}), 500
