import os

from flask import Blueprint, current_app, jsonify, request, send_from_directory
from marshmallow import ValidationError

from curacloud.decorators import current_user, login_required, roles_required
from curacloud.extensions import get_storage
from curacloud.schemas import insert_record_schema, record_schema
from curacloud.uploads import UploadError, discard_upload, save_upload

records_bp = Blueprint('records', __name__, url_prefix='/api')


@records_bp.route('/records', methods=['POST'])
@login_required
@roles_required('patient')
def create_record():
    uid = current_user()['id']
    body = request.get_json(silent=True) or {}
    payload = {**body, 'patientId': uid} if isinstance(body, dict) else body
    try:
        data = insert_record_schema.load(payload)
    except ValidationError as e:
        return jsonify({"message": "Failed to create record", "error": e.messages}), 400

    try:
        record = get_storage().create_record(data)
        return jsonify({"message": "Record created successfully", "record": record_schema.dump(record)}), 201
    except Exception as e:
        current_app.logger.error(f"Record creation failed for patient {uid}: {e}")
        return jsonify({"message": "Failed to create record", "error": str(e)}), 500


@records_bp.route('/upload', methods=['POST'])
@login_required
@roles_required('patient')
def upload():
    uid = current_user()['id']
    file = request.files.get('file')
    if not file or not file.filename:
        return jsonify({"message": "No file uploaded"}), 400

    try:
        path, size = save_upload(file)
    except UploadError as e:
        current_app.logger.warning(f"Rejected upload '{file.filename}' from patient {uid}: {e.message}")
        return jsonify({"message": e.message}), e.status_code

    try:
        data = insert_record_schema.load({
            "patientId": uid,
            "filename": file.filename,
            "filePath": path,
            "description": request.form.get('description', ''),
            "fileType": file.mimetype,
            "fileSize": size,
        })
        # Only records written here point at a file this server saved.
        data['stored'] = True
        record = get_storage().create_record(data)
        current_app.logger.info(f"Patient {uid} uploaded record {record['id']}")
        return jsonify({"message": "File uploaded successfully", "record": record_schema.dump(record)}), 201

    except Exception as e:
        discard_upload(path)
        current_app.logger.error(f"Upload failed for patient {uid}: {e}")
        return jsonify({"message": "Upload failed", "error": str(e)}), 500


@records_bp.route('/records', methods=['GET'])
@login_required
def list_records():
    user = current_user()
    try:
        if user['role'] == 'patient':
            records = get_storage().get_records_by_patient(user['id'])
        elif user['role'] == 'admin':
            records = get_storage().get_all_records()
        else:
            return jsonify({"message": "Access denied"}), 403
        return jsonify({"records": record_schema.dump(records, many=True)}), 200
    except Exception as e:
        current_app.logger.error(f"Listing records failed for {user['id']}: {e}")
        return jsonify({"message": "Failed to fetch records", "error": str(e)}), 500


@records_bp.route('/records/<patient_id>', methods=['GET'])
@login_required
@roles_required('doctor')
def patient_records(patient_id):
    uid = current_user()['id']
    try:
        storage = get_storage()
        if not storage.check_access(patient_id, uid):
            return jsonify({"message": "Access denied to patient records"}), 403

        records = storage.get_records_by_patient(patient_id)
        return jsonify({"records": record_schema.dump(records, many=True)}), 200
    except Exception as e:
        current_app.logger.error(f"Doctor {uid} failed to fetch records of {patient_id}: {e}")
        return jsonify({"message": "Failed to fetch patient records", "error": str(e)}), 500


@records_bp.route('/download/<record_id>', methods=['GET'])
@login_required
def download(record_id):
    user = current_user()
    storage = get_storage()
    record = storage.get_record(record_id)
    if record is None:
        return jsonify({"message": "Record not found"}), 404

    owner = record['patient_id']
    if user['role'] == 'patient':
        allowed = owner == user['id']
    elif user['role'] == 'doctor':
        allowed = storage.check_access(owner, user['id'])
    else:
        allowed = user['role'] == 'admin'
    if not allowed:
        return jsonify({"message": "Access denied to patient records"}), 403

    if not record.get('stored'):
        return jsonify({"message": "No file stored for this record"}), 404

    return send_from_directory(
        current_app.config['UPLOAD_FOLDER'],
        os.path.basename(record['file_path']),
        mimetype=record['file_type'],
        as_attachment=False,
        download_name=record['filename'],
    )
