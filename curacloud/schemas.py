from marshmallow import EXCLUDE, Schema, fields, validate

ROLES = ("patient", "doctor", "admin")


class BaseSchema(Schema):
    class Meta:
        unknown = EXCLUDE


class UserSchema(BaseSchema):
    id          = fields.String(data_key="_id", dump_only=True)
    name        = fields.String(required=True, validate=validate.Length(min=1))
    email       = fields.Email(required=True)
    password    = fields.String(required=True, load_only=True, validate=validate.Length(min=6))
    role        = fields.String(required=True, validate=validate.OneOf(ROLES))
    verified    = fields.Boolean(load_default=False)
    specialty   = fields.String()
    created_at  = fields.DateTime(data_key="createdAt", dump_only=True)


class RecordSchema(BaseSchema):
    id          = fields.String(data_key="_id", dump_only=True)
    patient_id  = fields.String(data_key="patientId", required=True)
    filename    = fields.String(required=True)
    file_path   = fields.String(data_key="filePath", required=True)
    description = fields.String(required=True)
    file_type   = fields.String(data_key="fileType", required=True)
    file_size   = fields.Integer(data_key="fileSize", required=True)
    upload_date = fields.DateTime(data_key="uploadDate", dump_only=True)


class AccessSchema(BaseSchema):
    id          = fields.String(data_key="_id", dump_only=True)
    patient_id  = fields.String(data_key="patientId", required=True)
    doctor_id   = fields.String(data_key="doctorId", required=True)
    granted     = fields.Boolean(load_default=True)
    granted_at  = fields.DateTime(data_key="grantedAt", dump_only=True)


class NoteSchema(BaseSchema):
    id                = fields.String(data_key="_id", dump_only=True)
    doctor_id         = fields.String(data_key="doctorId", required=True)
    patient_id        = fields.String(data_key="patientId", required=True)
    consultation_type = fields.String(data_key="consultationType", required=True)
    content           = fields.String(required=True)
    diagnosis         = fields.String()
    next_appointment  = fields.String(data_key="nextAppointment")
    created_at        = fields.DateTime(data_key="createdAt", dump_only=True)


class SessionUserSchema(Schema):
    id       = fields.String(data_key="_id")
    email    = fields.String()
    role     = fields.String()
    name     = fields.String()
    verified = fields.Boolean()


class LoginSchema(BaseSchema):
    email    = fields.String(required=True)
    password = fields.String(required=True)
    role     = fields.String(required=True)


class GrantAccessSchema(BaseSchema):
    doctor_email = fields.Email(data_key="doctorEmail", required=True)


class RevokeAccessSchema(BaseSchema):
    doctor_id = fields.String(data_key="doctorId", required=True)


class VerifyUserSchema(BaseSchema):
    user_id  = fields.String(data_key="userId", required=True)
    verified = fields.Boolean(required=True)


# Insert variants leave out what the server assigns.
user_schema          = UserSchema()
insert_user_schema   = UserSchema(exclude=("id", "created_at"))
record_schema        = RecordSchema()
insert_record_schema = RecordSchema(exclude=("id", "upload_date"))
access_schema        = AccessSchema()
insert_access_schema = AccessSchema(exclude=("id", "granted_at"))
note_schema          = NoteSchema()
insert_note_schema   = NoteSchema(exclude=("id", "created_at"))
session_user_schema  = SessionUserSchema()
