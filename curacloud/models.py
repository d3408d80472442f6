# curacloud/models.py

from datetime import datetime, timezone

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, MongoClient

USERS    = "users"
RECORDS  = "records"
ACCESS   = "access"
NOTES    = "notes"


def _serialize(doc):
    """Replace Mongo's ``_id`` with a string ``id``."""
    if doc is None:
        return None
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    return doc


def _object_id(value):
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class MongoStorage:
    """Document store adapter over the users/records/access/notes collections.

    The client connects on first use and is reused for the lifetime of the
    app. Every read returns plain dicts with a string ``id``, ``None`` or an
    empty list when nothing matches.
    """

    def __init__(self, app=None, client=None):
        self.uri = None
        self.db_name = None
        self._client = client
        self._db = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.uri = app.config["MONGODB_URI"]
        self.db_name = app.config["MONGODB_DB"]
        app.extensions["storage"] = self

    def _connect(self):
        if self._db is None:
            if self._client is None:
                self._client = MongoClient(self.uri)
            db = self._client[self.db_name]
            db[USERS].create_index([("email", ASCENDING)], unique=True)
            self._db = db
        return self._db

    def _insert(self, collection, data, stamp):
        doc = dict(data)
        doc[stamp] = datetime.now(timezone.utc)
        result = self._connect()[collection].insert_one(doc)
        doc["_id"] = result.inserted_id
        return _serialize(doc)

    def _find(self, collection, query, sort_by=None):
        cursor = self._connect()[collection].find(query)
        if sort_by:
            cursor = cursor.sort(sort_by, DESCENDING)
        return [_serialize(doc) for doc in cursor]

    # === Users ===

    def get_user(self, user_id):
        oid = _object_id(user_id)
        if oid is None:
            return None
        return _serialize(self._connect()[USERS].find_one({"_id": oid}))

    def get_user_by_email(self, email):
        return _serialize(self._connect()[USERS].find_one({"email": email}))

    def create_user(self, data):
        return self._insert(USERS, data, "created_at")

    def update_user_verification(self, user_id, verified):
        oid = _object_id(user_id)
        if oid is None:
            return False
        result = self._connect()[USERS].update_one({"_id": oid}, {"$set": {"verified": verified}})
        return result.matched_count > 0

    def get_all_users(self):
        return self._find(USERS, {})

    def get_pending_verifications(self):
        return self._find(USERS, {"verified": False, "role": {"$in": ["doctor", "patient"]}})

    # === Records ===

    def create_record(self, data):
        return self._insert(RECORDS, data, "upload_date")

    def get_record(self, record_id):
        oid = _object_id(record_id)
        if oid is None:
            return None
        return _serialize(self._connect()[RECORDS].find_one({"_id": oid}))

    def get_records_by_patient(self, patient_id):
        return self._find(RECORDS, {"patient_id": patient_id}, sort_by="upload_date")

    def get_all_records(self):
        return self._find(RECORDS, {})

    # === Access ===

    def grant_access(self, data):
        # A pair holds at most one document: drop the previous grant first.
        self._connect()[ACCESS].delete_one({
            "patient_id": data["patient_id"],
            "doctor_id": data["doctor_id"],
        })
        return self._insert(ACCESS, data, "granted_at")

    def revoke_access(self, patient_id, doctor_id):
        self._connect()[ACCESS].delete_one({"patient_id": patient_id, "doctor_id": doctor_id})

    def get_patient_access(self, patient_id):
        return self._find(ACCESS, {"patient_id": patient_id, "granted": True})

    def get_doctor_access(self, doctor_id):
        return self._find(ACCESS, {"doctor_id": doctor_id, "granted": True})

    def check_access(self, patient_id, doctor_id):
        found = self._connect()[ACCESS].find_one({
            "patient_id": patient_id,
            "doctor_id": doctor_id,
            "granted": True,
        })
        return found is not None

    # === Notes ===

    def create_note(self, data):
        return self._insert(NOTES, data, "created_at")

    def get_notes_by_patient(self, patient_id):
        return self._find(NOTES, {"patient_id": patient_id}, sort_by="created_at")

    def get_notes_by_doctor(self, doctor_id):
        return self._find(NOTES, {"doctor_id": doctor_id}, sort_by="created_at")
