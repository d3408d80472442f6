from flask import current_app
from flask_cors import CORS

from curacloud.models import MongoStorage

cors = CORS()


def get_storage() -> MongoStorage:
    """Storage adapter bound to the running app."""
    return current_app.extensions["storage"]
