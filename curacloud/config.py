import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()

class Config:
    MONGODB_URI                 = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    MONGODB_DB                  = os.getenv("MONGODB_DB", "curacloud")

    SECRET_KEY                  = os.getenv("SESSION_SECRET", "curacloud-session-secret")
    SESSION_COOKIE_HTTPONLY     = True
    SESSION_COOKIE_SECURE       = os.getenv("SESSION_COOKIE_SECURE") == "True"
    PERMANENT_SESSION_LIFETIME  = timedelta(hours=24)

    UPLOAD_FOLDER               = os.path.abspath(os.getenv("UPLOAD_FOLDER", "uploads"))
    MAX_UPLOAD_SIZE             = 10 * 1024 * 1024
    # Whole request body, leaving room for the multipart envelope and form fields.
    MAX_CONTENT_LENGTH          = MAX_UPLOAD_SIZE + 64 * 1024
    ALLOWED_UPLOAD_TYPES        = ("application/pdf", "image/jpeg", "image/png", "image/jpg")

    BCRYPT_ROUNDS               = int(os.getenv("BCRYPT_ROUNDS", "12"))
    CORS_ORIGINS                = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")]
    DEBUG                       = os.getenv("FLASK_DEBUG") == "True"


class TestConfig(Config):
    TESTING                     = True
    SECRET_KEY                  = "test-session-secret"
    MONGODB_DB                  = "curacloud_test"
    BCRYPT_ROUNDS               = 4
    MAX_UPLOAD_SIZE             = 1024
    MAX_CONTENT_LENGTH          = 64 * 1024
