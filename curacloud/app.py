import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from curacloud.config import Config
from curacloud.extensions import cors
from curacloud.models import MongoStorage
from curacloud.routes.access import access_bp
from curacloud.routes.admin import admin_bp
from curacloud.routes.auth import auth_bp
from curacloud.routes.notes import notes_bp
from curacloud.routes.records import records_bp


def create_app(config_object=Config, mongo_client=None):
    app = Flask(__name__)
    app.config.from_object(config_object)

    origins = app.config["CORS_ORIGINS"]
    # A wildcard origin never gets the session cookie.
    cors.init_app(app, resources={r"/api/*": {"origins": origins}},
                  supports_credentials="*" not in origins)
    MongoStorage(app, client=mongo_client)

    app.register_blueprint(auth_bp)
    app.register_blueprint(records_bp)
    app.register_blueprint(access_bp)
    app.register_blueprint(notes_bp)
    app.register_blueprint(admin_bp)

    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify({"message": e.description}), e.code

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app = create_app()
    app.run(host='0.0.0.0', port=5000, debug=app.config["DEBUG"])
