from flask import Flask

from zkgate.routes import SERVICE_KEY, proof_bp


def create_app(service, url_prefix=""):
    app = Flask(__name__)
    app.extensions[SERVICE_KEY] = service
    app.register_blueprint(proof_bp, url_prefix=url_prefix or None)
    return app
