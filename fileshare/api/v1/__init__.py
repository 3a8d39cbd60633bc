"""
API v1 - File Share REST API

Upload and download endpoints with OpenAPI/Swagger documentation.
The blueprint is mounted under the configured API prefix by the app factory.
"""

from flask import Blueprint
from flask_restx import Api

api_v1_bp = Blueprint("api_v1", __name__)

# Initialize Flask-RESTX API with Swagger documentation
api = Api(
    api_v1_bp,
    version="1.0",
    title="File Share API",
    description="Temporary file sharing: upload a file with a lifetime, download it until it expires",
    doc="/docs",
    license="MIT",
)

# Import namespaces after api is created to avoid circular imports
from .namespaces import download_ns, upload_ns  # noqa: E402

api.add_namespace(upload_ns, path="/upload")
api.add_namespace(download_ns, path="/download")
