"""
API Models for request/response validation and Swagger documentation
"""

from flask_restx import fields, reqparse
from werkzeug.datastructures import FileStorage

from fileshare.api.v1 import api

# =============================================================================
# Request Models
# =============================================================================

upload_request = reqparse.RequestParser()
upload_request.add_argument(
    "file",
    location="files",
    type=FileStorage,
    required=True,
    help="File content (multipart form field 'file')",
)

# =============================================================================
# Response Models
# =============================================================================

upload_response = api.model(
    "UploadResponse",
    {
        "url": fields.String(
            description="Public download URL",
            example="http://localhost:8080/file-share-v1/download/0b9f4c9e-3c55-4d8c-9a8a-1d3f6e2b7a10",
        ),
        "uuid": fields.String(
            description="File identifier",
            example="0b9f4c9e-3c55-4d8c-9a8a-1d3f6e2b7a10",
        ),
        "success": fields.Boolean(description="Upload outcome", example=True),
    },
)

error_response = api.model(
    "ErrorResponse",
    {
        "error": fields.String(description="Error category", example="file_not_found"),
        "title": fields.String(description="Short error title"),
        "message": fields.String(description="User-friendly error message"),
        "action": fields.String(description="Suggested action"),
    },
)
