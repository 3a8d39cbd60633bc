"""
API Namespaces - Organized endpoint groups
"""

from flask import current_app, request, send_file
from flask_restx import Namespace, Resource

from fileshare.api.v1.models import error_response, upload_request, upload_response
from fileshare.domain.errors import ErrorCategory, create_error_response
from fileshare.domain.errors import FileNotFoundError as DomainFileNotFoundError
from fileshare.domain.file_storage import FileId, StorageIndex

# =============================================================================
# Upload Namespace - Store a file with a lifetime
# =============================================================================

upload_ns = Namespace("upload", description="File upload operations")


@upload_ns.route("/<int:lifetime>")
@upload_ns.param("lifetime", "Lifetime of the file in seconds")
class Upload(Resource):
    """Upload a file"""

    @upload_ns.doc("upload_file")
    @upload_ns.expect(upload_request)
    @upload_ns.response(200, "Success", upload_response)
    @upload_ns.response(400, "Bad Request", error_response)
    @upload_ns.response(500, "Internal Server Error", error_response)
    def put(self, lifetime):
        """
        Upload a file

        Stores the 'file' part of a multipart form for the given number of
        seconds and returns the URL it can be downloaded from.
        """
        file = request.files.get("file")
        if file is None:
            return create_error_response(
                ErrorCategory.INVALID_REQUEST,
                "Missing 'file' in multipart form",
            )

        try:
            storage_index = current_app.container.resolve(StorageIndex)
            file_id = storage_index.upload(lifetime, file.stream, file.filename or "")

        except Exception as e:
            current_app.logger.exception(f"Upload of {file.filename} failed: {e}")
            return create_error_response(
                ErrorCategory.UPLOAD_FAILED,
                f"Upload failed: {e}",
            )

        return {
            "url": current_app.fileshare_config.download_url(file_id),
            "uuid": file_id,
            "success": True,
        }, 200


# =============================================================================
# Download Namespace - Retrieve a stored file
# =============================================================================

download_ns = Namespace("download", description="File download operations")


@download_ns.route("/<string:file_id>")
@download_ns.param("file_id", "The file identifier")
class Download(Resource):
    """Download a file by identifier"""

    @download_ns.doc("download_file")
    @download_ns.response(200, "File content")
    @download_ns.header("X-Expires-In", "Seconds until the file expires")
    @download_ns.response(404, "File Not Found", error_response)
    @download_ns.response(410, "File Expired", error_response)
    @download_ns.response(500, "Internal Server Error", error_response)
    def get(self, file_id):
        """
        Download a file

        Streams the file as an attachment named after the uploaded file.
        Files past their lifetime answer 410 even before they are collected.
        """
        if not FileId.is_valid(file_id):
            return create_error_response(
                ErrorCategory.FILE_NOT_FOUND,
                f"Malformed identifier {file_id}",
            )

        try:
            storage_index = current_app.container.resolve(StorageIndex)
            descriptor = storage_index.get(file_id)
            now = storage_index.clock.now()

            if descriptor.is_expired(now):
                current_app.logger.debug(f"[DOWNLOAD] File {file_id} has expired")
                return create_error_response(
                    ErrorCategory.FILE_EXPIRED,
                    f"File {file_id} expired at {descriptor.expires}",
                )

            content = storage_index.open_blob(descriptor)

        except DomainFileNotFoundError:
            current_app.logger.debug(f"[DOWNLOAD] File {file_id} not found")
            return create_error_response(
                ErrorCategory.FILE_NOT_FOUND,
                f"File {file_id} not found",
            )
        except Exception as e:
            current_app.logger.exception(f"Error serving file {file_id}: {e}")
            return create_error_response(
                ErrorCategory.SYSTEM_ERROR,
                f"Internal server error: {e}",
            )

        current_app.logger.info(f"[DOWNLOAD] Serving file {descriptor.name} ({file_id})")
        response = send_file(
            content,
            as_attachment=True,
            download_name=descriptor.name or file_id,
            mimetype="application/octet-stream",
        )
        response.headers["X-Expires-In"] = str(descriptor.remaining_seconds(now))
        return response
