"""Admin content management endpoints (role == admin only)."""
import azure.functions as func
import logging

from cineverse_catalog_service.blueprints.http_utils import (
    error_response,
    get_json_body,
    get_user_id,
    json_response,
)
from cineverse_catalog_service.exceptions import (
    AuthenticationError,
    DocumentNotFoundError,
    DocumentWriteError,
    FormValidationError,
    LoadError,
    PermissionDeniedError,
)
from cineverse_catalog_service.services import AccountService, AdminContentService

# Initialize blueprint
bp = func.Blueprint()

# Initialize services (singleton pattern)
admin_service = AdminContentService()
account_service = AccountService()

logger = logging.getLogger(__name__)


def _authorize(req: func.HttpRequest) -> func.HttpResponse | None:
    """Return an error response unless the caller is an admin."""
    try:
        account_service.require_admin(get_user_id(req))
    except AuthenticationError as e:
        return error_response(str(e), 401)
    except PermissionDeniedError as e:
        return error_response(str(e), 403)
    return None


@bp.route(route="manage/content", methods=["GET"])
def list_admin_content(req: func.HttpRequest) -> func.HttpResponse:
    """All catalog items for the manage-content table."""
    try:
        denied = _authorize(req)
        if denied:
            return denied

        items = admin_service.list_content()
        return json_response({
            "count": len(items),
            "items": [item.to_json() for item in items]
        })

    except LoadError as e:
        return error_response(f"Error loading content: {e.message}", 500)
    except Exception as e:
        logger.error(f"Error listing content: {str(e)}", exc_info=True)
        return error_response("Internal server error", 500)


@bp.route(route="manage/content", methods=["POST"])
def create_admin_content(req: func.HttpRequest) -> func.HttpResponse:
    """Upload a new catalog item."""
    try:
        denied = _authorize(req)
        if denied:
            return denied

        payload = get_json_body(req)
        if payload is None:
            return error_response("Request body must be a JSON object", 400)

        content = admin_service.create_content(payload)
        return json_response({
            "message": f"{content.title} has been successfully added.",
            "content": content.to_json()
        }, status_code=201)

    except FormValidationError as e:
        return error_response("Validation failed", 422, errors=e.errors)
    except DocumentWriteError as e:
        return error_response(f"Save failed: {e}", 500)
    except Exception as e:
        logger.error(f"Error creating content: {str(e)}", exc_info=True)
        return error_response("Internal server error", 500)


@bp.route(route="manage/content/{content_id}", methods=["GET"])
def get_admin_content_form(req: func.HttpRequest) -> func.HttpResponse:
    """Initial values for the edit form."""
    try:
        denied = _authorize(req)
        if denied:
            return denied

        content_id = req.route_params.get('content_id')
        form = admin_service.get_edit_form(content_id)
        if form is None:
            return error_response("Content not found", 404, content_id=content_id)

        return json_response(form)

    except LoadError as e:
        return error_response(f"Error loading content: {e.message}", 500)
    except Exception as e:
        logger.error(f"Error loading edit form: {str(e)}", exc_info=True)
        return error_response("Internal server error", 500)


@bp.route(route="manage/content/{content_id}", methods=["PUT"])
def update_admin_content(req: func.HttpRequest) -> func.HttpResponse:
    """Save changes to a catalog item."""
    try:
        denied = _authorize(req)
        if denied:
            return denied

        content_id = req.route_params.get('content_id')
        payload = get_json_body(req)
        if payload is None:
            return error_response("Request body must be a JSON object", 400)

        content = admin_service.update_content(content_id, payload)
        return json_response({
            "message": f"{content.title} has been successfully updated.",
            "content": content.to_json()
        })

    except FormValidationError as e:
        return error_response("Validation failed", 422, errors=e.errors)
    except DocumentNotFoundError:
        return error_response("Content not found", 404, content_id=req.route_params.get('content_id'))
    except DocumentWriteError as e:
        return error_response(f"Save failed: {e}", 500)
    except Exception as e:
        logger.error(f"Error updating content: {str(e)}", exc_info=True)
        return error_response("Internal server error", 500)


@bp.route(route="manage/content/{content_id}", methods=["DELETE"])
def delete_admin_content(req: func.HttpRequest) -> func.HttpResponse:
    """Delete a catalog item."""
    try:
        denied = _authorize(req)
        if denied:
            return denied

        content_id = req.route_params.get('content_id')
        if not admin_service.delete_content(content_id):
            return error_response("Content not found", 404, content_id=content_id)

        return json_response({"message": "The content has been successfully deleted.", "content_id": content_id})

    except DocumentWriteError as e:
        return error_response(f"There was an error deleting the content: {e}", 500)
    except Exception as e:
        logger.error(f"Error deleting content: {str(e)}", exc_info=True)
        return error_response("Internal server error", 500)


@bp.route(route="manage/metadata", methods=["POST"])
def auto_fetch_metadata(req: func.HttpRequest) -> func.HttpResponse:
    """
    AI-suggested duration, tags and description for an upload.

    Body:
        - videoUrl: URL of the video
        - title: Content title
    """
    try:
        denied = _authorize(req)
        if denied:
            return denied

        payload = get_json_body(req) or {}
        video_url = payload.get('videoUrl')
        title = payload.get('title')

        if not video_url or not title:
            return error_response("videoUrl and title are required", 400)

        metadata = admin_service.auto_fetch_metadata(video_url, title)
        if metadata is None:
            return error_response("Metadata unavailable", 503)

        return json_response(metadata.model_dump())

    except Exception as e:
        logger.error(f"Error fetching metadata: {str(e)}", exc_info=True)
        return error_response("Internal server error", 500)
