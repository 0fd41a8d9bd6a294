"""Profile, watchlist and personal recommendation endpoints."""
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
    LoadError,
)
from cineverse_catalog_service.services import AccountService

# Initialize blueprint
bp = func.Blueprint()

# Initialize service (singleton pattern)
account_service = AccountService()

logger = logging.getLogger(__name__)


@bp.route(route="auth/profile", methods=["POST"])
def sync_profile(req: func.HttpRequest) -> func.HttpResponse:
    """
    Create or refresh the signed-in user's profile.

    Body:
        - displayName, email, photoURL (role is never accepted)
    """
    try:
        uid = get_user_id(req)
        payload = get_json_body(req) or {}

        profile = account_service.sync_profile(
            uid,
            display_name=payload.get('displayName'),
            email=payload.get('email'),
            photo_url=payload.get('photoURL'),
        )
        return json_response(profile.to_json())

    except AuthenticationError as e:
        return error_response(str(e), 401)
    except (LoadError, DocumentWriteError) as e:
        return error_response(f"Login failed: {e}", 500)
    except Exception as e:
        logger.error(f"Error syncing profile: {str(e)}", exc_info=True)
        return error_response("Internal server error", 500)


@bp.route(route="profile", methods=["GET"])
def get_profile(req: func.HttpRequest) -> func.HttpResponse:
    """Signed-in user's profile and watchlist."""
    try:
        uid = get_user_id(req)
        profile = account_service.get_profile(uid)

        if profile is None:
            return error_response("Profile not found", 404)

        watchlist = account_service.get_watchlist(uid)
        return json_response({
            "profile": profile.to_json(),
            "watchlist": [item.to_json() for item in watchlist]
        })

    except AuthenticationError as e:
        return error_response(str(e), 401)
    except LoadError as e:
        return error_response(f"Error loading watchlist: {e.message}", 500)
    except Exception as e:
        logger.error(f"Error getting profile: {str(e)}", exc_info=True)
        return error_response("Internal server error", 500)


@bp.route(route="watchlist", methods=["GET"])
def get_watchlist(req: func.HttpRequest) -> func.HttpResponse:
    """Signed-in user's saved items."""
    try:
        uid = get_user_id(req)
        items = account_service.get_watchlist(uid)
        return json_response({
            "count": len(items),
            "items": [item.to_json() for item in items]
        })

    except AuthenticationError as e:
        return error_response(str(e), 401)
    except LoadError as e:
        return error_response(f"Error loading watchlist: {e.message}", 500)
    except Exception as e:
        logger.error(f"Error getting watchlist: {str(e)}", exc_info=True)
        return error_response("Internal server error", 500)


@bp.route(route="watchlist", methods=["POST"])
def add_to_watchlist(req: func.HttpRequest) -> func.HttpResponse:
    """
    Save an item.

    Body:
        - contentId: Catalog item ID
    """
    try:
        uid = get_user_id(req)
        payload = get_json_body(req) or {}
        content_id = payload.get('contentId')

        if not content_id:
            return error_response("contentId is required", 400)

        content = account_service.add_to_watchlist(uid, content_id)
        return json_response({"message": f"Added {content.title} to your watchlist.", "content": content.to_json()}, 201)

    except AuthenticationError as e:
        return error_response(str(e), 401)
    except DocumentNotFoundError:
        return error_response("Content not found", 404)
    except (LoadError, DocumentWriteError) as e:
        return error_response(f"Could not update watchlist: {e}", 500)
    except Exception as e:
        logger.error(f"Error adding to watchlist: {str(e)}", exc_info=True)
        return error_response("Internal server error", 500)


@bp.route(route="watchlist/{content_id}", methods=["DELETE"])
def remove_from_watchlist(req: func.HttpRequest) -> func.HttpResponse:
    """Remove a saved item."""
    try:
        uid = get_user_id(req)
        content_id = req.route_params.get('content_id')

        if not account_service.remove_from_watchlist(uid, content_id):
            return error_response("Item is not in your watchlist", 404, content_id=content_id)

        return json_response({"message": "Removed from your watchlist.", "content_id": content_id})

    except AuthenticationError as e:
        return error_response(str(e), 401)
    except DocumentWriteError as e:
        return error_response(f"Could not update watchlist: {e}", 500)
    except Exception as e:
        logger.error(f"Error removing from watchlist: {str(e)}", exc_info=True)
        return error_response("Internal server error", 500)


@bp.route(route="recommendations", methods=["GET"])
def get_recommendations(req: func.HttpRequest) -> func.HttpResponse:
    """AI recommendations based on the signed-in user's watchlist."""
    try:
        uid = get_user_id(req)
        items = account_service.recommend_from_history(uid)

        if items is None:
            return error_response("Recommendations unavailable", 503)

        return json_response({
            "count": len(items),
            "recommendations": [item.to_json() for item in items]
        })

    except AuthenticationError as e:
        return error_response(str(e), 401)
    except LoadError as e:
        return error_response(f"Error loading content: {e.message}", 500)
    except Exception as e:
        logger.error(f"Error getting recommendations: {str(e)}", exc_info=True)
        return error_response("Internal server error", 500)
