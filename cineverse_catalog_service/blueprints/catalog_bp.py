"""Catalog browsing, home feed and watch page endpoints."""
import azure.functions as func
import logging

from cineverse_catalog_service.blueprints.http_utils import error_response, json_response
from cineverse_catalog_service.catalog import FilterCriteria
from cineverse_catalog_service.exceptions import InvalidCriteriaError, LoadError
from cineverse_catalog_service.services import CatalogService

# Initialize blueprint
bp = func.Blueprint()

# Initialize service (singleton pattern)
catalog_service = CatalogService()

logger = logging.getLogger(__name__)

SECTIONS = {
    "movies": "movie",
    "movie": "movie",
    "anime": "anime",
}


@bp.route(route="catalog/{content_type}", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def browse_catalog(req: func.HttpRequest) -> func.HttpResponse:
    """
    Browse one catalog section.

    Query Parameters:
        - q: Case-insensitive title search
        - genre: Exact genre (default: all)
        - year: Release year (default: all)
        - sort: rating-desc (default), rating-asc, year-desc, year-asc
    """
    try:
        section = req.route_params.get('content_type')
        content_type = SECTIONS.get(section or "")

        if content_type is None:
            return error_response("content_type must be 'movies' or 'anime'", 400)

        try:
            criteria = FilterCriteria.from_params(req.params, content_type=content_type)
        except InvalidCriteriaError as e:
            return error_response(str(e), 400)

        page = catalog_service.browse(content_type, criteria)

        if page.error:
            return error_response(f"Error loading content: {page.error}", 500)

        return json_response(page.to_dict())

    except Exception as e:
        logger.error(f"Error browsing catalog: {str(e)}", exc_info=True)
        return error_response("Internal server error", 500)


# noinspection PyUnusedLocal
@bp.route(route="home", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def get_home(req: func.HttpRequest) -> func.HttpResponse:
    """Hero item, trending, top anime and new movies."""
    try:
        page = catalog_service.home()

        if page.error:
            return error_response(f"Error loading content: {page.error}", 500)

        return json_response(page.to_dict())

    except Exception as e:
        logger.error(f"Error building home feed: {str(e)}", exc_info=True)
        return error_response("Internal server error", 500)


@bp.route(route="content/{content_id}", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def get_watch_page(req: func.HttpRequest) -> func.HttpResponse:
    """
    Watch page for a catalog item.

    Query Parameters:
        - episode: Zero-based episode index (anime only)
    """
    try:
        content_id = req.route_params.get('content_id')

        if not content_id:
            return error_response("content_id is required", 400)

        episode_index = None
        episode_param = req.params.get('episode')
        if episode_param is not None:
            try:
                episode_index = int(episode_param)
            except ValueError:
                return error_response("episode must be an integer", 400)
            if episode_index < 0:
                return error_response("episode must be 0 or greater", 400)

        try:
            page = catalog_service.watch(content_id, episode_index=episode_index)
        except LoadError as e:
            return error_response(f"Error loading content: {e.message}", 500)

        if page is None:
            return error_response("Content not found", 404, content_id=content_id)

        return json_response(page.to_dict())

    except Exception as e:
        logger.error(f"Error getting watch page: {str(e)}", exc_info=True)
        return error_response("Internal server error", 500)


# noinspection PyUnusedLocal
@bp.route(route="health", methods=["GET"])
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint."""
    return json_response({
        "status": "healthy",
        "service": "cineverse-catalog-service",
        "version": "1.0.0"
    })
