"""Azure Functions blueprints"""

from cineverse_catalog_service.blueprints.account_bp import bp as account_bp
from cineverse_catalog_service.blueprints.admin_bp import bp as admin_bp
from cineverse_catalog_service.blueprints.catalog_bp import bp as catalog_bp

__all__ = [
    "account_bp",
    "admin_bp",
    "catalog_bp",
]
