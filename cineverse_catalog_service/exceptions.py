"""Exception types raised across the catalog service."""


class CatalogServiceError(Exception):
    """Base class for all catalog service errors."""


class RepositoryError(CatalogServiceError):
    """The document store could not complete an operation."""


class LoadError(RepositoryError):
    """
    Reading a collection or document failed.

    Returned as a "load failed" state by subscriptions and services rather
    than raised into presentation code.
    """

    def __init__(self, message: str, collection: str | None = None):
        super().__init__(message)
        self.message = message
        self.collection = collection

    def to_dict(self) -> dict:
        return {"error": f"Error loading content: {self.message}"}


class DocumentWriteError(RepositoryError):
    """A create, update or delete failed. The caller keeps its form state."""


class DocumentNotFoundError(CatalogServiceError):
    """No document exists with the requested id."""

    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"Document '{doc_id}' not found in '{collection}'")
        self.collection = collection
        self.doc_id = doc_id


class InvalidFilterError(CatalogServiceError):
    """Repository filters support a single field equality only."""


class InvalidCriteriaError(CatalogServiceError):
    """Browse criteria contained an unknown value."""


class FormValidationError(CatalogServiceError):
    """
    Admin form input failed validation.

    Attributes:
        errors: Mapping of dotted field path to message
    """

    def __init__(self, errors: dict[str, str]):
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in errors.items()))
        self.errors = errors


class AuthenticationError(CatalogServiceError):
    """The request carried no user identity."""


class PermissionDeniedError(CatalogServiceError):
    """The user lacks the role required for this operation."""
