"""Service-layer exceptions for catalog publication and statistics."""

from typing import Any, Dict, List, Optional

from src.services.business_rules import ValidationError


class CatalogServiceError(Exception):
    """Base exception for catalog service errors."""

    status_code = 400
    code = "CATALOG_ERROR"
    title = "Catalog Error"

    def __init__(self, message: str, field: Optional[str] = None, meta: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.meta = meta or {}

    def to_errors(self) -> List[Dict[str, Any]]:
        """Render as JSON:API error objects."""
        error = {
            "status": str(self.status_code),
            "code": self.code,
            "title": self.title,
            "detail": self.message,
        }
        if self.field:
            error["source"] = {"pointer": f"/data/attributes/{self.field}"}
        if self.meta:
            error["meta"] = self.meta
        return [error]


class CatalogValidationError(CatalogServiceError):
    """Raised when request data breaks one or more business rules."""

    status_code = 422
    code = "VALIDATION_ERROR"
    title = "Validation Error"

    def __init__(self, message: str, validation_errors: List[ValidationError] = None):
        super().__init__(message)
        self.validation_errors = validation_errors or []

    def to_errors(self) -> List[Dict[str, Any]]:
        if not self.validation_errors:
            return super().to_errors()
        return [
            {
                "status": str(self.status_code),
                "code": error.code,
                "title": self.title,
                "detail": error.message,
                "source": {"pointer": f"/data/attributes/{error.field}"},
            }
            for error in self.validation_errors
        ]


class InvalidCopyrightEntry(CatalogServiceError):
    """A copyright entry names both or neither of artist and external owner."""

    status_code = 422
    code = "INVALID_COPYRIGHT"
    title = "Invalid Copyright Entry"


class UnknownFeaturingArtist(CatalogServiceError):
    """One or more artists referenced by the copyright ledger do not exist."""

    status_code = 422
    code = "ARTIST_NOT_FOUND"
    title = "Unknown Featuring Artist"


class CopyrightPercentageMismatch(CatalogServiceError):
    """Copyright percentages do not total exactly 100."""

    status_code = 422
    code = "COPYRIGHT_PERCENTAGE_ERROR"
    title = "Copyright Percentage Mismatch"


class GenreNotFound(CatalogServiceError):
    """Referenced genre does not exist."""

    status_code = 422
    code = "GENRE_NOT_FOUND"
    title = "Genre Not Found"


class StatsValidationError(CatalogServiceError):
    """Listen count is negative or lower than the stored count."""

    status_code = 422
    code = "INVALID_LISTENS_COUNT"
    title = "Invalid Listens Count"


class NotFoundError(CatalogServiceError):
    """Base class for missing resources."""

    status_code = 404
    code = "RESOURCE_NOT_FOUND"
    title = "Resource Not Found"


class ReleaseNotFound(NotFoundError):
    """Release is missing or not owned by the caller."""

    code = "RELEASE_NOT_FOUND"


class SingleNotFound(ReleaseNotFound):
    code = "SINGLE_NOT_FOUND"


class AlbumNotFound(ReleaseNotFound):
    code = "ALBUM_NOT_FOUND"


class StatNotFound(NotFoundError):
    code = "STAT_NOT_FOUND"


class ArtistNotFound(NotFoundError):
    code = "ARTIST_NOT_FOUND"


class ArtistsNotFound(NotFoundError):
    """One or more artists of a batch lookup do not exist."""

    code = "ARTISTS_NOT_FOUND"


class GenreMissing(NotFoundError):
    """Genre addressed by path does not exist."""

    code = "GENRE_NOT_FOUND"


class ConflictError(CatalogServiceError):
    """Request conflicts with existing data."""

    status_code = 409
    title = "Conflict"

    def __init__(self, message: str, code: str, field: Optional[str] = None):
        super().__init__(message, field=field)
        self.code = code


class InternalError(CatalogServiceError):
    """Unexpected persistence or infrastructure failure."""

    status_code = 500
    code = "INTERNAL_ERROR"
    title = "Internal Server Error"

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message)
