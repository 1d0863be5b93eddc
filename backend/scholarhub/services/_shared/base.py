"""Base class and error translation shared by application services."""

from __future__ import annotations

from collections.abc import Iterable

from scholarhub.core import errors as api_errors
from scholarhub.repositories.base import Pagination
from scholarhub.services._shared.errors import (
    ConflictError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    NotFoundError,
    ServiceError,
    StorageError,
    SyncError,
    UnauthorizedError,
    ValidationError,
)
from scholarhub.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

MAX_PAGE_SIZE = 100


def translate_service_error(exc: Exception) -> Exception:
    """
    Map a service-level error to the matching API (HTTP) error.

    :param exc: Exception raised within a service.
    :returns: Translated exception ready to be re-raised; non-service
        exceptions are returned untouched.
    """
    if isinstance(exc, ValidationError):
        return api_errors.UnprocessableEntity(
            exc.message, details={"errors": exc.field_errors} if exc.field_errors else None
        )

    if isinstance(exc, NotFoundError):
        return api_errors.NotFound(str(exc))

    if isinstance(exc, ConflictError):
        return api_errors.Conflict(str(exc))

    if isinstance(exc, InvalidCredentialsError):
        return api_errors.Unauthorized(api_errors.INVALID_CREDENTIALS_MESSAGE)

    if isinstance(exc, UnauthorizedError):
        # Uniform message regardless of the reason.
        return api_errors.Unauthorized()

    if isinstance(exc, InvalidOrExpiredTokenError):
        return api_errors.InvalidOrExpiredToken()

    if isinstance(exc, StorageError):
        return api_errors.ServiceUnavailable(f"{exc.component} temporarily unavailable")

    if isinstance(exc, SyncError):
        return api_errors.ServiceUnavailable("Search temporarily unavailable")

    if isinstance(exc, ServiceError):
        return api_errors.APIError(message=str(exc), status_code=400, code="bad_request")

    return exc


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide read-only and read-write units of work.
    * Offer shared validation helpers (pagination).

    Services never touch ``db.session`` directly; they always go through a
    Unit of Work.
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """Create a read-write Unit of Work."""
        return SQLAlchemyUnitOfWork()

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param isolation: Transaction isolation level hint.
        :param enforce_db_readonly: Apply ``SET TRANSACTION READ ONLY`` when supported.
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
        )

    # ----------------------- Validation utilities ---------------------------

    def ensure_pagination(
        self, *, page: int, limit: int, sort: Iterable[str] | None = None
    ) -> Pagination:
        """
        Build a :class:`Pagination` with ``page >= 1`` and ``1 <= limit <= 100``.
        """
        page = max(1, int(page))
        limit = min(max(1, int(limit)), MAX_PAGE_SIZE)
        return Pagination(page=page, limit=limit, sort=list(sort or []))

