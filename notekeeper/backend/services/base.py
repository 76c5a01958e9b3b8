"""
Base Service.

Base class for all services providing common patterns for business logic.
Services orchestrate storage and repositories, handle transactions, and
implement business rules.

Usage:
    from notekeeper.backend.services.base import BaseService

    class TagService(BaseService):
        def __init__(self, session: AsyncSession) -> None:
            super().__init__()
            self.repo = TagRepository(session)

        async def create_tag(self, data: TagCreate) -> Tag:
            # Validation
            if await self.repo.get_by_name(data.name) is not None:
                raise ConflictError("Tag already exists")

            return await self.repo.create(name=data.name, color=data.color)
"""

from collections.abc import Awaitable
from typing import Any, TypeVar

from notekeeper.backend.core.database import translate_db_errors
from notekeeper.backend.core.exceptions import ValidationError
from notekeeper.backend.core.logging import get_logger

T = TypeVar("T")


class BaseService:
    """
    Base class for all services.

    Provides:
    - Logging context
    - Error wrapping for database operations
    - Common validation patterns
    """

    def __init__(self) -> None:
        self._logger = get_logger(self.__class__.__module__)

    async def _execute_db_operation(
        self,
        operation: str,
        coro: Awaitable[T],
        target: str | None = None,
    ) -> T:
        """
        Execute a database operation with error handling.

        Wraps database operations to convert SQLAlchemy exceptions
        to application-specific exceptions.

        Args:
            operation: Description of the operation for logging
            coro: Coroutine to execute
            target: ID or name the operation addresses, if any

        Returns:
            Result of the coroutine

        Raises:
            ConflictError: For unique constraint violations
            StorageUnavailableError: For other database errors
        """
        async with translate_db_errors(operation, target):
            return await coro

    def _validate_required(
        self,
        fields: dict[str, Any],
        field_names: list[str],
    ) -> None:
        """
        Validate that required fields are present and not empty.

        Args:
            fields: Dictionary of field names to values
            field_names: List of required field names

        Raises:
            ValidationError: If any required field is missing or empty
        """
        missing = []
        for name in field_names:
            value = fields.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)

        if missing:
            raise ValidationError(
                "Required fields missing",
                details={"missing_fields": missing},
            )

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """
        Log a service operation with context.

        Args:
            operation: Description of the operation
            **context: Additional context to include in log
        """
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """
        Log debug information.

        Args:
            message: Debug message
            **context: Additional context to include in log
        """
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
