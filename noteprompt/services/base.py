"""
Base Service.

Base class for services. Services orchestrate repositories and carry the
workflow rules the repositories deliberately leave out. Store errors are
not caught here; they reach the caller unchanged.

Usage:
    from noteprompt.services.base import BaseService

    class NoteService(BaseService):
        def __init__(self, repository: NotesRepository) -> None:
            super().__init__()
            self.repo = repository
"""

from typing import Any

from noteprompt.core.logging import get_logger


class BaseService:
    """
    Base class for all services.

    Provides a logger bound to the subclass module and operation logging
    helpers that tag every record with the service name.
    """

    def __init__(self) -> None:
        self._logger = get_logger(self.__class__.__module__)

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
