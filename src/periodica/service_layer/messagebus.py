"""Message bus routing commands to their handlers."""

import logging
from collections.abc import Callable
from typing import Any

from .commands import Command
from .repository import CatalogRepository

logger = logging.getLogger(__name__)

# pylint: disable=too-few-public-methods


class NoHandlerForCommand(LookupError):
    """Exception raised when no handler is found for a command."""

    def __init__(self, cmd: Command) -> None:
        super().__init__(f"No handler found for command {type(cmd).__name__}")


class MessageBus:
    """Synchronous command dispatcher; the entrypoint to the write side.

    Args:
        repository: The catalog repository the handlers were wired with. It
            is exposed here so entrypoints can run queries against the same
            store without rebuilding it.
        command_handlers: Command type to handler. Each handler takes only the
            command; dependencies are bound beforehand by the bootstrap.
    """

    def __init__(
        self,
        repository: CatalogRepository,
        command_handlers: dict[type[Command], Callable[[Command], Any]],
    ) -> None:
        self.repository = repository
        self._command_handlers = command_handlers

    def handle(self, cmd: Command) -> Any:
        """Dispatch `cmd` and return whatever its handler returns.

        Raises:
            NoHandlerForCommand: If no handler is registered for the command type.
            Exception: Whatever the handler raises, after logging it.
        """
        if not (handler := self._command_handlers.get(type(cmd))):
            logger.error("No handler found for command %s", type(cmd).__name__)
            raise NoHandlerForCommand(cmd)

        handler_name = self._get_handler_name(handler)
        logger.debug("Handling %s with %s", type(cmd).__name__, handler_name)
        try:
            return handler(cmd)
        except Exception:  # pylint: disable=broad-except
            logger.exception(
                "Exception handling command %s with handler %s",
                type(cmd).__name__,
                handler_name,
            )
            raise

    @staticmethod
    def _get_handler_name(fn: Callable[..., Any]) -> str:
        for candidate in (fn, getattr(fn, "func", None)):
            if name := getattr(candidate, "__name__", None):
                return name
        return repr(fn)
