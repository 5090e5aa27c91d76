"""Mediator exceptions."""

from __future__ import annotations


class MediatorError(Exception):
    """Base for mediator errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, object] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.original_error = original_error


class InvalidInputKindError(MediatorError, TypeError):
    """push_all() was given something that is not a mapping or iterable of pairs."""


class InvalidListenerKindError(MediatorError, TypeError):
    """push()/unshift() was given something that is not a listener."""


class ProviderDefinitionError(MediatorError):
    """An instantiator could not build an instance from an identifier."""


class BadListenerError(MediatorError):
    """A deferred listener could not be materialized into a callable."""

    def __init__(
        self,
        message: str,
        *,
        event_name: str,
        position: int,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(
            message,
            code="bad_listener",
            details={"event_name": event_name, "position": position},
            original_error=original_error,
        )
        self.event_name = event_name
        self.position = position


class MediatorConfigurationError(MediatorError):
    """Config validation or load failure."""
