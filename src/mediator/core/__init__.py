"""Core: errors and constants shared across the mediator."""

from mediator.core.constants import DEFAULT_MAX_DELTA_DEPTH, DELTA_EVENT, DELTA_KINDS, DeltaKind
from mediator.core.errors import (
    BadListenerError,
    InvalidInputKindError,
    InvalidListenerKindError,
    MediatorConfigurationError,
    MediatorError,
    ProviderDefinitionError,
)

__all__ = [
    "DEFAULT_MAX_DELTA_DEPTH",
    "DELTA_EVENT",
    "DELTA_KINDS",
    "BadListenerError",
    "DeltaKind",
    "InvalidInputKindError",
    "InvalidListenerKindError",
    "MediatorConfigurationError",
    "MediatorError",
    "ProviderDefinitionError",
]
