"""In-process event mediator: ordered listener queues, short-circuit broadcast, lazy listeners."""

from mediator.core.constants import DELTA_EVENT
from mediator.core.errors import (
    BadListenerError,
    InvalidInputKindError,
    InvalidListenerKindError,
    MediatorConfigurationError,
    MediatorError,
    ProviderDefinitionError,
)
from mediator.events import Deferred, Listener, ListenerEntry, Mediator, QueueDelta
from mediator.instantiation import ImportInstantiator, Instantiator
from mediator.notifier import EventMediator

__version__ = "0.1.0"

__all__ = [
    "DELTA_EVENT",
    "BadListenerError",
    "Deferred",
    "EventMediator",
    "ImportInstantiator",
    "Instantiator",
    "InvalidInputKindError",
    "InvalidListenerKindError",
    "Listener",
    "ListenerEntry",
    "Mediator",
    "MediatorConfigurationError",
    "MediatorError",
    "ProviderDefinitionError",
    "QueueDelta",
    "__version__",
]
