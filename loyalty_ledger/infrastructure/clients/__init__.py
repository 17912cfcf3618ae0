"""External client implementations."""

from .event_dispatcher import HttpEventDispatcher

__all__ = [
    "HttpEventDispatcher",
]
