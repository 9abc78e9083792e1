# bontemp/core/events.py
"""
Document change dispatch.

Handlers subscribe to a document path pattern such as
``pubblicazioni/{postId}/likes/{userId}`` and a change kind. A transport
(the Firestore watch in ``bontemp.triggers.watcher``, or a test) turns store
changes into ``ChangeEvent`` objects and hands them to ``EventDispatcher.dispatch``,
which calls every matching handler with the wildcard values extracted from the path.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

_WILDCARD = re.compile(r'\{(\w+)\}')


class ChangeType(Enum):
    """Kind of document write. WRITE subscribes to all of them."""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    WRITE = "write"


@dataclass
class ChangeEvent:
    """A single document write as seen by a handler."""
    path: str
    change_type: ChangeType
    before: Optional[Dict[str, Any]] = None
    after: Optional[Dict[str, Any]] = None
    params: Dict[str, str] = field(default_factory=dict)


EventHandler = Callable[[ChangeEvent], Any]


def compile_path_pattern(pattern: str) -> re.Pattern:
    """
    Turns ``a/{x}/b/{y}`` into a regex with one named group per wildcard.
    A wildcard matches exactly one path segment.
    """
    parts = []
    last = 0
    for match in _WILDCARD.finditer(pattern):
        parts.append(re.escape(pattern[last:match.start()]))
        parts.append(f"(?P<{match.group(1)}>[^/]+)")
        last = match.end()
    parts.append(re.escape(pattern[last:]))
    return re.compile('^' + ''.join(parts) + '$')


@dataclass
class _Subscription:
    pattern: str
    regex: re.Pattern
    change_type: ChangeType
    handler: EventHandler

    def accepts(self, change_type: ChangeType) -> bool:
        return self.change_type is ChangeType.WRITE or self.change_type is change_type


class EventDispatcher:
    """Routes ChangeEvents to the handlers registered for their path and kind."""

    def __init__(self):
        self._subscriptions: List[_Subscription] = []

    def register(self, pattern: str, change_type: ChangeType, handler: EventHandler) -> None:
        self._subscriptions.append(
            _Subscription(pattern=pattern, regex=compile_path_pattern(pattern), change_type=change_type, handler=handler)
        )
        logger.info(f"Handler '{getattr(handler, '__name__', handler)}' registered for {change_type.value} on {pattern}")

    def on(self, pattern: str, change_type: ChangeType = ChangeType.WRITE):
        """Decorator form of register()."""
        def decorator(handler: EventHandler) -> EventHandler:
            self.register(pattern, change_type, handler)
            return handler
        return decorator

    def dispatch(self, event: ChangeEvent) -> int:
        """
        Delivers the event to every matching handler and returns how many were called.

        Each handler receives its own copy of the event with ``params`` filled from
        its pattern. Handler errors are not caught here; handlers own their failure policy.
        """
        path = event.path.strip('/')
        delivered = 0
        for subscription in self._subscriptions:
            if not subscription.accepts(event.change_type):
                continue
            match = subscription.regex.match(path)
            if not match:
                continue
            subscription.handler(ChangeEvent(
                path=path,
                change_type=event.change_type,
                before=event.before,
                after=event.after,
                params=match.groupdict()
            ))
            delivered += 1
        if not delivered:
            logger.debug(f"No handler for {event.change_type.value} on {path}")
        return delivered
