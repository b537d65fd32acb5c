"""
Event Bus delivering decoded headers and transactions to consumers
"""

import inspect
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class EventTypes:
    """Standard event types"""
    BLOCK_HEADER = "block_header"
    TRANSACTION = "transaction"


class EventBus:
    """
    Dispatches records to subscribed consumers.

    ``emit`` awaits every listener, one after the other in subscription
    order, before returning. The scanner awaits ``emit`` before decoding the
    next record, so consumers see records in exactly the order they were
    produced. Listeners may be plain functions or coroutines.
    """

    def __init__(self):
        self.listeners: Dict[str, List[Callable]] = defaultdict(list)
        self.emitted: Dict[str, int] = defaultdict(int)
        logger.debug("EventBus initialized")

    async def _call_listener(self, listener: Callable, payload: Any):
        """Call a listener with error handling"""
        try:
            result = listener(payload)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"Error in listener {getattr(listener, '__name__', listener)}: {e}")
            raise

    def subscribe(self, event_type: str, listener: Callable):
        """Subscribe to an event type"""
        self.listeners[event_type].append(listener)
        logger.info(f"Subscribed {getattr(listener, '__name__', listener)} to {event_type}")

    def unsubscribe(self, event_type: str, listener: Callable):
        """Unsubscribe from an event type"""
        if listener in self.listeners[event_type]:
            self.listeners[event_type].remove(listener)
            logger.info(f"Unsubscribed {getattr(listener, '__name__', listener)} from {event_type}")

    async def emit(self, event_type: str, payload: Any):
        """Deliver ``payload`` to every listener of ``event_type``"""
        self.emitted[event_type] += 1
        for listener in list(self.listeners.get(event_type, [])):
            await self._call_listener(listener, payload)
