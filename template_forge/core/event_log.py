"""
Append-only log of structured contract events.

The contract only ever appends; reading is for external consumers such as
indexers and the off-ledger generation worker.
"""

import threading
from typing import Any, Dict, List, Optional

import structlog

from template_forge.models.contract_model import ContractEvent, EventTopic

logger = structlog.get_logger(__name__)


class EventLog:
    """Ordered record of every event emitted by committed operations."""

    def __init__(self) -> None:
        self._events: List[ContractEvent] = []
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._events)

    def emit(
        self,
        topic: EventTopic,
        fields: Optional[Dict[str, Any]] = None,
        payload: Any = None,
        block_timestamp: int = 0,
    ) -> ContractEvent:
        with self._lock:
            event = ContractEvent(
                sequence=len(self._events),
                topic=topic,
                fields=dict(fields or {}),
                payload=payload,
                block_timestamp=block_timestamp,
            )
            self._events.append(event)
        logger.debug("Event emitted", topic=topic.value, sequence=event.sequence)
        return event

    def mark(self) -> int:
        """Position to roll back to if the current operation fails."""
        return len(self._events)

    def rollback_to(self, mark: int) -> None:
        with self._lock:
            dropped = len(self._events) - mark
            del self._events[mark:]
        if dropped:
            logger.debug("Events discarded", count=dropped)

    def since(self, cursor: int = 0) -> List[ContractEvent]:
        with self._lock:
            return list(self._events[cursor:])

    def by_topic(self, topic: EventTopic) -> List[ContractEvent]:
        with self._lock:
            return [event for event in self._events if event.topic == topic]

    def last(self, topic: Optional[EventTopic] = None) -> Optional[ContractEvent]:
        events = self.by_topic(topic) if topic else self.since(0)
        return events[-1] if events else None
