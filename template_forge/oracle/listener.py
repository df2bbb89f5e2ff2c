"""
Polling listener for generationRequested events.

The off-ledger worker learns about new requests only through the contract's
event log; this listener keeps a cursor into the log and decodes each new
request for a callback.
"""

import asyncio
from typing import Awaitable, Callable, List, Optional

import structlog
from pydantic import BaseModel

from template_forge.core.event_log import EventLog
from template_forge.models.contract_model import ContractEvent, EventTopic
from template_forge.services.generation_registry import PAYLOAD_SEPARATOR

logger = structlog.get_logger(__name__)


class GenerationRequestEvent(BaseModel):
    """A decoded generationRequested event."""

    generation_id: int
    creator: str
    description: str
    category: str
    sequence: int
    block_timestamp: int


def decode_generation_event(event: ContractEvent) -> GenerationRequestEvent:
    """Split the combined payload back into description and category."""
    payload = event.payload or b""
    description, separator, category = payload.rpartition(PAYLOAD_SEPARATOR)
    if not separator:
        description, category = payload, b""

    return GenerationRequestEvent(
        generation_id=event.fields["generation_id"],
        creator=event.fields["creator"],
        description=description.decode("utf-8", errors="replace"),
        category=category.decode("utf-8", errors="replace"),
        sequence=event.sequence,
        block_timestamp=event.block_timestamp,
    )


class GenerationEventListener:
    """Polls an event log for generation requests."""

    def __init__(self, event_log: EventLog, poll_interval: float = 6.0, from_start: bool = False):
        self.event_log = event_log
        self.poll_interval = poll_interval
        self.cursor = 0 if from_start else len(event_log)
        self.is_listening = False
        self._task: Optional[asyncio.Task] = None

    def poll_once(self) -> List[GenerationRequestEvent]:
        """Decode every generation request appended since the last poll."""
        events = self.event_log.since(self.cursor)
        self.cursor += len(events)
        return [
            decode_generation_event(event)
            for event in events
            if event.topic == EventTopic.GENERATION_REQUESTED
        ]

    async def start(self, callback: Callable[[GenerationRequestEvent], Awaitable[object]]) -> None:
        if self.is_listening:
            logger.warning("Event listener already running")
            return

        self.is_listening = True
        logger.info("Starting event listener", poll_interval=self.poll_interval, cursor=self.cursor)
        self._task = asyncio.create_task(self._poll_loop(callback))

    async def _poll_loop(self, callback: Callable[[GenerationRequestEvent], Awaitable[object]]) -> None:
        while self.is_listening:
            try:
                for request in self.poll_once():
                    logger.info("New generation request", generation_id=request.generation_id)
                    try:
                        await callback(request)
                    except Exception as e:
                        logger.error(
                            "Failed to handle generation request",
                            generation_id=request.generation_id,
                            error=str(e),
                        )
                await asyncio.sleep(self.poll_interval)
            except asyncio.CancelledError:
                break

    async def stop(self) -> None:
        self.is_listening = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Event listener stopped")
