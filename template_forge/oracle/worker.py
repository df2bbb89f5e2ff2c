"""
Off-ledger generation worker loop.

Consumes generation requests, runs an injected code generator, and reports
the outcome back through the oracle callback. How code is produced is the
generator's business; the worker only hashes what it gets back.
"""

import hashlib
from collections import OrderedDict
from typing import Awaitable, Callable, Set, Union

import structlog

from template_forge.oracle.callback import OracleCallback
from template_forge.oracle.listener import GenerationEventListener, GenerationRequestEvent

logger = structlog.get_logger(__name__)

CodeGenerator = Callable[[GenerationRequestEvent], Awaitable[Union[str, bytes]]]


def hash_code(code: Union[str, bytes]) -> str:
    """sha256 hex digest of generated code."""
    if isinstance(code, str):
        code = code.encode("utf-8")
    return hashlib.sha256(code).hexdigest()


class GenerationWorker:
    """Glues the listener, a code generator and the oracle callback."""

    def __init__(
        self,
        listener: GenerationEventListener,
        oracle: OracleCallback,
        generator: CodeGenerator,
        max_handled: int = 10_000,
    ):
        self.listener = listener
        self.oracle = oracle
        self.generator = generator
        self.max_handled = max_handled
        self._handled: "OrderedDict[int, None]" = OrderedDict()
        self._in_flight: Set[int] = set()

    @property
    def handled(self) -> Set[int]:
        """Generation ids whose outcome the contract has accepted."""
        return set(self._handled)

    async def handle(self, request: GenerationRequestEvent) -> bool:
        """Generate and report one request. Returns whether generation succeeded."""
        generation_id = request.generation_id
        if generation_id in self._handled or generation_id in self._in_flight:
            logger.debug("Generation already handled", generation_id=generation_id)
            return False

        self._in_flight.add(generation_id)
        try:
            try:
                code = await self.generator(request)
            except Exception as e:
                logger.error("Code generation failed", generation_id=generation_id, error=str(e))
                self.oracle.complete_generation(generation_id, "", False)
                succeeded = False
            else:
                self.oracle.complete_generation(generation_id, hash_code(code), True)
                succeeded = True
        finally:
            self._in_flight.discard(generation_id)

        # Only accepted outcomes are remembered; a rejected callback can be retried
        self._mark_handled(generation_id)
        return succeeded

    def _mark_handled(self, generation_id: int) -> None:
        self._handled[generation_id] = None
        while len(self._handled) > self.max_handled:
            self._handled.popitem(last=False)

    async def start(self) -> None:
        await self.listener.start(self.handle)

    async def stop(self) -> None:
        await self.listener.stop()
