"""
Off-ledger worker: listens for generation requests and reports completions.
"""

from .callback import OracleCallback
from .listener import GenerationEventListener, GenerationRequestEvent, decode_generation_event
from .worker import CodeGenerator, GenerationWorker, hash_code

__all__ = [
    "CodeGenerator",
    "GenerationEventListener",
    "GenerationRequestEvent",
    "GenerationWorker",
    "OracleCallback",
    "decode_generation_event",
    "hash_code",
]
