"""
Generation requests and their resolution by the privileged operator.

Lifecycle:
    Pending --(complete, success)--> Completed --(mint)--> Completed with token
    Pending --(complete, failure)--> Failed

Resolution is reported by a single trusted operator account; there is no
support for multiple attestors or disputes.
"""

import structlog

from template_forge.core.clock import SECONDS_PER_DAY
from template_forge.core.contract_state import ContractState
from template_forge.core.errors import InvalidState, NotFound, QuotaExceeded
from template_forge.models.contract_model import CallContext, EventTopic, Generation, GenerationStatus
from template_forge.services.access_control import AccessControl
from template_forge.services.rate_limiter import RateLimiter
from template_forge.utils.validators import ensure_u64, to_buffer

logger = structlog.get_logger(__name__)

# Separates description from category in the generationRequested payload
PAYLOAD_SEPARATOR = b"|||"


def resolved_status(success: bool) -> GenerationStatus:
    return GenerationStatus.COMPLETED if success else GenerationStatus.FAILED


class GenerationRegistry:
    """Creates and tracks generation requests."""

    def __init__(self, state: ContractState, access: AccessControl, rate_limiter: RateLimiter):
        self.state = state
        self.access = access
        self.rate_limiter = rate_limiter

    def get(self, generation_id: int) -> Generation:
        generation = self.state.generations(generation_id).get()
        if generation is None:
            raise NotFound("Generation not found", entity="generation", entity_id=generation_id)
        return generation

    def lifetime_count(self, account: str) -> int:
        return self.state.generation_count(account).get()

    def request_generation(self, ctx: CallContext, description, category) -> int:
        """Register a Pending generation for the caller, subject to the daily quota."""
        description = to_buffer(description, "description")
        category = to_buffer(category, "category")

        if not self.rate_limiter.try_consume(ctx.caller, ctx.timestamp):
            limit = self.state.daily_limit.get()
            raise QuotaExceeded(
                f"Daily generation limit reached ({limit}/day)",
                limit=limit,
                retry_after=SECONDS_PER_DAY - ctx.timestamp % SECONDS_PER_DAY,
            )

        generation_id = self.state.allocate_id(self.state.next_generation_id)
        self.state.generations(generation_id).set(
            Generation(
                id=generation_id,
                creator=ctx.caller,
                description=description,
                category=category,
                timestamp=ctx.timestamp,
            )
        )
        self.state.generation_count(ctx.caller).update(lambda count: count + 1)

        self.state.emit(
            ctx,
            EventTopic.GENERATION_REQUESTED,
            {"generation_id": generation_id, "creator": ctx.caller},
            description + PAYLOAD_SEPARATOR + category,
        )
        logger.info("Generation requested", generation_id=generation_id, creator=ctx.caller)
        return generation_id

    def complete_generation(self, ctx: CallContext, generation_id: int, code_hash, success: bool) -> Generation:
        """
        Record the operator's verdict for a generation.

        Re-resolving a generation overwrites its status and hash, except once
        a token has been minted from it.
        """
        self.access.require_operator(ctx)
        generation_id = ensure_u64(generation_id, "generation_id")
        code_hash = to_buffer(code_hash, "code_hash")

        generation = self.get(generation_id)
        if generation.is_minted:
            raise InvalidState(
                "Generation already minted",
                details={"generation_id": generation_id, "token_nonce": generation.token_nonce},
            )
        if generation.status != GenerationStatus.PENDING:
            logger.warning(
                "Generation resolved again",
                generation_id=generation_id,
                previous_status=generation.status.value,
            )

        generation = generation.evolve(status=resolved_status(bool(success)), code_hash=code_hash)
        self.state.generations(generation_id).set(generation)

        self.state.emit(
            ctx,
            EventTopic.GENERATION_COMPLETED,
            {"generation_id": generation_id, "creator": generation.creator, "success": bool(success)},
            code_hash,
        )
        logger.info("Generation completed", generation_id=generation_id, status=generation.status.value)
        return generation

    def record_mint(self, generation_id: int, token_nonce: int) -> Generation:
        def attach(generation: Generation) -> Generation:
            if generation.status != GenerationStatus.COMPLETED:
                raise InvalidState("Generation not completed", details={"generation_id": generation_id})
            return generation.evolve(token_nonce=token_nonce)

        return self.state.generations(generation_id).update(attach)
