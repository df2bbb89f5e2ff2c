"""
One rating per (account, token nonce), accumulated per nonce.
"""

import structlog

from template_forge.core.contract_state import ContractState
from template_forge.core.errors import AlreadyDone, NotFound
from template_forge.models.contract_model import CallContext, EventTopic, RatingAggregate
from template_forge.utils.validators import ensure_rating, ensure_u64

logger = structlog.get_logger(__name__)


class RatingService:
    """Write-once user ratings and their aggregates."""

    def __init__(self, state: ContractState):
        self.state = state

    def rate_template(self, ctx: CallContext, token_nonce: int, rating: int) -> RatingAggregate:
        rating = ensure_rating(rating)
        token_nonce = ensure_u64(token_nonce, "token_nonce")

        token_identifier = self.state.template_token_id.get()
        if not token_identifier or self.state.ledger.get_nft(token_identifier, token_nonce) is None:
            raise NotFound("Template not found", entity="template", entity_id=token_nonce)

        user_rating = self.state.user_rating(ctx.caller, token_nonce)
        if not user_rating.is_empty():
            raise AlreadyDone("Already rated this template", details={"token_nonce": token_nonce})
        user_rating.set(rating)

        aggregate = self.state.template_rating(token_nonce).update(lambda current: current.add(rating))

        self.state.emit(ctx, EventTopic.TEMPLATE_RATED, {"token_nonce": token_nonce, "rater": ctx.caller}, rating)
        logger.info("Template rated", token_nonce=token_nonce, rater=ctx.caller, rating=rating)
        return aggregate
