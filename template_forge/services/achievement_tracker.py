"""
Milestone notifications derived from counters owned by other services.

The tracker never writes entity state; it only reads counters and emits
achievementEarned events.
"""

import structlog

from template_forge.core.contract_state import ContractState
from template_forge.models.contract_model import ZERO_ADDRESS, Achievement, CallContext, EventTopic

logger = structlog.get_logger(__name__)

POPULAR_TEMPLATE_USES = 10


class AchievementTracker:
    """Stateless achievement checks."""

    def __init__(self, state: ContractState):
        self.state = state

    def check_first_generation(self, ctx: CallContext, account: str) -> bool:
        # Evaluated at mint time against the lifetime request count
        if self.state.generation_count(account).get() == 1:
            self._award(ctx, account, Achievement.FIRST_GENERATION)
            return True
        return False

    def check_first_sale(self, ctx: CallContext, seller: str) -> bool:
        # Fires on every sale, not only the seller's first
        self._award(ctx, seller, Achievement.FIRST_SALE)
        return True

    def check_popular_template(self, ctx: CallContext, token_nonce: int) -> bool:
        if self.state.template_uses(token_nonce).get() == POPULAR_TEMPLATE_USES:
            self._award(ctx, ZERO_ADDRESS, Achievement.POPULAR_TEMPLATE, token_nonce=token_nonce)
            return True
        return False

    def _award(self, ctx: CallContext, user: str, achievement: Achievement, **fields) -> None:
        self.state.emit(ctx, EventTopic.ACHIEVEMENT_EARNED, {"user": user, **fields}, achievement.value)
        logger.info("Achievement earned", user=user, achievement=achievement.value)
