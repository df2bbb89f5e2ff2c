"""
Per-account daily quota for generation requests.
"""

from typing import Tuple

import structlog

from template_forge.core.clock import day_of
from template_forge.core.contract_state import ContractState
from template_forge.models.contract_model import RateCounter

logger = structlog.get_logger(__name__)


class RateLimiter:
    """Daily generation quota keyed by quota day."""

    def __init__(self, state: ContractState):
        self.state = state

    def try_consume(self, account: str, timestamp: int) -> bool:
        """
        Take one unit of the account's quota for the day containing timestamp.

        A new day resets the counter before the check. Returns False, leaving
        the count untouched, when the limit is already reached.
        """
        current_day = day_of(timestamp)
        limit = self.state.daily_limit.get()

        def consume(counter: RateCounter) -> Tuple[bool, RateCounter]:
            if current_day > counter.last_reset_day:
                counter = RateCounter(count_today=0, last_reset_day=current_day)
            if counter.count_today >= limit:
                return False, counter
            return True, counter.evolve(count_today=counter.count_today + 1)

        allowed = self.state.rate_counter(account).compare_and_update(consume)
        if not allowed:
            logger.info("Daily generation limit reached", account=account, limit=limit, day=current_day)
        return allowed

    def generations_today(self, account: str, timestamp: int) -> int:
        """Requests counted for the account today; 0 once a new day has begun."""
        counter = self.state.rate_counter(account).get()
        if day_of(timestamp) > counter.last_reset_day:
            return 0
        return counter.count_today
