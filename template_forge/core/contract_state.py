"""
Storage layout of the contract.

Every piece of persistent state is reached through a typed mapper defined
here, so services share one key space without knowing how keys are built.
"""

from typing import Any, Dict, Optional

from template_forge.core.event_log import EventLog
from template_forge.core.state_store import StateStore, ValueMapper
from template_forge.core.token_ledger import TokenLedger
from template_forge.models.contract_model import (
    CallContext,
    ContractEvent,
    EventTopic,
    Generation,
    Listing,
    RateCounter,
    RatingAggregate,
)


class ContractState:
    """Typed repository over the contract's key-value state."""

    def __init__(self, ledger: TokenLedger, events: EventLog):
        self.ledger = ledger
        self.store: StateStore = ledger.store
        self.events = events

    # Scalar configuration

    @property
    def address(self) -> ValueMapper[str]:
        return self.store.mapper("contractAddress", default="")

    @property
    def owner(self) -> ValueMapper[str]:
        return self.store.mapper("owner", default="")

    @property
    def operator(self) -> ValueMapper[str]:
        return self.store.mapper("operator", default="")

    @property
    def template_token_id(self) -> ValueMapper[str]:
        return self.store.mapper("templateNftTokenId", default="")

    @property
    def daily_limit(self) -> ValueMapper[int]:
        return self.store.mapper("dailyGenerationLimit", default=0)

    @property
    def mint_fee(self) -> ValueMapper[int]:
        return self.store.mapper("nftMintingFee", default=0)

    @property
    def platform_fee_bps(self) -> ValueMapper[int]:
        return self.store.mapper("platformFeePercent", default=0)

    @property
    def royalties_bps(self) -> ValueMapper[int]:
        return self.store.mapper("templateRoyalties", default=0)

    # Id counters

    @property
    def next_generation_id(self) -> ValueMapper[int]:
        return self.store.mapper("nextGenerationId", default=0)

    @property
    def next_listing_id(self) -> ValueMapper[int]:
        return self.store.mapper("nextListingId", default=0)

    @staticmethod
    def allocate_id(counter: ValueMapper[int]) -> int:
        """Return the counter's current value and advance it by one."""
        return counter.compare_and_update(lambda current: (current, current + 1))

    # Entities

    def generations(self, generation_id: int) -> ValueMapper[Optional[Generation]]:
        return self.store.mapper("generations", generation_id)

    def listings(self, listing_id: int) -> ValueMapper[Optional[Listing]]:
        return self.store.mapper("listings", listing_id)

    def rate_counter(self, account: str) -> ValueMapper[RateCounter]:
        return self.store.mapper("userRateCounter", account, default=RateCounter())

    def generation_count(self, account: str) -> ValueMapper[int]:
        return self.store.mapper("userGenerationCount", account, default=0)

    def template_uses(self, token_nonce: int) -> ValueMapper[int]:
        return self.store.mapper("templateUses", token_nonce, default=0)

    def template_rating(self, token_nonce: int) -> ValueMapper[RatingAggregate]:
        return self.store.mapper("templateRatings", token_nonce, default=RatingAggregate())

    def user_rating(self, account: str, token_nonce: int) -> ValueMapper[Optional[int]]:
        return self.store.mapper("userTemplateRating", account, token_nonce)

    # Events

    def emit(
        self,
        ctx: CallContext,
        topic: EventTopic,
        fields: Optional[Dict[str, Any]] = None,
        payload: Any = None,
    ) -> ContractEvent:
        return self.events.emit(topic, fields, payload, block_timestamp=ctx.timestamp)
