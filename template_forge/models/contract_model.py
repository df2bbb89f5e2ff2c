"""
Pydantic data models for the template forge contract.

This module defines the entities persisted by the contract (generations,
rate counters, listings, rating aggregates, template tokens) together with
the call-level value types (payments, transfers, events) that flow through
every operation.
"""

from enum import Enum
from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


U64_MAX = 2**64 - 1

U64 = Annotated[int, Field(ge=0, le=U64_MAX)]
BigUint = Annotated[int, Field(ge=0)]

# Account that receives template-level achievements
ZERO_ADDRESS = "0" * 64

BPS_DENOMINATOR = 10_000


# Enums for controlled vocabularies

class GenerationStatus(str, Enum):
    """Lifecycle status of a generation request."""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class PaymentKind(str, Enum):
    """What a caller attached to an operation."""
    NONE = "none"
    NATIVE = "native"
    TOKEN = "token"


class Achievement(str, Enum):
    """Milestones announced by the achievement tracker."""
    FIRST_GENERATION = "First Generation"
    FIRST_SALE = "First Sale"
    POPULAR_TEMPLATE = "Popular Template"


class EventTopic(str, Enum):
    """Topics of the structured events emitted by the contract."""
    GENERATION_REQUESTED = "generationRequested"
    GENERATION_COMPLETED = "generationCompleted"
    TEMPLATE_NFT_MINTED = "templateNftMinted"
    TEMPLATE_LISTED = "templateListed"
    TEMPLATE_PURCHASED = "templatePurchased"
    LISTING_CANCELLED = "listingCancelled"
    TEMPLATE_RATED = "templateRated"
    ACHIEVEMENT_EARNED = "achievementEarned"
    DAILY_LIMIT_UPDATED = "dailyLimitUpdated"
    MINTING_FEE_UPDATED = "mintingFeeUpdated"
    FEES_WITHDRAWN = "feesWithdrawn"
    TEMPLATE_TOKEN_ID_SET = "templateTokenIdSet"


class _Record(BaseModel):
    """Immutable base for everything kept in the state store."""

    model_config = ConfigDict(frozen=True)

    def evolve(self, **changes: Any):
        """Copy with changes applied, re-checking every field constraint."""
        return self.model_validate({**self.model_dump(), **changes})


# Persisted entities

class Generation(_Record):
    """One code-generation request and its resolved outcome."""

    id: U64
    creator: str
    description: bytes
    category: bytes
    timestamp: U64
    status: GenerationStatus = GenerationStatus.PENDING
    code_hash: bytes = b""
    token_nonce: U64 = 0

    @property
    def is_minted(self) -> bool:
        return self.token_nonce != 0


class RateCounter(_Record):
    """Per-account daily generation counter."""

    count_today: U64 = 0
    last_reset_day: U64 = 0


class Listing(_Record):
    """An offer to sell one escrowed template token unit."""

    id: U64
    seller: str
    token_identifier: str
    token_nonce: U64
    price: BigUint
    active: bool = True


class RatingAggregate(_Record):
    """Accumulated ratings of a template token nonce."""

    total_rating: U64 = 0
    rating_count: U64 = 0

    def add(self, rating: int) -> "RatingAggregate":
        return self.evolve(
            total_rating=self.total_rating + rating,
            rating_count=self.rating_count + 1,
        )

    @property
    def average(self) -> Optional[float]:
        if self.rating_count == 0:
            return None
        return self.total_rating / self.rating_count


class TemplateAttributes(_Record):
    """Attributes embedded in a template token at mint time."""

    generation_id: U64
    category: bytes
    code_hash: bytes
    creation_date: U64
    uses: U64 = 0
    total_rating: U64 = 0
    rating_count: U64 = 0


class TemplateToken(_Record):
    """A non-fungible token instance created by the ledger host."""

    token_identifier: str
    nonce: U64
    name: bytes
    royalties: U64
    creator: str
    attributes: TemplateAttributes


# Call-level value types

class Payment(_Record):
    """Validated value attached to a call, captured once at entry."""

    kind: PaymentKind = PaymentKind.NONE
    token_identifier: Optional[str] = None
    nonce: U64 = 0
    amount: BigUint = 0

    @model_validator(mode="after")
    def check_kind(self) -> "Payment":
        if self.kind == PaymentKind.NONE and (self.amount or self.token_identifier):
            raise ValueError("A payment of kind 'none' cannot carry an amount or token")
        if self.kind == PaymentKind.TOKEN and not self.token_identifier:
            raise ValueError("Token payment requires a token identifier")
        return self

    @classmethod
    def none(cls) -> "Payment":
        return cls()

    @classmethod
    def native(cls, amount: int) -> "Payment":
        return cls(kind=PaymentKind.NATIVE, amount=amount)

    @classmethod
    def token(cls, token_identifier: str, nonce: int, amount: int = 1) -> "Payment":
        return cls(kind=PaymentKind.TOKEN, token_identifier=token_identifier, nonce=nonce, amount=amount)


class Transfer(_Record):
    """A value or token movement performed by the ledger host."""

    sender: str
    recipient: str
    amount: BigUint
    token_identifier: Optional[str] = None
    nonce: U64 = 0

    @property
    def is_native(self) -> bool:
        return self.token_identifier is None


class CallContext(_Record):
    """Who is calling, what they attached, and when."""

    caller: str
    payment: Payment = Field(default_factory=Payment.none)
    timestamp: U64
    endpoint: str = ""


class ContractEvent(_Record):
    """Append-only audit record consumed by indexers and the off-ledger worker."""

    sequence: U64
    topic: EventTopic
    fields: Dict[str, Any] = Field(default_factory=dict)
    payload: Any = None
    block_timestamp: U64 = 0
