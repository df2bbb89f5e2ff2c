"""
Contract facade: the operations callers can invoke.

Every state-changing operation runs as one transaction. The attached payment
is moved into the contract first, the relevant service runs, and on any
error the state store (entities, counters and balances) and the event log are
restored to what they were before the call.
"""

from typing import Any, Callable, Optional

import structlog

from template_forge.core.clock import Clock, SystemClock
from template_forge.core.contract_state import ContractState
from template_forge.core.errors import ContractError, NotFound, ValidationError
from template_forge.core.event_log import EventLog
from template_forge.core.token_ledger import TokenLedger
from template_forge.models.contract_model import (
    CallContext,
    Generation,
    Listing,
    Payment,
    PaymentKind,
    RatingAggregate,
    TemplateAttributes,
)
from template_forge.services import (
    AccessControl,
    AchievementTracker,
    Administration,
    GenerationRegistry,
    Marketplace,
    RateLimiter,
    RatingService,
    TemplateMinter,
)
from template_forge.utils.validators import (
    ensure_amount,
    ensure_bps,
    ensure_u64,
    validate_account,
    validate_token_identifier,
)

logger = structlog.get_logger(__name__)

DEFAULT_CONTRACT_ADDRESS = "template-forge"
DEFAULT_DAILY_LIMIT = 3
DEFAULT_MINT_FEE = 50_000_000_000_000_000  # 0.05 of an 18-decimal coin
DEFAULT_PLATFORM_FEE_BPS = 250  # 2.5%
DEFAULT_ROYALTIES_BPS = 250


class TemplateForgeContract:
    """Generation, minting, marketplace and rating state machine."""

    def __init__(
        self,
        owner: str,
        *,
        address: str = DEFAULT_CONTRACT_ADDRESS,
        operator: Optional[str] = None,
        template_token_id: Optional[str] = None,
        daily_limit: int = DEFAULT_DAILY_LIMIT,
        mint_fee: int = DEFAULT_MINT_FEE,
        platform_fee_bps: int = DEFAULT_PLATFORM_FEE_BPS,
        royalties_bps: int = DEFAULT_ROYALTIES_BPS,
        ledger: Optional[TokenLedger] = None,
        events: Optional[EventLog] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.ledger = ledger or TokenLedger()
        self.events = events or EventLog()
        self.clock: Clock = clock or SystemClock()
        self.store = self.ledger.store
        self.state = ContractState(self.ledger, self.events)

        # Services
        self.access = AccessControl(self.state)
        self.rate_limiter = RateLimiter(self.state)
        self.achievements = AchievementTracker(self.state)
        self.registry = GenerationRegistry(self.state, self.access, self.rate_limiter)
        self.minter = TemplateMinter(self.state, self.access, self.registry, self.achievements)
        self.marketplace = Marketplace(self.state, self.access, self.achievements)
        self.ratings = RatingService(self.state)
        self.admin = Administration(self.state, self.access)

        with self.store.transaction():
            self.state.owner.set(validate_account(owner, "owner"))
            self.state.operator.set(validate_account(operator or owner, "operator"))
            self.state.address.set(validate_account(address, "address"))
            self.state.daily_limit.set(ensure_u64(daily_limit, "daily_limit"))
            self.state.mint_fee.set(ensure_amount(mint_fee, "mint_fee"))
            self.state.platform_fee_bps.set(ensure_bps(platform_fee_bps, "platform_fee_bps"))
            self.state.royalties_bps.set(ensure_bps(royalties_bps, "royalties_bps"))
            if template_token_id:
                self.state.template_token_id.set(validate_token_identifier(template_token_id))

        logger.info(
            "Contract initialized",
            address=address,
            owner=owner,
            operator=self.state.operator.get(),
            daily_limit=daily_limit,
        )

    # Execution

    def _execute(
        self,
        endpoint: str,
        caller: str,
        payment: Optional[Payment],
        operation: Callable[..., Any],
        *args: Any,
        payable: bool = False,
    ) -> Any:
        ctx = CallContext(
            caller=validate_account(caller, "caller"),
            payment=payment or Payment.none(),
            timestamp=self.clock.now(),
            endpoint=endpoint,
        )
        with self.store.lock:
            event_mark = self.events.mark()
            try:
                with self.store.transaction():
                    if not payable:
                        self.access.require_no_payment(ctx)
                    self._receive_payment(ctx)
                    result = operation(ctx, *args)
            except ContractError as e:
                self.events.rollback_to(event_mark)
                logger.warning("Operation reverted", endpoint=endpoint, caller=caller, error=e.to_dict())
                raise
            except Exception as e:
                self.events.rollback_to(event_mark)
                logger.error("Operation failed", endpoint=endpoint, caller=caller, error=str(e))
                raise

        logger.debug("Operation executed", endpoint=endpoint, caller=caller)
        return result

    def _receive_payment(self, ctx: CallContext) -> None:
        payment = ctx.payment
        contract_address = self.state.address.get()
        if payment.kind == PaymentKind.NONE:
            return
        if payment.kind == PaymentKind.NATIVE:
            self.ledger.transfer_native(ctx.caller, contract_address, payment.amount)
        elif payment.kind == PaymentKind.TOKEN:
            if not payment.token_identifier:
                raise ValidationError("Token payment without token identifier", field_name="payment")
            self.ledger.transfer_token(
                ctx.caller, contract_address, payment.token_identifier, payment.nonce, payment.amount
            )

    # Generation

    def request_generation(self, caller: str, description, category, payment: Optional[Payment] = None) -> int:
        return self._execute(
            "generateContract", caller, payment, self.registry.request_generation, description, category
        )

    def complete_generation(self, caller: str, generation_id: int, code_hash, success: bool) -> Generation:
        return self._execute(
            "completeGeneration", caller, None, self.registry.complete_generation, generation_id, code_hash, success
        )

    # Minting

    def mint_template(self, caller: str, generation_id: int, name, payment: Optional[Payment] = None) -> int:
        return self._execute(
            "mintTemplateNFT", caller, payment, self.minter.mint_template, generation_id, name, payable=True
        )

    # Marketplace

    def list_template(self, caller: str, token_nonce: int, price: int, payment: Optional[Payment] = None) -> int:
        return self._execute(
            "listTemplate", caller, payment, self.marketplace.list_template, token_nonce, price, payable=True
        )

    def purchase_template(self, caller: str, listing_id: int, payment: Optional[Payment] = None) -> Listing:
        return self._execute(
            "purchaseTemplate", caller, payment, self.marketplace.purchase_template, listing_id, payable=True
        )

    def cancel_listing(self, caller: str, listing_id: int) -> Listing:
        return self._execute("cancelListing", caller, None, self.marketplace.cancel_listing, listing_id)

    # Ratings

    def rate_template(self, caller: str, token_nonce: int, rating: int) -> RatingAggregate:
        return self._execute("rateTemplate", caller, None, self.ratings.rate_template, token_nonce, rating)

    # Administration

    def set_daily_limit(self, caller: str, new_limit: int) -> None:
        self._execute("setDailyLimit", caller, None, self.admin.set_daily_limit, new_limit)

    def set_minting_fee(self, caller: str, new_fee: int) -> None:
        self._execute("setMintingFee", caller, None, self.admin.set_minting_fee, new_fee)

    def set_template_token_id(self, caller: str, token_identifier: str) -> None:
        self._execute("setTemplateNftTokenId", caller, None, self.admin.set_template_token_id, token_identifier)

    def withdraw_fees(self, caller: str) -> int:
        return self._execute("withdrawFees", caller, None, self.admin.withdraw_fees)

    # Views

    @property
    def address(self) -> str:
        return self.state.address.get()

    @property
    def owner(self) -> str:
        return self.state.owner.get()

    @property
    def operator(self) -> str:
        return self.state.operator.get()

    def get_generation(self, generation_id: int) -> Generation:
        return self.registry.get(generation_id)

    def get_listing(self, listing_id: int) -> Listing:
        return self.marketplace.get(listing_id)

    def get_user_generations_today(self, account: str) -> int:
        return self.rate_limiter.generations_today(account, self.clock.now())

    def get_user_generation_count(self, account: str) -> int:
        return self.registry.lifetime_count(account)

    def get_template_rating(self, token_nonce: int) -> RatingAggregate:
        return self.state.template_rating(token_nonce).get()

    def get_user_rating(self, account: str, token_nonce: int) -> Optional[int]:
        return self.state.user_rating(account, token_nonce).get()

    def get_template_uses(self, token_nonce: int) -> int:
        return self.state.template_uses(token_nonce).get()

    def get_template_attributes(self, token_nonce: int) -> TemplateAttributes:
        token = self.ledger.get_nft(self.state.template_token_id.get(), token_nonce)
        if token is None:
            raise NotFound("Template not found", entity="template", entity_id=token_nonce)
        return token.attributes

    def get_template_token_id(self) -> Optional[str]:
        """Configured template token identifier, or None before it is set."""
        return self.state.template_token_id.get() or None

    def get_daily_limit(self) -> int:
        return self.state.daily_limit.get()

    def get_minting_fee(self) -> int:
        return self.state.mint_fee.get()

    def get_platform_fee_bps(self) -> int:
        return self.state.platform_fee_bps.get()

    def get_balance(self) -> int:
        """Native coin held by the contract."""
        return self.ledger.balance_of(self.address)
