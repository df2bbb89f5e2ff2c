"""
Escrow marketplace for template tokens.

A listing holds one escrowed unit in the contract's own account for as long
as it is active. Purchases split the price between the seller and a
platform fee kept by the contract. Listing state is always committed before
any value or token leaves the contract, so a recipient that calls back in
finds the listing already closed.
"""

from typing import Tuple

import structlog

from template_forge.core.contract_state import ContractState
from template_forge.core.errors import ConfigError, InvalidState, NoSelfTrade, NotFound, ValidationError
from template_forge.models.contract_model import BPS_DENOMINATOR, CallContext, EventTopic, Listing
from template_forge.services.access_control import AccessControl
from template_forge.services.achievement_tracker import AchievementTracker
from template_forge.utils.validators import ensure_amount, ensure_u64

logger = structlog.get_logger(__name__)


def split_sale_price(price: int, platform_fee_bps: int) -> Tuple[int, int]:
    """Return (platform_fee, seller_amount) for a sale at price."""
    platform_fee = price * platform_fee_bps // BPS_DENOMINATOR
    return platform_fee, price - platform_fee


class Marketplace:
    """List, purchase and cancel escrowed template tokens."""

    def __init__(self, state: ContractState, access: AccessControl, achievements: AchievementTracker):
        self.state = state
        self.access = access
        self.achievements = achievements

    def get(self, listing_id: int) -> Listing:
        listing = self.state.listings(listing_id).get()
        if listing is None:
            raise NotFound("Listing not found", entity="listing", entity_id=listing_id)
        return listing

    def list_template(self, ctx: CallContext, token_nonce: int, price: int) -> int:
        token_identifier = self.state.template_token_id.get()
        if not token_identifier:
            raise ConfigError("Template token identifier not set")
        token_nonce = ensure_u64(token_nonce, "token_nonce")
        self.access.require_single_token(ctx, token_identifier, token_nonce)
        price = ensure_amount(price, "price")
        if price == 0:
            raise ValidationError("Price must be greater than 0", field_name="price", field_value=price)

        listing_id = self.state.allocate_id(self.state.next_listing_id)
        self.state.listings(listing_id).set(
            Listing(
                id=listing_id,
                seller=ctx.caller,
                token_identifier=token_identifier,
                token_nonce=token_nonce,
                price=price,
            )
        )

        self.state.emit(
            ctx,
            EventTopic.TEMPLATE_LISTED,
            {"listing_id": listing_id, "token_nonce": token_nonce, "seller": ctx.caller},
            price,
        )
        logger.info("Template listed", listing_id=listing_id, token_nonce=token_nonce, price=price)
        return listing_id

    def purchase_template(self, ctx: CallContext, listing_id: int) -> Listing:
        listing = self.get(ensure_u64(listing_id, "listing_id"))
        if not listing.active:
            raise InvalidState("Listing not active", details={"listing_id": listing.id})
        self.access.require_native_payment(ctx, listing.price)
        buyer = ctx.caller
        if buyer == listing.seller:
            raise NoSelfTrade("Cannot buy your own template", details={"listing_id": listing.id})

        platform_fee, seller_amount = split_sale_price(listing.price, self.state.platform_fee_bps.get())

        # Close the listing and count the use before anything leaves escrow
        closed = listing.evolve(active=False)
        self.state.listings(listing.id).set(closed)
        self.state.template_uses(listing.token_nonce).update(lambda uses: uses + 1)

        contract_address = self.state.address.get()
        self.state.ledger.transfer_native(contract_address, listing.seller, seller_amount)
        self.state.ledger.transfer_token(
            contract_address, buyer, listing.token_identifier, listing.token_nonce, 1
        )

        self.achievements.check_first_sale(ctx, listing.seller)
        self.achievements.check_popular_template(ctx, listing.token_nonce)

        self.state.emit(
            ctx,
            EventTopic.TEMPLATE_PURCHASED,
            {"listing_id": listing.id, "buyer": buyer, "seller": listing.seller},
            listing.price,
        )
        logger.info(
            "Template purchased",
            listing_id=listing.id,
            buyer=buyer,
            seller=listing.seller,
            price=listing.price,
            platform_fee=platform_fee,
        )
        return closed

    def cancel_listing(self, ctx: CallContext, listing_id: int) -> Listing:
        """Owner-only withdrawal of a listing; the unit goes back to the seller."""
        self.access.require_owner(ctx)
        listing = self.get(ensure_u64(listing_id, "listing_id"))
        if not listing.active:
            raise InvalidState("Listing not active", details={"listing_id": listing.id})

        closed = listing.evolve(active=False)
        self.state.listings(listing.id).set(closed)
        self.state.ledger.transfer_token(
            self.state.address.get(), listing.seller, listing.token_identifier, listing.token_nonce, 1
        )

        self.state.emit(
            ctx,
            EventTopic.LISTING_CANCELLED,
            {"listing_id": listing.id, "token_nonce": listing.token_nonce, "seller": listing.seller},
        )
        logger.info("Listing cancelled", listing_id=listing.id, seller=listing.seller)
        return closed
