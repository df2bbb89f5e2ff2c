"""
Owner-only configuration and fee withdrawal.
"""

import structlog

from template_forge.core.contract_state import ContractState
from template_forge.models.contract_model import CallContext, EventTopic
from template_forge.services.access_control import AccessControl
from template_forge.utils.validators import ensure_amount, ensure_u64, validate_token_identifier

logger = structlog.get_logger(__name__)


class Administration:
    """Administrative endpoints."""

    def __init__(self, state: ContractState, access: AccessControl):
        self.state = state
        self.access = access

    def set_daily_limit(self, ctx: CallContext, new_limit: int) -> None:
        self.access.require_owner(ctx)
        new_limit = ensure_u64(new_limit, "daily_limit")
        self.state.daily_limit.set(new_limit)
        self.state.emit(ctx, EventTopic.DAILY_LIMIT_UPDATED, {"owner": ctx.caller}, new_limit)
        logger.info("Daily limit updated", daily_limit=new_limit)

    def set_minting_fee(self, ctx: CallContext, new_fee: int) -> None:
        self.access.require_owner(ctx)
        new_fee = ensure_amount(new_fee, "mint_fee")
        self.state.mint_fee.set(new_fee)
        self.state.emit(ctx, EventTopic.MINTING_FEE_UPDATED, {"owner": ctx.caller}, new_fee)
        logger.info("Minting fee updated", mint_fee=new_fee)

    def set_template_token_id(self, ctx: CallContext, token_identifier: str) -> None:
        self.access.require_owner(ctx)
        token_identifier = validate_token_identifier(token_identifier)
        self.state.template_token_id.set(token_identifier)
        self.state.emit(ctx, EventTopic.TEMPLATE_TOKEN_ID_SET, {"token_identifier": token_identifier})
        logger.info("Template token identifier set", token_identifier=token_identifier)

    def withdraw_fees(self, ctx: CallContext) -> int:
        """Send the contract's whole native balance to the owner."""
        self.access.require_owner(ctx)
        owner = self.state.owner.get()
        contract_address = self.state.address.get()
        amount = self.state.ledger.balance_of(contract_address)
        self.state.ledger.transfer_native(contract_address, owner, amount)
        self.state.emit(ctx, EventTopic.FEES_WITHDRAWN, {"owner": owner}, amount)
        logger.info("Fees withdrawn", owner=owner, amount=amount)
        return amount
