"""
Capability checks evaluated first in every operation.
"""

from template_forge.core.contract_state import ContractState
from template_forge.core.errors import InsufficientFunds, Unauthorized, ValidationError
from template_forge.models.contract_model import CallContext, PaymentKind


class AccessControl:
    """Role, identity and payment guards."""

    def __init__(self, state: ContractState):
        self.state = state

    def require_owner(self, ctx: CallContext) -> None:
        self.require_caller(ctx, self.state.owner.get(), "owner")

    def require_operator(self, ctx: CallContext) -> None:
        self.require_caller(ctx, self.state.operator.get(), "operator")

    def require_caller(self, ctx: CallContext, expected: str, role: str) -> None:
        if not expected or ctx.caller != expected:
            raise Unauthorized(f"Caller is not the {role}", caller=ctx.caller, required_role=role)

    def require_no_payment(self, ctx: CallContext) -> None:
        if ctx.payment.kind != PaymentKind.NONE or ctx.payment.amount:
            raise ValidationError(
                f"Endpoint '{ctx.endpoint}' does not accept payment",
                field_name="payment",
                field_value=ctx.payment.kind.value,
            )

    def require_native_payment(self, ctx: CallContext, minimum: int) -> int:
        """Return the attached native amount, which must cover minimum."""
        payment = ctx.payment
        if payment.kind == PaymentKind.TOKEN:
            raise ValidationError("Payment must be in native coin", field_name="payment", field_value=payment.token_identifier)
        if payment.kind != PaymentKind.NATIVE and (minimum > 0 or payment.amount):
            raise ValidationError("Payment must be in native coin", field_name="payment", field_value=payment.kind.value)
        if payment.amount < minimum:
            raise InsufficientFunds("Insufficient payment", required=minimum, provided=payment.amount)
        return payment.amount

    def require_single_token(self, ctx: CallContext, token_identifier: str, nonce: int) -> None:
        payment = ctx.payment
        if payment.kind != PaymentKind.TOKEN or payment.token_identifier != token_identifier:
            raise ValidationError("Wrong token", field_name="payment", field_value=payment.token_identifier)
        if payment.nonce != nonce:
            raise ValidationError("Wrong NFT nonce", field_name="nonce", field_value=payment.nonce)
        if payment.amount != 1:
            raise ValidationError("Must send exactly 1 NFT", field_name="amount", field_value=payment.amount)
