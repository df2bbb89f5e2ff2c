import pytest

from conftest import ALICE, BOB, MINT_FEE, OPERATOR, OWNER, TOKEN_ID
from template_forge.core.contract import TemplateForgeContract
from template_forge.core.errors import Unauthorized, ValidationError
from template_forge.models.contract_model import EventTopic, Payment


class TestOwnerSetters:
    """Test suite for owner-only configuration."""

    def test_set_daily_limit(self, contract: TemplateForgeContract) -> None:
        contract.set_daily_limit(OWNER, 10)

        assert contract.get_daily_limit() == 10
        event = contract.events.last(EventTopic.DAILY_LIMIT_UPDATED)
        assert event.fields == {"owner": OWNER}
        assert event.payload == 10

    def test_set_minting_fee(self, contract: TemplateForgeContract) -> None:
        contract.set_minting_fee(OWNER, 0)

        assert contract.get_minting_fee() == 0
        assert contract.events.last(EventTopic.MINTING_FEE_UPDATED).payload == 0

    def test_set_template_token_id(self, contract: TemplateForgeContract) -> None:
        contract.set_template_token_id(OWNER, "FORGE-0f0f0f")

        assert contract.get_template_token_id() == "FORGE-0f0f0f"
        event = contract.events.last(EventTopic.TEMPLATE_TOKEN_ID_SET)
        assert event.fields == {"token_identifier": "FORGE-0f0f0f"}

    @pytest.mark.parametrize("caller", [ALICE, OPERATOR])
    def test_setters_require_owner(self, contract: TemplateForgeContract, caller: str) -> None:
        with pytest.raises(Unauthorized, match="not the owner"):
            contract.set_daily_limit(caller, 100)
        with pytest.raises(Unauthorized):
            contract.set_minting_fee(caller, 1)
        with pytest.raises(Unauthorized):
            contract.set_template_token_id(caller, "FORGE-0f0f0f")

        assert contract.get_daily_limit() == 3
        assert contract.get_minting_fee() == MINT_FEE
        assert contract.get_template_token_id() == TOKEN_ID

    @pytest.mark.parametrize("token_identifier", ["", "forge-0f0f0f", "FORGE", "FORGE-XYZXYZ", 42])
    def test_malformed_token_identifier(self, contract: TemplateForgeContract, token_identifier) -> None:
        with pytest.raises(ValidationError):
            contract.set_template_token_id(OWNER, token_identifier)
        assert contract.get_template_token_id() == TOKEN_ID

    def test_negative_values_rejected(self, contract: TemplateForgeContract) -> None:
        with pytest.raises(ValidationError):
            contract.set_daily_limit(OWNER, -1)
        with pytest.raises(ValidationError):
            contract.set_minting_fee(OWNER, -1)
        with pytest.raises(ValidationError):
            contract.set_daily_limit(OWNER, 2**64)

    def test_lower_fee_applies_to_next_mint(self, contract: TemplateForgeContract, completed_generation: int) -> None:
        contract.set_minting_fee(OWNER, 1)
        contract.mint_template(ALICE, completed_generation, "Cheap", payment=Payment.native(1))
        assert contract.get_balance() == 1

    def test_setter_rejects_payment(self, contract: TemplateForgeContract) -> None:
        contract.ledger.deposit(OWNER, 100)
        with pytest.raises(ValidationError, match="does not accept payment"):
            contract._execute(
                "setDailyLimit", OWNER, Payment.native(100), contract.admin.set_daily_limit, 5
            )
        assert contract.ledger.balance_of(OWNER) == 100


class TestWithdrawFees:
    """Test suite for fee withdrawal."""

    def test_withdraw_sends_balance_to_owner(self, contract: TemplateForgeContract, minted_nonce: int) -> None:
        contract.list_template(ALICE, minted_nonce, 1000, payment=Payment.token(TOKEN_ID, minted_nonce))
        contract.purchase_template(BOB, 0, payment=Payment.native(1000))
        collected = MINT_FEE + 25

        assert contract.withdraw_fees(OWNER) == collected
        assert contract.get_balance() == 0
        assert contract.ledger.balance_of(OWNER) == collected
        event = contract.events.last(EventTopic.FEES_WITHDRAWN)
        assert event.fields == {"owner": OWNER}
        assert event.payload == collected

    def test_withdraw_empty_balance(self, contract: TemplateForgeContract) -> None:
        assert contract.withdraw_fees(OWNER) == 0

    def test_withdraw_requires_owner(self, contract: TemplateForgeContract, minted_nonce: int) -> None:
        with pytest.raises(Unauthorized):
            contract.withdraw_fees(ALICE)
        assert contract.get_balance() == MINT_FEE

    def test_withdraw_keeps_escrowed_tokens(self, contract: TemplateForgeContract, minted_nonce: int) -> None:
        contract.list_template(ALICE, minted_nonce, 1000, payment=Payment.token(TOKEN_ID, minted_nonce))
        contract.withdraw_fees(OWNER)
        assert contract.ledger.token_balance(contract.address, TOKEN_ID, minted_nonce) == 1
