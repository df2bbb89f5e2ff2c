from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest
import structlog

from template_forge.core.clock import SECONDS_PER_DAY, ManualClock
from template_forge.core.contract import TemplateForgeContract
from template_forge.models.contract_model import Payment

OWNER = "owner"
OPERATOR = "operator"
ALICE = "alice"
BOB = "bob"
CAROL = "carol"
TOKEN_ID = "TMPL-a1b2c3"
MINT_FEE = 50_000_000_000_000_000
START_TIMESTAMP = 20_000 * SECONDS_PER_DAY + 3_600


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(START_TIMESTAMP)


@pytest.fixture
def contract(clock: ManualClock) -> TemplateForgeContract:
    contract = TemplateForgeContract(
        OWNER,
        operator=OPERATOR,
        template_token_id=TOKEN_ID,
        daily_limit=3,
        mint_fee=MINT_FEE,
        platform_fee_bps=250,
        clock=clock,
    )
    for account in (ALICE, BOB, CAROL):
        contract.ledger.deposit(account, 10 * MINT_FEE)
    return contract


@pytest.fixture
def completed_generation(contract: TemplateForgeContract) -> int:
    generation_id = contract.request_generation(ALICE, "An escrow contract", "defi")
    contract.complete_generation(OPERATOR, generation_id, "abc", True)
    return generation_id


@pytest.fixture
def minted_nonce(contract: TemplateForgeContract, completed_generation: int) -> int:
    return contract.mint_template(ALICE, completed_generation, "Escrow", payment=Payment.native(MINT_FEE))


@pytest.fixture
def mint_for(contract: TemplateForgeContract) -> Callable[[str], int]:
    """Request, complete and mint a template for an account."""

    def _mint(account: str) -> int:
        generation_id = contract.request_generation(account, "A token vesting contract", "tokens")
        contract.complete_generation(OPERATOR, generation_id, "hash-" + account, True)
        return contract.mint_template(account, generation_id, "Vesting", payment=Payment.native(MINT_FEE))

    return _mint


@pytest.fixture(autouse=True)
def mock_logger(mocker: Any) -> MagicMock:
    return mocker.patch.object(structlog, "get_logger", return_value=MagicMock())
