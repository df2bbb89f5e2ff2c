"""
Factory for creating contract and worker instances.
"""

from typing import Optional

from template_forge.core.clock import Clock
from template_forge.core.contract import TemplateForgeContract
from template_forge.core.token_ledger import TokenLedger
from template_forge.oracle.callback import OracleCallback
from template_forge.oracle.listener import GenerationEventListener
from template_forge.oracle.worker import CodeGenerator, GenerationWorker
from template_forge.utils.env_config import ContractSettings


def create_contract(
    settings: ContractSettings,
    clock: Optional[Clock] = None,
    ledger: Optional[TokenLedger] = None,
) -> TemplateForgeContract:
    """Create a contract based on configuration."""
    config = settings.get_contract_config()

    # Blank strings in the environment mean "not configured"
    for key in ("operator", "template_token_id"):
        value = config[key]
        if value is not None and not value.strip():
            config[key] = None

    return TemplateForgeContract(clock=clock, ledger=ledger, **config)


def create_generation_worker(
    contract: TemplateForgeContract,
    settings: ContractSettings,
    generator: CodeGenerator,
) -> GenerationWorker:
    """Create a worker that resolves the contract's generation requests."""
    listener = GenerationEventListener(contract.events, poll_interval=settings.event_polling_interval)
    oracle = OracleCallback(contract)
    return GenerationWorker(listener, oracle, generator)
