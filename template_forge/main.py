"""
Main entry point for the template forge generation worker.

Builds the contract from environment settings and runs the off-ledger worker
that resolves generation requests until interrupted.
"""

import asyncio
import sys
from typing import Optional

import structlog

from template_forge.core.contract import TemplateForgeContract
from template_forge.factories.contract_factory import create_contract, create_generation_worker
from template_forge.oracle import CodeGenerator, GenerationWorker
from template_forge.oracle.placeholder_generator import generate_placeholder_contract
from template_forge.utils.env_config import ContractSettings, get_settings
from template_forge.utils.logging_config import configure_logging

logger = structlog.get_logger(__name__)


def initialize_app(
    settings: ContractSettings,
    generator: Optional[CodeGenerator] = None,
) -> tuple[TemplateForgeContract, GenerationWorker]:
    """Configure logging and wire the contract and its worker."""
    configure_logging(settings.log_level, settings.log_json_format)
    logger.info("Initializing template forge", environment=settings.environment)

    contract = create_contract(settings)
    worker = create_generation_worker(contract, settings, generator or generate_placeholder_contract)
    return contract, worker


async def run_worker(worker: GenerationWorker, stop_event: Optional[asyncio.Event] = None) -> None:
    """Run the worker until stop_event is set or the task is cancelled."""
    stop_event = stop_event or asyncio.Event()
    await worker.start()
    try:
        await stop_event.wait()
    finally:
        await worker.stop()


def main():
    """Main entry point for the worker."""
    try:
        settings = get_settings()
        _, worker = initialize_app(settings)
        asyncio.run(run_worker(worker))
    except KeyboardInterrupt:
        logger.info("Worker interrupted by user")
    except Exception as e:
        logger.error("Worker failed to start", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
