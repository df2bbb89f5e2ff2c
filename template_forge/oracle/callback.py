"""
Oracle side of completeGeneration.
"""

from typing import Optional

import structlog

from template_forge.core.contract import TemplateForgeContract
from template_forge.models.contract_model import Generation

logger = structlog.get_logger(__name__)


class OracleCallback:
    """Reports generation outcomes to the contract as the privileged operator."""

    def __init__(self, contract: TemplateForgeContract, operator: Optional[str] = None):
        self.contract = contract
        self.operator = operator or contract.operator

    def complete_generation(self, generation_id: int, code_hash: str, success: bool) -> Generation:
        logger.info("Sending oracle callback", generation_id=generation_id, success=success)
        generation = self.contract.complete_generation(self.operator, generation_id, code_hash, success)
        logger.info("Oracle callback accepted", generation_id=generation_id, status=generation.status.value)
        return generation
