"""
Turns a completed, unminted generation into one template token.
"""

import structlog

from template_forge.core.contract_state import ContractState
from template_forge.core.errors import AlreadyDone, ConfigError, InvalidState
from template_forge.models.contract_model import CallContext, EventTopic, GenerationStatus, TemplateAttributes
from template_forge.services.access_control import AccessControl
from template_forge.services.achievement_tracker import AchievementTracker
from template_forge.services.generation_registry import GenerationRegistry
from template_forge.utils.validators import ensure_u64, validate_token_name

logger = structlog.get_logger(__name__)


class TemplateMinter:
    """Mints template tokens 1:1 from completed generations."""

    def __init__(
        self,
        state: ContractState,
        access: AccessControl,
        registry: GenerationRegistry,
        achievements: AchievementTracker,
    ):
        self.state = state
        self.access = access
        self.registry = registry
        self.achievements = achievements

    def template_token_id(self) -> str:
        token_identifier = self.state.template_token_id.get()
        if not token_identifier:
            raise ConfigError("Template token identifier not set")
        return token_identifier

    def mint_template(self, ctx: CallContext, generation_id: int, name) -> int:
        """
        Mint the template token for a generation and send it to its creator.

        Payment must cover the minting fee; any excess stays with the contract.
        """
        self.access.require_native_payment(ctx, self.state.mint_fee.get())
        generation_id = ensure_u64(generation_id, "generation_id")
        name = validate_token_name(name)

        generation = self.registry.get(generation_id)
        if generation.status != GenerationStatus.COMPLETED:
            raise InvalidState(
                "Generation not completed",
                details={"generation_id": generation_id, "status": generation.status.value},
            )
        self.access.require_caller(ctx, generation.creator, "generation creator")
        if generation.is_minted:
            raise AlreadyDone(
                "NFT already minted",
                details={"generation_id": generation_id, "token_nonce": generation.token_nonce},
            )

        token_identifier = self.template_token_id()
        attributes = TemplateAttributes(
            generation_id=generation_id,
            category=generation.category,
            code_hash=generation.code_hash,
            creation_date=generation.timestamp,
        )
        contract_address = self.state.address.get()
        token_nonce = self.state.ledger.create_nft(
            contract_address,
            token_identifier,
            name,
            self.state.royalties_bps.get(),
            attributes,
        )
        self.registry.record_mint(generation_id, token_nonce)

        self.state.ledger.transfer_token(contract_address, ctx.caller, token_identifier, token_nonce, 1)

        self.achievements.check_first_generation(ctx, ctx.caller)
        self.state.emit(
            ctx,
            EventTopic.TEMPLATE_NFT_MINTED,
            {"generation_id": generation_id, "token_nonce": token_nonce, "creator": ctx.caller},
        )
        logger.info("Template minted", generation_id=generation_id, token_nonce=token_nonce, creator=ctx.caller)
        return token_nonce
