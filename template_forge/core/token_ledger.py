"""
In-process ledger host for native coin and template token balances.

Balances live in the contract's state store so a failed operation rolls back
transfers together with every other state change. Accounts may register a
receiver hook that runs whenever they are credited; a hook is free to call
back into the contract, which is what makes transfer ordering matter.
"""

from typing import Any, Callable, Dict, Optional

import structlog

from template_forge.core.errors import InsufficientFunds, ValidationError
from template_forge.core.state_store import StateStore
from template_forge.models.contract_model import TemplateAttributes, TemplateToken, Transfer

logger = structlog.get_logger(__name__)

ReceiverHook = Callable[[Transfer], Any]


class TokenLedger:
    """Holds balances and token metadata, and performs transfers."""

    def __init__(self, store: Optional[StateStore] = None):
        self.store = store or StateStore()
        self._receivers: Dict[str, ReceiverHook] = {}

    # Balances

    def balance_of(self, account: str) -> int:
        return self.store.get(("balance", account), 0)

    def token_balance(self, account: str, token_identifier: str, nonce: int) -> int:
        return self.store.get(("esdt", account, token_identifier, nonce), 0)

    def deposit(self, account: str, amount: int) -> None:
        """Credit native coin from outside the ledger (genesis, faucet)."""
        self._check_amount(amount)
        self.store.update(("balance", account), lambda balance: balance + amount, 0)

    # Transfers

    def transfer_native(self, sender: str, recipient: str, amount: int) -> Transfer:
        self._check_amount(amount)
        self._debit(("balance", sender), amount)
        self.store.update(("balance", recipient), lambda balance: balance + amount, 0)
        transfer = Transfer(sender=sender, recipient=recipient, amount=amount)
        logger.debug("Native transfer", sender=sender, recipient=recipient, amount=amount)
        self._notify(transfer)
        return transfer

    def transfer_token(
        self, sender: str, recipient: str, token_identifier: str, nonce: int, amount: int = 1
    ) -> Transfer:
        self._check_amount(amount)
        self._debit(("esdt", sender, token_identifier, nonce), amount)
        self.store.update(("esdt", recipient, token_identifier, nonce), lambda balance: balance + amount, 0)
        transfer = Transfer(
            sender=sender,
            recipient=recipient,
            amount=amount,
            token_identifier=token_identifier,
            nonce=nonce,
        )
        logger.debug(
            "Token transfer",
            sender=sender,
            recipient=recipient,
            token=token_identifier,
            nonce=nonce,
            amount=amount,
        )
        self._notify(transfer)
        return transfer

    # Non-fungible tokens

    def create_nft(
        self,
        holder: str,
        token_identifier: str,
        name: bytes,
        royalties: int,
        attributes: TemplateAttributes,
    ) -> int:
        """Create one unit of a new nonce and credit it to holder."""
        nonce = self.store.update(("nft_last_nonce", token_identifier), lambda last: last + 1, 0)
        token = TemplateToken(
            token_identifier=token_identifier,
            nonce=nonce,
            name=name,
            royalties=royalties,
            creator=holder,
            attributes=attributes,
        )
        self.store.set(("nft", token_identifier, nonce), token)
        self.store.update(("esdt", holder, token_identifier, nonce), lambda balance: balance + 1, 0)
        logger.info("Token created", token=token_identifier, nonce=nonce)
        return nonce

    def get_nft(self, token_identifier: str, nonce: int) -> Optional[TemplateToken]:
        return self.store.get(("nft", token_identifier, nonce))

    # Receiver hooks

    def register_receiver(self, account: str, hook: ReceiverHook) -> None:
        self._receivers[account] = hook

    def unregister_receiver(self, account: str) -> None:
        self._receivers.pop(account, None)

    def _notify(self, transfer: Transfer) -> None:
        hook = self._receivers.get(transfer.recipient)
        if hook is not None:
            hook(transfer)

    def _debit(self, key: tuple, amount: int) -> None:
        def debit(balance: int):
            if balance < amount:
                raise InsufficientFunds(
                    f"Balance too low for transfer of {amount}",
                    required=amount,
                    provided=balance,
                )
            return balance - amount

        self.store.update(key, debit, 0)

    @staticmethod
    def _check_amount(amount: int) -> None:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise ValidationError("Amount must be a non-negative integer", field_name="amount", field_value=amount)
