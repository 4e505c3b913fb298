"""Concrete collaborators for the composer.

Provides ready-to-use implementations backed by py-algorand-sdk:
- SignerRegistry: address -> TransactionSigner lookup.
- AddressWithSigner: an account usable as an intent ``signer``.
- AlgodProgramCompiler: ProgramCompiler over algod's compile endpoint.
- AlgodGroupSender: GroupSender over AtomicTransactionComposer.execute.
- get_algod_client: AlgodClient factory for the known networks.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass

from algosdk import account, mnemonic
from algosdk.atomic_transaction_composer import (
    AccountTransactionSigner,
    AtomicTransactionComposer,
    TransactionSigner,
)
from algosdk.source_map import SourceMap
from algosdk.v2client import algod

from .constants import ALGOD_TOKEN, NETWORK_LOCALNET
from .errors import SignerNotFoundError
from .types import CompiledProgram, SendGroupResult
from .utils import get_network_config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddressWithSigner:
    """An address paired with the signer for it.

    Implements SignerAccount protocol.

    Example:
        ```python
        private_key, address = account.generate_account()
        sender = AddressWithSigner.from_private_key(private_key)
        composer.add_payment(PaymentParams(sender=sender.address, signer=sender, ...))
        ```
    """

    address: str
    signer: TransactionSigner

    @classmethod
    def from_private_key(cls, private_key: str) -> "AddressWithSigner":
        """Create from a base64-encoded Algorand private key."""
        return cls(
            address=account.address_from_private_key(private_key),
            signer=AccountTransactionSigner(private_key),
        )

    @classmethod
    def from_mnemonic(cls, phrase: str) -> "AddressWithSigner":
        """Create from a 25-word Algorand mnemonic."""
        return cls.from_private_key(mnemonic.to_private_key(phrase))


class SignerRegistry:
    """Signer lookup by sender address.

    Pass ``registry.get_signer`` as the composer's ``get_signer``.

    Example:
        ```python
        registry = SignerRegistry()
        registry.add_account(private_key_1)
        registry.add_account_from_mnemonic(phrase)
        composer = TransactionComposer(algod=client, get_signer=registry.get_signer)
        ```
    """

    def __init__(self, default_signer: TransactionSigner | None = None):
        """Create registry.

        Args:
            default_signer: Signer for addresses with no registered signer.
        """
        self._signers: dict[str, TransactionSigner] = {}
        self._default_signer = default_signer

    def add_account(self, private_key: str) -> "SignerRegistry":
        """Register an account by private key.

        Args:
            private_key: Base64-encoded Algorand private key.

        Returns:
            Self for chaining.
        """
        entry = AddressWithSigner.from_private_key(private_key)
        self._signers[entry.address] = entry.signer
        return self

    def add_account_from_mnemonic(self, phrase: str) -> "SignerRegistry":
        """Register an account by 25-word Algorand mnemonic.

        Raises:
            ValueError: If the mnemonic is invalid.
        """
        return self.add_account(mnemonic.to_private_key(phrase))

    def set_signer(self, address: str, signer: TransactionSigner) -> "SignerRegistry":
        """Register a signer for an address, replacing any existing one."""
        self._signers[address] = signer
        return self

    def set_default_signer(self, signer: TransactionSigner) -> "SignerRegistry":
        """Set the signer used for addresses with no registered signer."""
        self._default_signer = signer
        return self

    def get_addresses(self) -> list[str]:
        """Get all registered addresses."""
        return list(self._signers.keys())

    def get_signer(self, address: str) -> TransactionSigner:
        """Get the signer for an address.

        Raises:
            SignerNotFoundError: If the address has no signer and there is no default.
        """
        signer = self._signers.get(address, self._default_signer)
        if signer is None:
            raise SignerNotFoundError(address)
        return signer


class AlgodProgramCompiler:
    """Compiles TEAL through algod.

    Implements ProgramCompiler protocol.
    """

    def __init__(self, client: algod.AlgodClient):
        self._client = client

    def compile(self, source: str) -> CompiledProgram:
        """Compile TEAL source, requesting a source map."""
        result = self._client.compile(source, source_map=True)
        compiled_base64 = result["result"]
        sourcemap = result.get("sourcemap")
        return CompiledProgram(
            teal=source,
            compiled=base64.b64decode(compiled_base64),
            compiled_hash=result["hash"],
            compiled_base64=compiled_base64,
            source_map=SourceMap(sourcemap) if sourcemap else None,
        )


class AlgodGroupSender:
    """Signs, submits and confirms built groups through algod.

    Implements GroupSender protocol.
    """

    def __init__(self, client: algod.AlgodClient):
        self._client = client

    def send(
        self,
        atc: AtomicTransactionComposer,
        wait_rounds: int,
        suppress_log: bool = False,
    ) -> SendGroupResult:
        """Sign, submit and wait for a built group.

        Errors from signing, submission and confirmation propagate unchanged.
        """
        txns = [ts.txn for ts in atc.txn_list]
        group = txns[0].group if txns else None
        group_id = base64.b64encode(group).decode("utf-8") if group else ""

        if not suppress_log:
            if len(txns) > 1:
                logger.info("Sending group of %d transactions (%s)", len(txns), group_id)
            else:
                logger.info("Sending single transaction (%s)", txns[0].get_txid() if txns else "")
        for txn in txns:
            logger.debug("Transaction %s: %s from %s", txn.get_txid(), txn.type, txn.sender)

        response = atc.execute(self._client, wait_rounds)
        confirmations = [self._client.pending_transaction_info(txid) for txid in response.tx_ids]

        if not suppress_log:
            logger.info("Group confirmed in round %s", response.confirmed_round)

        return SendGroupResult(
            group_id=group_id,
            tx_ids=list(response.tx_ids),
            transactions=txns,
            confirmations=confirmations,
            confirmed_round=response.confirmed_round,
            returns=list(response.abi_results),
        )


def get_algod_client(network: str | None = None, token: str | None = None) -> algod.AlgodClient:
    """Create an Algod client for a known network.

    Args:
        network: "mainnet", "testnet" or "localnet" (default).
        token: API token; defaults to ALGOD_TOKEN, then the network default.

    Returns:
        AlgodClient for the network's configured URL.

    Raises:
        ValueError: If the network is not supported.
    """
    config = get_network_config(network or NETWORK_LOCALNET)
    if token is None:
        token = ALGOD_TOKEN if ALGOD_TOKEN is not None else config["algod_token"]
    return algod.AlgodClient(token, config["algod_url"])
