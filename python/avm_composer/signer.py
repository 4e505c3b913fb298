"""Collaborator protocol definitions.

Defines the interfaces the composer consumes without owning:
- SignerAccount: an address paired with an algosdk TransactionSigner.
- ProgramCompiler: turns TEAL source into program bytes.
- GroupSender: submits a built group and waits for confirmation.

Plus the callable shapes for signer lookup and suggested params.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from algosdk.atomic_transaction_composer import (
        AtomicTransactionComposer,
        TransactionSigner,
    )
    from algosdk.transaction import SuggestedParams

    from .types import CompiledProgram, SendGroupResult

# Returns the signer for an address; must be total over every sender used
SignerLookup = Callable[[str], "TransactionSigner"]

# Returns fresh network parameters (fee per byte, min fee, rounds, genesis)
SuggestedParamsSource = Callable[[], "SuggestedParams"]


class HasAddress(Protocol):
    """Anything that exposes an Algorand address."""

    @property
    def address(self) -> str:
        """Get the 58-character Algorand address."""
        ...


class SignerAccount(Protocol):
    """Protocol for an account that can sign its own transactions.

    Accepted anywhere an intent takes a ``signer``; the composer unwraps
    ``.signer`` before binding it to a transaction.
    """

    @property
    def address(self) -> str:
        """Get the account's Algorand address.

        Returns:
            58-character Algorand address.
        """
        ...

    @property
    def signer(self) -> TransactionSigner:
        """Get the algosdk signer for this account."""
        ...


class ProgramCompiler(Protocol):
    """Protocol for compiling TEAL source text."""

    def compile(self, source: str) -> CompiledProgram:
        """Compile TEAL source.

        Args:
            source: TEAL program text.

        Returns:
            CompiledProgram with bytes, hash, and source map.

        Raises:
            Exception: If compilation fails (propagated unchanged).
        """
        ...


class GroupSender(Protocol):
    """Protocol for submitting a built group and waiting for confirmation."""

    def send(
        self,
        atc: AtomicTransactionComposer,
        wait_rounds: int,
        suppress_log: bool = False,
    ) -> SendGroupResult:
        """Sign, submit, and wait for a built transaction group.

        Args:
            atc: Built AtomicTransactionComposer (method map already set).
            wait_rounds: Maximum rounds to wait for confirmation.
            suppress_log: Skip the info log line for this send.

        Returns:
            SendGroupResult with tx ids, confirmations, and ABI returns.

        Raises:
            Exception: If sending or confirmation fails (propagated unchanged).
        """
        ...
