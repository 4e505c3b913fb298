"""Composer error taxonomy.

Every error carries a string ``code`` from ``constants`` so callers can branch
on the failure kind without parsing messages:

- Configuration errors (``ComposerConfigError``): bad fee policy, fee over the
  ceiling, missing fields, unsupported intents or arguments, bad lease/note.
- State errors (``ComposerStateError``): mutating a group that is already built.
- Capacity errors (``GroupCapacityError``): more than 16 resolved transactions.
- Resolution errors (``SignerNotFoundError``): no signer for a sender.

Errors raised by algosdk or the algod client (network, compilation,
submission) are not wrapped and propagate unchanged.
"""

from __future__ import annotations

from .constants import (
    ERR_FEE_CEILING,
    ERR_FEE_CONFLICT,
    ERR_GROUP_ALREADY_BUILT,
    ERR_GROUP_TOO_LARGE,
    ERR_INVALID_LEASE,
    ERR_MISSING_FIELD,
    ERR_SIGNER_NOT_FOUND,
    ERR_UNSUPPORTED_INTENT,
    MAX_GROUP_SIZE,
)


class ComposerError(Exception):
    """Base class for all composer errors.

    Attributes:
        code: Machine-readable error code.
    """

    code = "composer_error"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class ComposerConfigError(ComposerError, ValueError):
    """An intent or composer is configured in a way that cannot be built."""

    code = "invalid_configuration"


class FeeConfigError(ComposerConfigError):
    """Both ``static_fee`` and ``extra_fee`` were set on one intent."""

    code = ERR_FEE_CONFLICT

    def __init__(self, message: str = "Cannot set both static_fee and extra_fee"):
        super().__init__(message)


class FeeCeilingError(ComposerConfigError):
    """The computed fee is higher than the intent's ``max_fee``.

    Attributes:
        fee: Computed fee in microalgos.
        max_fee: Ceiling in microalgos.
    """

    code = ERR_FEE_CEILING

    def __init__(self, fee: int, max_fee: int):
        self.fee = fee
        self.max_fee = max_fee
        super().__init__(
            f"Transaction fee {fee} µALGO is greater than max_fee {max_fee} µALGO"
        )


class MissingFieldError(ComposerConfigError):
    """A field required by the transaction kind is missing."""

    code = ERR_MISSING_FIELD


class UnsupportedIntentError(ComposerConfigError):
    """The intent or method argument kind is not recognised."""

    code = ERR_UNSUPPORTED_INTENT


class InvalidLeaseError(ComposerConfigError):
    """Lease is empty or longer than 32 bytes."""

    code = ERR_INVALID_LEASE


class ComposerStateError(ComposerError):
    """Operation not allowed in the composer's current state."""

    code = ERR_GROUP_ALREADY_BUILT


class GroupCapacityError(ComposerError):
    """Resolved transactions exceed the atomic group size limit.

    Attributes:
        size: Number of transactions that would have been in the group.
    """

    code = ERR_GROUP_TOO_LARGE

    def __init__(self, size: int):
        self.size = size
        super().__init__(
            f"Transaction group size {size} exceeds the maximum of {MAX_GROUP_SIZE}"
        )


class SignerNotFoundError(ComposerError, KeyError):
    """No signer is registered for an address and no default signer is set."""

    code = ERR_SIGNER_NOT_FOUND

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"No signer found for address {address}")

    def __str__(self) -> str:
        return self.args[0]
