"""Composer utility functions.

Provides encoding and network utilities shared by the
transaction builders and the composer.
"""

from __future__ import annotations

import json
from typing import Any

from .constants import (
    LEASE_LENGTH,
    LOCALNET_GENESIS_IDS,
    MAX_NOTE_LENGTH,
    NETWORK_CONFIGS,
    ERR_INVALID_NOTE,
)
from .errors import ComposerConfigError, InvalidLeaseError


def genesis_id_is_localnet(genesis_id: str | None) -> bool:
    """Check whether a genesis ID belongs to a local development network.

    Args:
        genesis_id: Genesis ID reported by algod (e.g. "dockernet-v1").

    Returns:
        True for LocalNet / sandbox genesis IDs.
    """
    return genesis_id in LOCALNET_GENESIS_IDS


def normalize_network(network: str) -> str:
    """Normalize a network name.

    Args:
        network: Network name, case-insensitive ("mainnet", "TestNet", ...).

    Returns:
        Lowercase network name present in NETWORK_CONFIGS.

    Raises:
        ValueError: If network is not supported.
    """
    name = network.strip().lower()
    if name in NETWORK_CONFIGS:
        return name
    raise ValueError(f"Unsupported network: {network}")


def get_network_config(network: str) -> dict[str, Any]:
    """Get configuration for a network.

    Args:
        network: Network name.

    Returns:
        NetworkConfig dictionary.

    Raises:
        ValueError: If network is not supported.
    """
    return dict(NETWORK_CONFIGS[normalize_network(network)])


def encode_lease(lease: bytes | str | None) -> bytes | None:
    """Encode a lease into the 32-byte wire form.

    Strings are UTF-8 encoded. Values shorter than 32 bytes are zero-padded.

    Args:
        lease: Lease bytes or text.

    Returns:
        32-byte lease, or None if no lease was given.

    Raises:
        InvalidLeaseError: If the lease is empty or longer than 32 bytes.
    """
    if lease is None:
        return None

    lease_bytes = lease.encode("utf-8") if isinstance(lease, str) else bytes(lease)
    if not 0 < len(lease_bytes) <= LEASE_LENGTH:
        raise InvalidLeaseError(
            "Received invalid lease; expected something with length between 1 and "
            f"{LEASE_LENGTH}, but received bytes with length {len(lease_bytes)}"
        )
    return lease_bytes.ljust(LEASE_LENGTH, b"\x00")


def encode_note(note: bytes | str | dict[str, Any] | None) -> bytes | None:
    """Encode a transaction note.

    Strings are UTF-8 encoded and dicts are JSON encoded.

    Args:
        note: Note bytes, text, or JSON-serializable dict.

    Returns:
        Note bytes, or None if no note was given.

    Raises:
        ComposerConfigError: If the encoded note is longer than 1024 bytes.
    """
    if note is None:
        return None

    if isinstance(note, (bytes, bytearray)):
        note_bytes = bytes(note)
    elif isinstance(note, str):
        note_bytes = note.encode("utf-8")
    else:
        note_bytes = json.dumps(note).encode("utf-8")

    if len(note_bytes) > MAX_NOTE_LENGTH:
        raise ComposerConfigError(
            f"Note is {len(note_bytes)} bytes; the maximum is {MAX_NOTE_LENGTH}",
            code=ERR_INVALID_NOTE,
        )
    return note_bytes


def is_abi_value(value: Any) -> bool:
    """Check whether a method argument is a plain ABI value.

    Scalars (bool, int, str, bytes) qualify, as do lists and tuples whose
    members all qualify. Anything else is treated as transaction-like.

    Args:
        value: Candidate argument.

    Returns:
        True if the value can be ABI-encoded directly.
    """
    if isinstance(value, (list, tuple)):
        return all(is_abi_value(v) for v in value)

    return isinstance(value, (bool, int, str, bytes, bytearray))
