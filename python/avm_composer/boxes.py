"""Box reference resolution.

Normalizes the box identifiers accepted on app-call and method-call intents
into the ``(app_id, name_bytes)`` pairs algosdk puts on the wire.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from algosdk import encoding

from .errors import ComposerConfigError
from .types import BoxReference


def encode_box_name(name: Any) -> bytes:
    """Encode a box name.

    Args:
        name: Raw bytes (unchanged), text (UTF-8), or anything with an
            ``address`` attribute (its 32-byte public key).

    Returns:
        Box name bytes.

    Raises:
        ComposerConfigError: If the name is none of the above.
    """
    if isinstance(name, (bytes, bytearray)):
        return bytes(name)
    if isinstance(name, str):
        return name.encode("utf-8")
    address = getattr(name, "address", None)
    if isinstance(address, str):
        return encoding.decode_address(address)
    raise ComposerConfigError(f"Unsupported box name of type {type(name).__name__}")


def resolve_box_reference(box: Any, app_id: int = 0) -> tuple[int, bytes]:
    """Resolve a box reference to its wire pair.

    Args:
        box: A BoxReference, an ``(app_id, name)`` tuple, or a bare name.
        app_id: Owning app for bare names; 0 means the app being called.

    Returns:
        Tuple of (app_id, name bytes).
    """
    if isinstance(box, BoxReference):
        return box.app_id, encode_box_name(box.name)
    if isinstance(box, tuple) and len(box) == 2 and isinstance(box[0], int):
        return box[0], encode_box_name(box[1])
    return app_id, encode_box_name(box)


def resolve_box_references(
    boxes: Iterable[Any] | None,
    app_id: int = 0,
) -> list[tuple[int, bytes]] | None:
    """Resolve a list of box references.

    Args:
        boxes: Box references, or None.
        app_id: Owning app for bare names.

    Returns:
        List of (app_id, name bytes) pairs, or None if no boxes were given.
    """
    if boxes is None:
        return None
    return [resolve_box_reference(box, app_id) for box in boxes]
