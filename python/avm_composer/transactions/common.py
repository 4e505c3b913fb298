"""Common build step applied to every transaction the composer creates.

Sets lease, rekey, note, validity window, and fee on a transaction skeleton
built by one of the typed builders (or by the method-call resolver).
"""

from __future__ import annotations

from dataclasses import dataclass

from algosdk import transaction

from ..constants import DEFAULT_VALIDITY_WINDOW, LOCALNET_VALIDITY_WINDOW, MIN_TXN_FEE
from ..errors import FeeCeilingError, FeeConfigError
from ..types import CommonParams
from ..utils import encode_lease, encode_note, genesis_id_is_localnet


@dataclass(frozen=True)
class ValidityDefaults:
    """Composer-wide validity window settings.

    Attributes:
        window: Default validity window in rounds.
        is_explicit: Whether the window was set by the caller. When it was
            not, LocalNet gets LOCALNET_VALIDITY_WINDOW instead.
    """

    window: int = DEFAULT_VALIDITY_WINDOW
    is_explicit: bool = False

    @classmethod
    def from_setting(cls, window: int | None) -> "ValidityDefaults":
        """Create defaults from an optional composer setting."""
        if window is None:
            return cls()
        return cls(window=window, is_explicit=True)

    def window_for(self, genesis_id: str | None) -> int:
        """Get the window to use on a network.

        Args:
            genesis_id: Genesis ID from suggested params.

        Returns:
            Validity window in rounds.
        """
        if not self.is_explicit and genesis_id_is_localnet(genesis_id):
            return LOCALNET_VALIDITY_WINDOW
        return self.window


def check_fee_policy(params: CommonParams) -> None:
    """Reject an intent that sets both a static and an extra fee.

    Raises:
        FeeConfigError: If static_fee and extra_fee are both set.
    """
    if params.static_fee is not None and params.extra_fee is not None:
        raise FeeConfigError()


def apply_common_params(
    params: CommonParams,
    txn: transaction.Transaction,
    sp: transaction.SuggestedParams,
    validity: ValidityDefaults,
) -> transaction.Transaction:
    """Apply shared intent fields to a transaction skeleton.

    Fee handling:
    - static_fee is used verbatim.
    - Otherwise fee = max(estimated size * fee per byte, min fee) + extra_fee.
    The fee on the returned transaction is final; algosdk does not
    recalculate a fee that is already set on a Transaction object.

    Args:
        params: Intent carrying the shared fields.
        txn: Transaction skeleton (mutated in place).
        sp: Suggested params the skeleton was built with.
        validity: Composer validity window defaults.

    Returns:
        The same transaction, ready for grouping.

    Raises:
        FeeConfigError: If both static_fee and extra_fee are set.
        FeeCeilingError: If the fee is higher than max_fee.
        InvalidLeaseError: If the lease is not 1..32 bytes.
    """
    if params.lease is not None:
        txn.lease = encode_lease(params.lease)
    if params.rekey_to:
        txn.rekey_to = params.rekey_to
    if params.note is not None:
        txn.note = encode_note(params.note)

    if params.first_valid_round:
        txn.first_valid_round = params.first_valid_round

    if params.last_valid_round:
        txn.last_valid_round = params.last_valid_round
    else:
        window = params.validity_window
        if window is None:
            window = validity.window_for(sp.gen)
        txn.last_valid_round = txn.first_valid_round + window

    check_fee_policy(params)

    if params.static_fee is not None:
        txn.fee = params.static_fee
    else:
        min_fee = sp.min_fee or MIN_TXN_FEE
        txn.fee = max(txn.estimate_size() * sp.fee, min_fee)
        if params.extra_fee:
            txn.fee += params.extra_fee

    if params.max_fee is not None and txn.fee > params.max_fee:
        raise FeeCeilingError(txn.fee, params.max_fee)

    return txn
