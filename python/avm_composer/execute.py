"""Execution of a built group: wait budget and hand-off to the group sender."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from algosdk.atomic_transaction_composer import TransactionWithSigner

from .signer import GroupSender, SuggestedParamsSource
from .types import BuiltGroup, ExecuteParams, SendGroupResult

logger = logging.getLogger(__name__)


def compute_wait_rounds(transactions: Iterable[TransactionWithSigner], first_valid: int) -> int:
    """Rounds to wait so the whole group's validity window is covered.

    Args:
        transactions: Group members.
        first_valid: Current first valid round reported by algod.

    Returns:
        max(last valid) - first_valid + 1.
    """
    last_valid = max(ts.txn.last_valid_round for ts in transactions)
    return last_valid - first_valid + 1


def execute_group(
    built: BuiltGroup,
    group_sender: GroupSender,
    get_suggested_params: SuggestedParamsSource,
    params: ExecuteParams | None = None,
) -> SendGroupResult:
    """Send a built group and wait for it to be confirmed.

    Args:
        built: Group returned by TransactionComposer.build().
        group_sender: Submits the group and waits for confirmation.
        get_suggested_params: Fresh network parameters for the wait budget.
        params: Execution options.

    Returns:
        The sender's result, unchanged.
    """
    params = params or ExecuteParams()

    wait_rounds = params.max_rounds_to_wait
    if wait_rounds is None:
        sp = get_suggested_params()
        wait_rounds = compute_wait_rounds(built.transactions, sp.first)

    logger.debug(
        "Executing group of %d transaction(s), waiting up to %d rounds",
        len(built.transactions),
        wait_rounds,
    )
    return group_sender.send(built.atc, wait_rounds, suppress_log=params.suppress_log)
