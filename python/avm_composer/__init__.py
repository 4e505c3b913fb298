"""Transaction-group composer for Algorand (AVM) networks.

This package turns declared transaction intents (payments, asset operations,
key registrations, application and ABI method calls, pre-built groups) into a
single atomic group of up to 16 transactions, with fees, validity windows and
signers resolved against one suggested-params fetch.

Features:
- Typed intents for every transaction kind
- ABI method calls taking other method calls or transactions as arguments,
  flattened into the same group in dependency order
- Static, extra and capped fees per transaction
- LocalNet-aware default validity window
- TEAL compilation cached per composer
- Configurable Algod URLs via environment variables

Environment Variables:
    ALGOD_MAINNET_URL: Custom Algod URL for mainnet (default: AlgoNode)
    ALGOD_TESTNET_URL: Custom Algod URL for testnet (default: AlgoNode)
    ALGOD_LOCALNET_URL: Custom Algod URL for LocalNet (default: localhost:4001)
    ALGOD_TOKEN: Algod API token for all networks

Usage:
    ```python
    import os

    from algosdk import abi
    from avm_composer import (
        MethodCallParams,
        PaymentParams,
        SignerRegistry,
        TransactionComposer,
        get_algod_client,
    )

    client = get_algod_client("localnet")
    registry = SignerRegistry().add_account_from_mnemonic(os.environ["MNEMONIC"])
    sender = registry.get_addresses()[0]

    method = abi.Method.from_signature("deposit(pay)uint64")
    result = (
        TransactionComposer(algod=client, get_signer=registry.get_signer)
        .add_method_call(
            MethodCallParams(
                sender=sender,
                app_id=APP_ID,
                method=method,
                args=[PaymentParams(sender=sender, receiver=APP_ADDRESS, amount=100_000)],
            )
        )
        .execute()
    )
    print(result.returns[0].return_value)
    ```
"""

# Constants
from .constants import (
    DEFAULT_VALIDITY_WINDOW,
    LOCALNET_VALIDITY_WINDOW,
    MAX_GROUP_SIZE,
    MIN_TXN_FEE,
    NETWORK_CONFIGS,
    NETWORK_LOCALNET,
    NETWORK_MAINNET,
    NETWORK_TESTNET,
)

# Errors
from .errors import (
    ComposerConfigError,
    ComposerError,
    ComposerStateError,
    FeeCeilingError,
    FeeConfigError,
    GroupCapacityError,
    InvalidLeaseError,
    MissingFieldError,
    SignerNotFoundError,
    UnsupportedIntentError,
)

# Types
from .types import (
    AppCallParams,
    AppCreateParams,
    AppSchema,
    AppUpdateParams,
    AssetConfigParams,
    AssetCreateParams,
    AssetDestroyParams,
    AssetFreezeParams,
    AssetOptInParams,
    AssetOptOutParams,
    AssetTransferParams,
    BoxReference,
    BuiltGroup,
    CommonParams,
    CompiledProgram,
    ExecuteParams,
    GroupState,
    MethodCallParams,
    OfflineKeyRegistrationParams,
    OnlineKeyRegistrationParams,
    PaymentParams,
    SendGroupResult,
)

# Collaborator protocols
from .signer import (
    GroupSender,
    ProgramCompiler,
    SignerAccount,
)

# Collaborator implementations
from .signers import (
    AddressWithSigner,
    AlgodGroupSender,
    AlgodProgramCompiler,
    SignerRegistry,
    get_algod_client,
)

# Utilities
from .utils import (
    genesis_id_is_localnet,
    get_network_config,
    normalize_network,
)

from .composer import TransactionComposer
from .execute import compute_wait_rounds

__all__ = [
    # Composer
    "TransactionComposer",
    "compute_wait_rounds",
    # Constants
    "DEFAULT_VALIDITY_WINDOW",
    "LOCALNET_VALIDITY_WINDOW",
    "MAX_GROUP_SIZE",
    "MIN_TXN_FEE",
    "NETWORK_CONFIGS",
    "NETWORK_LOCALNET",
    "NETWORK_MAINNET",
    "NETWORK_TESTNET",
    # Errors
    "ComposerConfigError",
    "ComposerError",
    "ComposerStateError",
    "FeeCeilingError",
    "FeeConfigError",
    "GroupCapacityError",
    "InvalidLeaseError",
    "MissingFieldError",
    "SignerNotFoundError",
    "UnsupportedIntentError",
    # Types
    "AppCallParams",
    "AppCreateParams",
    "AppSchema",
    "AppUpdateParams",
    "AssetConfigParams",
    "AssetCreateParams",
    "AssetDestroyParams",
    "AssetFreezeParams",
    "AssetOptInParams",
    "AssetOptOutParams",
    "AssetTransferParams",
    "BoxReference",
    "BuiltGroup",
    "CommonParams",
    "CompiledProgram",
    "ExecuteParams",
    "GroupState",
    "MethodCallParams",
    "OfflineKeyRegistrationParams",
    "OnlineKeyRegistrationParams",
    "PaymentParams",
    "SendGroupResult",
    # Collaborator protocols
    "GroupSender",
    "ProgramCompiler",
    "SignerAccount",
    # Collaborator implementations
    "AddressWithSigner",
    "AlgodGroupSender",
    "AlgodProgramCompiler",
    "SignerRegistry",
    "get_algod_client",
    # Utilities
    "genesis_id_is_localnet",
    "get_network_config",
    "normalize_network",
]
