"""Composer constants - group limits, fee and validity defaults, network configs, error codes."""

import os
from typing import TypedDict

# Maximum transactions in an atomic group
MAX_GROUP_SIZE = 16

# Minimum transaction fee on Algorand (in microalgos)
MIN_TXN_FEE = 1000

# Default number of rounds a transaction stays valid after its first valid round
DEFAULT_VALIDITY_WINDOW = 10

# Validity window used against LocalNet when no default was set explicitly.
# Manual testing against a local node is slow enough that 10 rounds expire.
LOCALNET_VALIDITY_WINDOW = 1000

# Genesis IDs reported by local development networks
LOCALNET_GENESIS_IDS = ("devnet-v1", "sandnet-v1", "dockernet-v1")

# Lease length in bytes (leases are zero-padded up to this)
LEASE_LENGTH = 32

# Maximum note length in bytes
MAX_NOTE_LENGTH = 1024

# ============================================================================
# Algod API Endpoints
# ============================================================================

# Fallback Algod API endpoints (AlgoNode public endpoints, AlgoKit LocalNet)
FALLBACK_ALGOD_MAINNET = "https://mainnet-api.algonode.cloud"
FALLBACK_ALGOD_TESTNET = "https://testnet-api.algonode.cloud"
FALLBACK_ALGOD_LOCALNET = "http://localhost:4001"

# Default LocalNet algod token
LOCALNET_ALGOD_TOKEN = "a" * 64

# Algod URLs - check environment variables first, fall back to defaults
MAINNET_ALGOD_URL = os.environ.get("ALGOD_MAINNET_URL", FALLBACK_ALGOD_MAINNET)
TESTNET_ALGOD_URL = os.environ.get("ALGOD_TESTNET_URL", FALLBACK_ALGOD_TESTNET)
LOCALNET_ALGOD_URL = os.environ.get("ALGOD_LOCALNET_URL", FALLBACK_ALGOD_LOCALNET)

# Token override applied to whichever network is selected
ALGOD_TOKEN = os.environ.get("ALGOD_TOKEN")

# Network names
NETWORK_MAINNET = "mainnet"
NETWORK_TESTNET = "testnet"
NETWORK_LOCALNET = "localnet"

# Genesis hashes (base64 encoded)
MAINNET_GENESIS_HASH = "wGHE2Pwdvd7S12BL5FaOP20EGYesN73ktiC1qzkkit8="
TESTNET_GENESIS_HASH = "SGO1GKSzyE7IEPItTxCByw9x8FmnrCDexi9/cOUJOiI="

# Error codes
ERR_FEE_CONFLICT = "fee_config_static_and_extra"
ERR_FEE_CEILING = "fee_exceeds_max_fee"
ERR_MISSING_FIELD = "missing_required_field"
ERR_UNSUPPORTED_INTENT = "unsupported_intent"
ERR_UNSUPPORTED_METHOD_ARG = "unsupported_method_argument"
ERR_INVALID_LEASE = "invalid_lease"
ERR_INVALID_NOTE = "invalid_note"
ERR_GROUP_TOO_LARGE = "group_too_large"
ERR_EMPTY_GROUP = "empty_group"
ERR_GROUP_ALREADY_BUILT = "group_already_built"
ERR_SIGNER_NOT_FOUND = "signer_not_found"
ERR_NO_PARAMS_SOURCE = "no_suggested_params_source"
ERR_NO_GROUP_SENDER = "no_group_sender"


class NetworkConfig(TypedDict):
    """Configuration for an Algorand network."""

    algod_url: str
    algod_token: str
    genesis_id: str
    genesis_hash: str | None


# Network configurations
NETWORK_CONFIGS: dict[str, NetworkConfig] = {
    NETWORK_MAINNET: {
        "algod_url": MAINNET_ALGOD_URL,
        "algod_token": "",
        "genesis_id": "mainnet-v1.0",
        "genesis_hash": MAINNET_GENESIS_HASH,
    },
    NETWORK_TESTNET: {
        "algod_url": TESTNET_ALGOD_URL,
        "algod_token": "",
        "genesis_id": "testnet-v1.0",
        "genesis_hash": TESTNET_GENESIS_HASH,
    },
    # LocalNet genesis hash differs per node instance
    NETWORK_LOCALNET: {
        "algod_url": LOCALNET_ALGOD_URL,
        "algod_token": LOCALNET_ALGOD_TOKEN,
        "genesis_id": "dockernet-v1",
        "genesis_hash": None,
    },
}
