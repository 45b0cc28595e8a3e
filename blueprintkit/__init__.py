"""In-memory ledger with badge-authorized financial components."""

__version__ = "0.1.0"

__all__ = [
    "ledger",
    "airdrop",
    "airdrop_withdraw",
    "escrow",
    "multisig",
    "auction",
    "library",
    "token_sale",
    "marketplace",
    "name_service",
    "transit",
    "utility_token",
    "service_stub",
]