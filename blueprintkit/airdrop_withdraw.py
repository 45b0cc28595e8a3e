"""Airdrop where each recipient receives a badge and withdraws their share."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .ledger import (
    Bucket,
    Ledger,
    Proof,
    ResourceDef,
    TransactionError,
    Vault,
    check_proof,
    to_decimal,
)


@dataclass
class AirdropWithWithdrawData:
    amount: Decimal
    token_type: str
    is_collected: bool = False


@dataclass
class AirdropWithWithdraw:
    ledger: Ledger
    admin_badge: ResourceDef
    tokens: Vault
    recipient_badge_def: ResourceDef
    minter_badge_vault: Vault

    @classmethod
    def new(cls, ledger: Ledger, token_type: ResourceDef) -> tuple["AirdropWithWithdraw", Bucket]:
        admin_badge = ledger.create_badge({}, 1)
        minter_badge = ledger.create_badge({"name": "minter badge"}, 1)
        recipient_badge_def = ledger.new_non_fungible(
            {"name": "recipient badge"}, minter_badge.resource
        )
        component = cls(
            ledger=ledger,
            admin_badge=admin_badge.resource,
            tokens=Vault(token_type),
            recipient_badge_def=recipient_badge_def,
            minter_badge_vault=Vault(minter_badge.resource, minter_badge),
        )
        return component, admin_badge

    def add_recipient(self, recipient: str, tokens: Bucket, auth: Proof) -> None:
        check_proof(auth, self.admin_badge)
        if not tokens.amount > 0:
            raise TransactionError("tokens quantity cannot be 0")
        if tokens.resource_address != self.tokens.resource_address:
            raise TransactionError("token address must match")
        data = AirdropWithWithdrawData(tokens.amount, tokens.resource_address, False)
        badge_id = self.ledger.generate_uuid()
        with self.minter_badge_vault.authorize() as minter:
            badge = self.recipient_badge_def.mint_nft(badge_id, data, minter)
        self.tokens.put(tokens)
        self.ledger.account(recipient).deposit(badge)

    def available_token(self, auth: Proof) -> Decimal:
        check_proof(auth, self.recipient_badge_def)
        data = self.recipient_badge_def.get_nft_data(auth.nft_id)
        result = to_decimal(0) if data.is_collected else data.amount
        self.ledger.info(f"available : {result}")
        return result

    def withdraw_token(self, auth: Proof) -> Bucket:
        check_proof(auth, self.recipient_badge_def)
        badge_id = auth.nft_id
        data = self.recipient_badge_def.get_nft_data(badge_id)
        if data.is_collected:
            raise TransactionError("withdraw already done")
        data.is_collected = True
        with self.minter_badge_vault.authorize() as minter:
            self.recipient_badge_def.update_nft_data(badge_id, data, minter)
        self.ledger.info(f"withdraw_token : {data.amount}")
        return self.tokens.take(data.amount)