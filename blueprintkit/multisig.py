"""Release a payment once enough signer badges have approved it."""

from __future__ import annotations

from dataclasses import dataclass

from .ledger import Account, Bucket, Ledger, ResourceDef, TransactionError, Vault


@dataclass
class MultiSigMaker:
    badge_minter_badge: Vault
    signer_badge: ResourceDef
    tokens: Vault
    min_required_sig: int
    destination: Account
    badges_approved: int = 0

    @classmethod
    def new(cls, ledger: Ledger, nb_badges: int, min_required_sig: int, destination: str,
            amount: Bucket) -> tuple["MultiSigMaker", Bucket]:
        if min_required_sig > nb_badges:
            raise TransactionError("Min required sig can't be greater than amount of badges")
        minter = ledger.create_badge({}, 1)
        signer_badge = ledger.new_fungible(0, {"name": "MultiSig Signer Badge"}, minter.resource)
        badges = signer_badge.mint(nb_badges, minter.present())
        component = cls(
            badge_minter_badge=Vault(minter.resource, minter),
            signer_badge=signer_badge,
            tokens=Vault(amount.resource, amount),
            min_required_sig=min_required_sig,
            destination=ledger.account(destination),
        )
        return component, badges

    def approve(self, auth_badge: Bucket) -> None:
        """Burn one signer's badge and send the tokens once enough have approved."""
        if not auth_badge.amount > 0:
            raise TransactionError("Invalid auth")
        if auth_badge.resource != self.signer_badge:
            raise TransactionError("Invalid badge")
        if self.badges_approved >= self.min_required_sig:
            raise TransactionError("Transaction already approved by majority")
        with self.badge_minter_badge.authorize() as minter:
            self.signer_badge.burn(auth_badge, minter)
        self.badges_approved += 1
        if self.badges_approved >= self.min_required_sig:
            self.destination.deposit(self.tokens.take_all())