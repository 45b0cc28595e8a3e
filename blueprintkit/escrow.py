"""Two-party token swap guarded by one badge per party."""

from __future__ import annotations

from dataclasses import dataclass

from .ledger import Bucket, Ledger, Proof, ResourceDef, TransactionError, Vault, check_proof


@dataclass
class Escrow:
    token_a: Vault
    token_b: Vault
    account_a_badge: ResourceDef
    account_b_badge: ResourceDef
    account_a_accepted: bool = False
    account_b_accepted: bool = False
    trade_canceled: bool = False

    @classmethod
    def new(cls, ledger: Ledger, token_a: ResourceDef,
            token_b: ResourceDef) -> tuple["Escrow", Bucket, Bucket]:
        badge_a = ledger.create_badge({"symbol": "BADGE A"}, 1)
        badge_b = ledger.create_badge({"symbol": "BADGE B"}, 1)
        component = cls(Vault(token_a), Vault(token_b), badge_a.resource, badge_b.resource)
        return component, badge_a, badge_b

    def _is_party_a(self, auth: Proof) -> bool:
        proof = check_proof(auth, self.account_a_badge, self.account_b_badge)
        return proof.resource_address == self.account_a_badge.address

    def put_tokens(self, tokens: Bucket, auth: Proof) -> None:
        is_a = self._is_party_a(auth)
        if self.account_a_accepted or self.account_b_accepted:
            raise TransactionError("Can't add more tokens when someone accepted")
        if self.trade_canceled:
            raise TransactionError("The trade was canceled")
        (self.token_a if is_a else self.token_b).put(tokens)

    def withdraw(self, auth: Proof) -> Bucket:
        is_a = self._is_party_a(auth)
        if not (self.trade_canceled or (self.account_a_accepted and self.account_b_accepted)):
            raise TransactionError("The trade must be accepted or canceled")
        own, other = (self.token_a, self.token_b) if is_a else (self.token_b, self.token_a)
        return own.take_all() if self.trade_canceled else other.take_all()

    def accept(self, auth: Proof) -> None:
        is_a = self._is_party_a(auth)
        if not (self.token_a.amount > 0 and self.token_b.amount > 0):
            raise TransactionError("Both parties must add their tokens before you can accept")
        if self.trade_canceled:
            raise TransactionError("The trade was canceled")
        if is_a:
            if self.account_a_accepted:
                raise TransactionError("You already accepted the offer !")
            self.account_a_accepted = True
        else:
            if self.account_b_accepted:
                raise TransactionError("You already accepted the offer !")
            self.account_b_accepted = True

    def cancel(self, auth: Proof) -> None:
        self._is_party_a(auth)
        if self.account_a_accepted and self.account_b_accepted:
            raise TransactionError("The trade is already over, everyone accepted")
        if self.trade_canceled:
            raise TransactionError("The trade is already canceled")
        self.trade_canceled = True