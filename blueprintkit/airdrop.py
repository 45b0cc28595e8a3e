"""Split a bucket of tokens evenly between registered recipients."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import localcontext

from .ledger import Bucket, Ledger, Proof, ResourceDef, TransactionError, check_proof, to_decimal


@dataclass
class Airdrop:
    ledger: Ledger
    admin_badge: ResourceDef
    recipients: list[str] = field(default_factory=list)

    @classmethod
    def new(cls, ledger: Ledger) -> tuple["Airdrop", Bucket]:
        admin_badge = ledger.create_badge({}, 1)
        return cls(ledger, admin_badge.resource), admin_badge

    def add_recipient(self, recipient: str, auth: Proof) -> None:
        check_proof(auth, self.admin_badge)
        self.recipients.append(recipient)

    def perform_airdrop(self, tokens: Bucket, auth: Proof) -> None:
        """Deposit an equal share into every recipient; the last gets the remainder."""
        check_proof(auth, self.admin_badge)
        if not self.recipients:
            raise TransactionError(
                "You must register at least one recipient before performing an airdrop"
            )
        with localcontext() as ctx:
            ctx.prec = 80
            share = to_decimal(tokens.amount / len(self.recipients))
        *others, last = self.recipients
        for address in others:
            self.ledger.account(address).deposit(tokens.take(share))
        self.ledger.account(last).deposit(tokens)