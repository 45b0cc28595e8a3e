"""Ticketed token sale with a per-buyer allocation cap."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, localcontext
from typing import Any

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
class TokenSale:
    admin_badge: ResourceDef
    tokens_for_sale: Vault
    payment_vault: Vault
    sale_ticket_minter: Vault
    sale_tickets: ResourceDef
    price_per_token: Decimal
    max_personal_allocation: Decimal
    sale_started: bool = False

    @classmethod
    def new(cls, ledger: Ledger, tokens_for_sale: Bucket, payment_token: ResourceDef,
            price_per_token: Any, max_personal_allocation: Any) -> tuple["TokenSale", Bucket]:
        admin_badge = ledger.create_badge({"name": "admin_badge"}, 1)
        minter = ledger.create_badge({"name": "sale_ticket_minter"}, 1)
        tickets = ledger.new_fungible(
            0, {"name": "Sale Ticket Token", "symbol": "STT"}, minter.resource
        )
        sale = cls(
            admin_badge=admin_badge.resource,
            tokens_for_sale=Vault(tokens_for_sale.resource, tokens_for_sale),
            payment_vault=Vault(payment_token),
            sale_ticket_minter=Vault(minter.resource, minter),
            sale_tickets=tickets,
            price_per_token=to_decimal(price_per_token),
            max_personal_allocation=to_decimal(max_personal_allocation),
        )
        return sale, admin_badge

    def create_tickets(self, amount: int, auth: Proof) -> Bucket:
        check_proof(auth, self.admin_badge)
        with self.sale_ticket_minter.authorize() as minter:
            return self.sale_tickets.mint(amount, minter)

    def start_sale(self, auth: Proof) -> None:
        check_proof(auth, self.admin_badge)
        self.sale_started = True

    def withdraw_payments(self, auth: Proof) -> Bucket:
        check_proof(auth, self.admin_badge)
        return self.payment_vault.take_all()

    def buy_tokens(self, payment: Bucket, ticket: Bucket) -> tuple[Bucket, Bucket]:
        """Burn one ticket and buy as many tokens as the payment and cap allow."""
        if not self.sale_started:
            raise TransactionError("The sale has not started yet")
        if not self.tokens_for_sale.amount > 0:
            raise TransactionError("The sale has ended already")
        if ticket.amount != 1:
            raise TransactionError(
                "You need to send exactly one ticket in order to participate in the sale"
            )
        with self.sale_ticket_minter.authorize() as minter:
            self.sale_tickets.burn(ticket, minter)

        payment_amount = min(payment.amount, self.max_personal_allocation)
        with localcontext() as ctx:
            ctx.prec = 80
            buy_amount = to_decimal(payment_amount / self.price_per_token)
            actual_buy = min(self.tokens_for_sale.amount, buy_amount)
            actual_payment = to_decimal(actual_buy * self.price_per_token)

        self.payment_vault.put(payment.take(actual_payment))
        bought = self.tokens_for_sale.take(actual_buy)
        return bought, payment