"""Transit system selling ride tickets for dollars or euros."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable

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

AMERICAN = "American"
EUROPEAN = "European"


@dataclass
class Transit:
    ledger: Ledger
    ticket_resource_def: ResourceDef
    ticket_minter: Vault
    ticket_price: Decimal
    ride_price: Decimal
    american_host_badge: ResourceDef
    european_host_badge: ResourceDef
    collected_dollars: Vault
    collected_euros: Vault
    american_rides: bool = True
    european_rides: bool = True
    riders: dict[tuple[str, ...], int] = field(default_factory=dict)

    @classmethod
    def new(cls, ledger: Ledger, price_per_ticket: Any, price_per_ride: Any,
            dollar: ResourceDef, euro: ResourceDef) -> tuple["Transit", Bucket, Bucket]:
        ticket_price = to_decimal(price_per_ticket)
        ride_price = to_decimal(price_per_ride)
        if not (ticket_price > 0 and ride_price > 0):
            raise TransactionError("Invalid CLI arguments")

        american = ledger.create_badge({
            "name": "American Host Badge",
            "symbol": "APB",
            "description": "A badge that grants american host privileges",
        }, 1)
        european = ledger.create_badge({
            "name": "European Host Badge",
            "symbol": "EPB",
            "description": "A badge that grants european host privileges",
        }, 1)
        minter = ledger.create_badge({"name": "Ticket Mint Auth"}, 1)
        tickets = ledger.new_fungible(0, {
            "name": "Ticket",
            "symbol": "TK",
            "description": "A ticket used for rides",
        }, minter.resource)

        transit = cls(
            ledger=ledger,
            ticket_resource_def=tickets,
            ticket_minter=Vault(minter.resource, minter),
            ticket_price=ticket_price,
            ride_price=ride_price,
            american_host_badge=american.resource,
            european_host_badge=european.resource,
            collected_dollars=Vault(dollar),
            collected_euros=Vault(euro),
        )
        return transit, american, european

    def withdraw_dollars(self, availability: bool, auth: Proof) -> Bucket:
        """Set whether American rides run and take all collected dollars."""
        check_proof(auth, self.american_host_badge)
        self.american_rides = availability
        return self.collected_dollars.take_all()

    def withdraw_euros(self, availability: bool, auth: Proof) -> Bucket:
        """Set whether European rides run and take all collected euros."""
        check_proof(auth, self.european_host_badge)
        self.european_rides = availability
        return self.collected_euros.take_all()

    def buy_ticket(self, payment: Bucket) -> tuple[Bucket, Bucket]:
        """Sell one ticket for dollars or euros; return the ticket and the change."""
        dollars = payment.resource_address == self.collected_dollars.resource_address
        euros = payment.resource_address == self.collected_euros.resource_address
        if payment.amount < self.ticket_price:
            raise TransactionError("Invalid ticket price")
        if not (dollars or euros):
            raise TransactionError("Invalid currency")

        with self.ticket_minter.authorize() as minter:
            ticket = self.ticket_resource_def.mint(1, minter)
        target = self.collected_dollars if dollars else self.collected_euros
        target.put(payment.take(self.ticket_price))
        return ticket, payment

    def ride(self, payment: Bucket, ride_type: str, signers: Iterable[str]) -> None:
        """Burn the ride price in tickets and record the riders' epoch."""
        valid_ride = ((ride_type == AMERICAN and self.american_rides)
                      or (ride_type == EUROPEAN and self.european_rides))
        if not valid_ride:
            raise TransactionError("Invalid ride")
        if payment.resource_address != self.ticket_resource_def.address:
            raise TransactionError("Invalid currency")
        if payment.amount != self.ride_price:
            raise TransactionError("Invalid price per ride")

        with self.ticket_minter.authorize() as minter:
            self.ticket_resource_def.burn(payment, minter)

        key = tuple(signers)
        epoch = self.ledger.epoch
        last = self.riders.get(key)
        if last is None:
            self.ledger.info("Hi, this is your first ride on a transit, have fun!")
            self.riders[key] = epoch
        elif last == epoch:
            self.ledger.info(
                f"Hi, you have already used the transit more than once during epoch: {epoch}"
            )
        else:
            self.ledger.info(
                f"Hi, welcome back, you have not used the transit during epoch: {epoch}"
            )
            self.riders[key] = epoch