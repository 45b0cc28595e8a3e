"""Sealed-deadline auction with bid bonds and a payment window for the winner."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
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

PAYMENT_DEADLINE = 100


@dataclass
class Bidder:
    bid: Decimal = field(default_factory=lambda: Decimal(0))
    bid_bond_reclaimed: bool = False


@dataclass
class Auction:
    ledger: Ledger
    component_address: str
    offering: Vault
    bid_bonds: Vault
    payment: Vault
    start: int
    duration: int
    payment_resource: ResourceDef
    reserve_price: Decimal
    bid_bond: Decimal
    auctioneer_badge: ResourceDef
    bidders: dict[str, Bidder] = field(default_factory=dict)
    highest_bid: Decimal = field(default_factory=lambda: Decimal(0))
    payment_claimed: bool = False

    @classmethod
    def new(cls, ledger: Ledger, offering: Bucket, duration: int,
            payment_resource: ResourceDef, reserve_price: Any,
            bid_bond: Any) -> tuple["Auction", Bucket]:
        if not offering.amount > 0:
            raise TransactionError("Incorrect offering")
        reserve = to_decimal(reserve_price)
        bond = to_decimal(bid_bond)
        if bond > reserve:
            raise TransactionError("Bid bond higher than the reserve price")
        address = f"02{ledger.generate_uuid():052x}"
        auctioneer_badge = ledger.create_badge(
            {"name": "Acutioneer badge", "auction": address}, 1
        )
        auction = cls(
            ledger=ledger,
            component_address=address,
            offering=Vault(offering.resource, offering),
            bid_bonds=Vault(payment_resource),
            payment=Vault(payment_resource),
            start=ledger.epoch,
            duration=duration,
            payment_resource=payment_resource,
            reserve_price=reserve,
            bid_bond=bond,
            auctioneer_badge=auctioneer_badge.resource,
        )
        return auction, auctioneer_badge

    @property
    def _end(self) -> int:
        return self.start + self.duration

    def _require_open(self) -> None:
        if self.ledger.epoch > self._end:
            raise TransactionError("Auction closed")

    def _require_closed(self, message: str = "Auction open") -> None:
        if self.ledger.epoch <= self._end:
            raise TransactionError(message)

    def _get_bidder(self, bidder_badge: Proof) -> Bidder:
        if bidder_badge is None or not bidder_badge.amount > 0:
            raise TransactionError("No bidder badge presented")
        bidder = self.bidders.get(bidder_badge.resource_address)
        if bidder is None:
            raise TransactionError("Incorrect bidder badge")
        return bidder

    def register(self, bid_bond: Bucket) -> Bucket:
        """Take the bid bond and return a fresh bidder badge."""
        self._require_open()
        if bid_bond.resource != self.payment_resource:
            raise TransactionError("Incorrect payment token")
        if bid_bond.amount != self.bid_bond:
            raise TransactionError("Incorrect bid bond")
        self.bid_bonds.put(bid_bond)
        badge = self.ledger.create_badge(
            {"name": "Bidder badge", "auction": self.component_address}, 1
        )
        self.bidders[badge.resource_address] = Bidder()
        return badge

    def bid(self, bid: Any, bidder_badge: Proof) -> None:
        self._require_open()
        bidder = self._get_bidder(bidder_badge)
        value = to_decimal(bid)
        if value < self.reserve_price:
            raise TransactionError("Bid lower than the reserve price")
        if not value > self.highest_bid:
            raise TransactionError("Bid not higer than the current highest bid")
        bidder.bid = value
        self.highest_bid = value

    def claim_offering(self, payment: Bucket, bidder_badge: Proof) -> Bucket:
        """Let the winner pay the rest of the bid and take the offering."""
        self._require_closed()
        if self.ledger.epoch > self._end + PAYMENT_DEADLINE:
            raise TransactionError("Payment deadline passed")
        bidder = self._get_bidder(bidder_badge)
        if not (bidder.bid > 0 and bidder.bid == self.highest_bid):
            raise TransactionError("Not the winning bidder")
        if self.offering.is_empty():
            raise TransactionError("Offering already claimed")
        if payment.resource != self.payment_resource:
            raise TransactionError("Incorrect payment token")
        if payment.amount != to_decimal(self.highest_bid - self.bid_bond):
            raise TransactionError("Incorrect payment amount")
        self.payment.put(payment)
        return self.offering.take_all()

    def reclaim_bid_bond(self, bidder_badge: Proof) -> Bucket:
        self._require_closed("Acution open")
        bidder = self._get_bidder(bidder_badge)
        if not (bidder.bid == 0 or bidder.bid != self.highest_bid):
            raise TransactionError("Winning bidder cannot reclaim the bid bond")
        if bidder.bid_bond_reclaimed:
            raise TransactionError("Bid bond already reclaimed")
        bidder.bid_bond_reclaimed = True
        return self.bid_bonds.take(self.bid_bond)

    def claim_payment(self, auth: Proof) -> tuple[Bucket, Bucket]:
        """Return the payment and whatever remains of the offering to the auctioneer."""
        check_proof(auth, self.auctioneer_badge)
        self._require_closed()
        if self.payment_claimed:
            raise TransactionError("Payment already claimed")
        if not (
            self.highest_bid == 0
            or not self.payment.is_empty()
            or self.ledger.epoch > self._end + PAYMENT_DEADLINE
        ):
            raise TransactionError("Payment not received and the payment deadline not passed")
        if self.highest_bid > 0:
            self.payment.put(self.bid_bonds.take(self.bid_bond))
        self.payment_claimed = True
        return self.payment.take_all(), self.offering.take_all()