"""Factory that sells, mints and burns a utility token priced in XRD."""

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

_MAX_DIVISIBILITY = 18


@dataclass
class UtilityTokenFactory:
    ledger: Ledger
    ut_minter_vault: Vault
    ut_minter_badge: ResourceDef
    available_ut: Vault
    ut_token_price: Decimal
    collected_xrd: Vault
    ut_max_buy: int
    ut_mint_size: int
    total_minted: int
    total_claimed: Decimal = field(default_factory=lambda: Decimal(0))
    total_redeemed: Decimal = field(default_factory=lambda: Decimal(0))

    @classmethod
    def new(cls, ledger: Ledger, my_id: str, ut_name: str, ut_symbol: str,
            ut_description: str, price: Any, mint_size: int,
            max_buy: int) -> tuple["UtilityTokenFactory", Bucket]:
        """Create the factory; return it and one of the two minter badges."""
        minter_bucket = ledger.create_badge({"name": my_id}, 2)
        minter_badge = minter_bucket.resource
        returned_badge = minter_bucket.take(1)

        ut_resource = ledger.new_fungible(
            _MAX_DIVISIBILITY,
            {"name": ut_name, "symbol": ut_symbol, "description": ut_description},
            minter_badge,
        )
        ut_tokens = ut_resource.mint(mint_size, minter_bucket.present())

        if not mint_size > 0:
            raise TransactionError("You must specify a non-zero number for the mint_size.")
        if max_buy > mint_size:
            raise TransactionError(
                "The single purchase max buy size should be less than or equal to the mint size."
            )
        factory = cls(
            ledger=ledger,
            ut_minter_vault=Vault(minter_badge, minter_bucket),
            ut_minter_badge=minter_badge,
            available_ut=Vault(ut_resource, ut_tokens),
            ut_token_price=to_decimal(price),
            collected_xrd=Vault(ledger.xrd),
            ut_max_buy=max_buy,
            ut_mint_size=mint_size,
            total_minted=mint_size,
        )
        return factory, returned_badge

    @property
    def resource(self) -> ResourceDef:
        """The utility token's resource definition."""
        return self.available_ut.resource

    @property
    def address(self) -> str:
        """The utility token's resource address."""
        return self.available_ut.resource_address

    def purchase(self, number: int, payment: Bucket) -> tuple[Bucket, Bucket]:
        """Buy up to ``max_buy`` tokens; return the change and the bought tokens."""
        if payment.resource != self.ledger.xrd:
            raise TransactionError("You must purchase the utility tokens with Radix (XRD).")
        ut_bucket = Bucket(self.resource)
        num = number
        if num > self.ut_max_buy:
            num = self.ut_max_buy
            self.ledger.info(f"A max of {self.ut_max_buy} tokens can be purcahsed at a time.")
        cost = to_decimal(self.ut_token_price * num)
        if payment.amount < cost:
            self.ledger.info(
                f"Insufficient funds. Required payment for {num} UT tokens is {cost} XRD."
            )
        else:
            self.ledger.info("Thank you!")
            if self.available_ut.amount < num:
                with self.ut_minter_vault.authorize() as badge:
                    new_tokens = self.resource.mint(self.ut_mint_size, badge)
                self.available_ut.put(new_tokens)
                self.total_minted += self.ut_mint_size
            self.collected_xrd.put(payment.take(cost))
            ut_bucket.put(self.available_ut.take(num))
        return payment, ut_bucket

    def show_bank(self, auth: Proof) -> None:
        check_proof(auth, self.ut_minter_badge)
        symbol = self.resource.metadata.get("symbol", "")
        info = self.ledger.info
        info(f"Available {symbol}: {self.available_ut.amount}")
        info(f"Claimable XRD: {self.collected_xrd.amount}")
        info(f"Total XRD Claimed: {self.total_claimed}")
        info(f"Total {symbol} Minted: {self.total_minted}")
        info(f"Total {symbol} Redeemed: {self.total_redeemed}")

    def claim(self, auth: Proof) -> Bucket:
        """Take all XRD collected from sales."""
        check_proof(auth, self.ut_minter_badge)
        self.total_claimed = to_decimal(self.total_claimed + self.collected_xrd.amount)
        return self.collected_xrd.take_all()

    def redeem(self, used_tokens: Bucket) -> None:
        """Burn spent utility tokens."""
        if not used_tokens.amount > 0:
            return
        if used_tokens.resource != self.resource:
            raise TransactionError("You can only redeem the expected utility tokens.")
        self.total_redeemed = to_decimal(self.total_redeemed + used_tokens.amount)
        with self.ut_minter_vault.authorize() as badge:
            self.resource.burn(used_tokens, badge)