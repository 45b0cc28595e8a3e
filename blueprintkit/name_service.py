"""Name service mapping ``.xrd`` names to addresses, backed by name NFTs."""

from __future__ import annotations

import hashlib
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
    to_decimal,
)

# Assuming an average epoch of about 35 minutes, 15k epochs roughly make a year.
EPOCHS_PER_YEAR = 15_000
_MAX_YEARS = 255


@dataclass
class DomainName:
    address: str
    last_valid_epoch: int
    deposit_amount: Decimal


def hash_name(name: str) -> int:
    """Return the NFT id of ``name``: its SHA-256 digest's first 16 bytes, little-endian."""
    digest = hashlib.sha256(name.encode("utf-8")).digest()
    return int.from_bytes(digest[:16], "little")


def _check_years(years: Any, message: str) -> int:
    if isinstance(years, bool) or not isinstance(years, int) or years > _MAX_YEARS:
        raise TransactionError(f"Invalid number of years: {years!r}")
    if years <= 0:
        raise TransactionError(message)
    return years


@dataclass
class NameService:
    ledger: Ledger
    admin_badge: ResourceDef
    minter: Vault
    name_resource: ResourceDef
    deposits: Vault
    fees: Vault
    deposit_per_year: Decimal = field(default_factory=lambda: Decimal(50))
    fee_address_update: Decimal = field(default_factory=lambda: Decimal(10))
    fee_renewal_per_year: Decimal = field(default_factory=lambda: Decimal(25))

    @classmethod
    def new(cls, ledger: Ledger) -> tuple["NameService", Bucket]:
        admin_badge = ledger.create_badge({}, 1)
        minter = ledger.create_badge({}, 1)
        name_resource = ledger.new_non_fungible({"name": "DomainName"}, minter.resource)
        service = cls(
            ledger=ledger,
            admin_badge=admin_badge.resource,
            minter=Vault(minter.resource, minter),
            name_resource=name_resource,
            deposits=Vault(ledger.xrd),
            fees=Vault(ledger.xrd),
        )
        return service, admin_badge

    def _check_name_proof(self, name_nft: Proof, what: str) -> int:
        if name_nft.resource_address != self.name_resource.address:
            raise TransactionError(f"The {what} bucket does not represent a domain name NFT")
        if name_nft.amount != 1:
            raise TransactionError(
                f"The {what} bucket must contain exactly one DomainName NFT"
            )
        return name_nft.nft_id

    def _check_fee(self, fee: Bucket, fee_amount: Decimal) -> None:
        if fee.resource != self.ledger.xrd:
            raise TransactionError("The fee must be payed in XRD")
        if fee.amount < fee_amount:
            raise TransactionError(
                f"Insufficient fee amount. You need to send a fee of {fee_amount} XRD"
            )

    def _update(self, nft_id: int, data: DomainName) -> None:
        with self.minter.authorize() as auth:
            self.name_resource.update_nft_data(nft_id, data, auth)

    def lookup_address(self, name: str) -> str:
        """Return the address registered for ``name``; raise if it is not registered."""
        data: DomainName = self.name_resource.get_nft_data(hash_name(name))
        return data.address

    def register_name(self, name: str, target_address: str, reserve_years: int,
                      deposit: Bucket) -> tuple[Bucket, Bucket]:
        """Register ``name`` for ``reserve_years``; return the name NFT and the change."""
        if not name.endswith(".xrd"):
            raise TransactionError("The domain name must end on '.xrd'")
        years = _check_years(reserve_years, "A name must be reserved for at least one year")
        if deposit.resource != self.ledger.xrd:
            raise TransactionError("The deposit must be made in XRD")

        nft_id = hash_name(name)
        deposit_amount = to_decimal(self.deposit_per_year * years)
        last_valid_epoch = self.ledger.epoch + EPOCHS_PER_YEAR * years
        if deposit.amount < deposit_amount:
            raise TransactionError(
                f"Insufficient deposit. You need to send a deposit of {deposit_amount} XRD"
            )

        data = DomainName(target_address, last_valid_epoch, deposit_amount)
        with self.minter.authorize() as auth:
            name_nft = self.name_resource.mint_nft(nft_id, data, auth)
        self.deposits.put(deposit.take(deposit_amount))
        return name_nft, deposit

    def unregister_name(self, name_nft: Bucket) -> Bucket:
        """Burn the name NFTs in ``name_nft`` and return their deposits."""
        if name_nft.resource_address != self.name_resource.address:
            raise TransactionError("The supplied bucket does not represent a domain name NFT")
        if name_nft.is_empty():
            raise TransactionError("The supplied bucket is empty")
        total = to_decimal(sum(
            (self.name_resource.get_nft_data(nft_id).deposit_amount
             for nft_id in name_nft.nft_ids),
            Decimal(0),
        ))
        with self.minter.authorize() as auth:
            self.name_resource.burn(name_nft, auth)
        return self.deposits.take(total)

    def update_address(self, name_nft: Proof, new_address: str, fee: Bucket) -> Bucket:
        """Point the name at ``new_address``; return any overpaid fee."""
        nft_id = self._check_name_proof(name_nft, "name_nft")
        fee_amount = self.fee_address_update
        self._check_fee(fee, fee_amount)
        old: DomainName = self.name_resource.get_nft_data(nft_id)
        self._update(nft_id, DomainName(new_address, old.last_valid_epoch, old.deposit_amount))
        self.fees.put(fee.take(fee_amount))
        return fee

    def renew_name(self, name_nft: Proof, renew_years: int, fee: Bucket) -> Bucket:
        """Extend the name by ``renew_years``; return any overpaid fee."""
        nft_id = self._check_name_proof(name_nft, "supplied")
        if fee.resource != self.ledger.xrd:
            raise TransactionError("The fee must be payed in XRD")
        years = _check_years(renew_years, "The name must be renewed for at least one year")
        fee_amount = to_decimal(self.fee_renewal_per_year * years)
        self._check_fee(fee, fee_amount)
        data: DomainName = self.name_resource.get_nft_data(nft_id)
        data.last_valid_epoch += EPOCHS_PER_YEAR * years
        self._update(nft_id, data)
        self.fees.put(fee.take(fee_amount))
        return fee