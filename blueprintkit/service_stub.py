"""Stub services paid for with tokens from a utility token factory."""

from __future__ import annotations

from dataclasses import dataclass

from .ledger import Bucket, Ledger, TransactionError, Vault
from .utility_token import UtilityTokenFactory

_REDEEM_THRESHOLD = 100


@dataclass
class ServiceStub:
    ledger: Ledger
    utf: UtilityTokenFactory
    used_tokens: Vault
    simple_service_count: int = 0
    premium_service_count: int = 0

    @classmethod
    def new(cls, ledger: Ledger, factory: UtilityTokenFactory) -> "ServiceStub":
        return cls(ledger=ledger, utf=factory, used_tokens=Vault(factory.resource))

    def _maybe_redeem(self) -> None:
        if self.used_tokens.amount > _REDEEM_THRESHOLD:
            self.utf.redeem(self.used_tokens.take_all())

    def show(self) -> None:
        self.ledger.info(f"Simple Services performed: {self.simple_service_count}")
        self.ledger.info(f"Premium Services performed: {self.premium_service_count}")

    def _charge(self, payment: Bucket, price: int, message: str) -> None:
        if payment.resource_address != self.utf.address:
            raise TransactionError(message)
        if payment.amount < price:
            raise TransactionError(message)

    def simple_service(self, payment: Bucket) -> Bucket:
        """Charge one utility token; return the change."""
        self._charge(payment, 1, "Simple service requires 1 util token")
        if self.utf.address != self.used_tokens.resource_address:
            raise TransactionError("Mismatch in Vault setup.")
        self.used_tokens.put(payment.take(1))
        self.ledger.info("Performing Simple Service now.")
        self.simple_service_count += 1
        self._maybe_redeem()
        return payment

    def premium_service(self, payment: Bucket) -> Bucket:
        """Charge three utility tokens; return the change."""
        self._charge(payment, 3, "Premium service requires 3 util tokens")
        self.used_tokens.put(payment.take(3))
        self.ledger.info("Performing Premium Service now.")
        self.premium_service_count += 1
        self._maybe_redeem()
        return payment