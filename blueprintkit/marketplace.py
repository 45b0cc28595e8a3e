"""Marketplace where sellers list products and buyers pay into escrow until delivery."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
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

MAX_PRODUCTS_BY_PAGE = 100


@dataclass
class Product:
    id: int
    name: str
    price: Decimal

    def __str__(self) -> str:
        return f"{self.id}|{self.name}|{self.price}"


@dataclass
class PostalAddress:
    street: str = ""
    zip_code: str = ""
    city: str = ""


@dataclass
class _PermanentSellerNftData:
    """Data carried by a permanent seller badge (none)."""


@dataclass
class SellerNftData:
    product_id: int
    has_been_sent: bool = False
    postal_stamp_collected: bool = False
    was_received_by_buyer: bool = False
    buyer_address: PostalAddress = field(default_factory=PostalAddress)
    product_has_been_purchased: bool = False


@dataclass
class BuyerNftData:
    product_id: int
    fees: Decimal
    has_been_sent_by_seller: bool = False


@dataclass
class ProductMarketPlace:
    ledger: Ledger
    fees_vault: Vault
    admin_badge: ResourceDef
    seller_buyer_product_minter_badge_vault: Vault
    seller_permanent_badge_vault: Vault
    seller_buyer_product_badge_def: ResourceDef
    seller_permanent_badge_def: ResourceDef
    sell_fees: Decimal
    buy_fees: Decimal
    token_type: ResourceDef
    permanent_seller_nft_id_by_products_id: dict[int, int] = field(default_factory=dict)
    products_for_sale: dict[int, Product] = field(default_factory=dict)
    seller_nft_id_by_product_id: dict[int, int] = field(default_factory=dict)
    buyer_nft_id_by_product_id: dict[int, int] = field(default_factory=dict)
    vault_by_seller: dict[int, Vault] = field(default_factory=dict)
    payment_by_buyer_nft_id: dict[int, Vault] = field(default_factory=dict)

    @classmethod
    def new(cls, ledger: Ledger, token_type: ResourceDef, sell_fees: Any,
            buy_fees: Any) -> tuple["ProductMarketPlace", Bucket]:
        admin_badge = ledger.create_badge({}, 1)
        product_minter = ledger.create_badge({"name": "seller buyer minter product badge"}, 1)
        permanent_minter = ledger.create_badge({"name": "seller minter permanent badge"}, 1)
        product_badge_def = ledger.new_non_fungible(
            {
                "name": "seller or buyer badge ",
                "description": "this badge give to seller rigth to get postal stamp to send "
                               "product to buyer. The buyer use this badge for confirming "
                               "product reception",
            },
            product_minter.resource,
        )
        permanent_badge_def = ledger.new_non_fungible(
            {
                "name": "permanent seller badge",
                "description": "this badge give to seller rigth to collect money",
            },
            permanent_minter.resource,
        )
        market = cls(
            ledger=ledger,
            fees_vault=Vault(token_type),
            admin_badge=admin_badge.resource,
            seller_buyer_product_minter_badge_vault=Vault(product_minter.resource, product_minter),
            seller_permanent_badge_vault=Vault(permanent_minter.resource, permanent_minter),
            seller_buyer_product_badge_def=product_badge_def,
            seller_permanent_badge_def=permanent_badge_def,
            sell_fees=to_decimal(sell_fees),
            buy_fees=to_decimal(buy_fees),
            token_type=token_type,
        )
        return market, admin_badge

    def _seller_data(self, nft_id: int) -> SellerNftData:
        data = self.seller_buyer_product_badge_def.get_nft_data(nft_id)
        if not isinstance(data, SellerNftData):
            raise TransactionError("Not a seller badge")
        return data

    def _buyer_data(self, nft_id: int) -> BuyerNftData:
        data = self.seller_buyer_product_badge_def.get_nft_data(nft_id)
        if not isinstance(data, BuyerNftData):
            raise TransactionError("Not a buyer badge")
        return data

    def _update(self, nft_id: int, data: Any) -> None:
        with self.seller_buyer_product_minter_badge_vault.authorize() as minter:
            self.seller_buyer_product_badge_def.update_nft_data(nft_id, data, minter)

    def _mint_product_badge(self, nft_id: int, data: Any) -> Bucket:
        with self.seller_buyer_product_minter_badge_vault.authorize() as minter:
            return self.seller_buyer_product_badge_def.mint_nft(nft_id, data, minter)

    def _is_available(self, product_id: int) -> bool:
        seller_nft_id = self.seller_nft_id_by_product_id.get(product_id)
        if seller_nft_id is None:
            return False
        return not self._seller_data(seller_nft_id).product_has_been_purchased

    def register_as_seller(self) -> Bucket:
        """Mint a permanent seller badge used to list products and collect proceeds."""
        nft_id = self.ledger.generate_uuid()
        with self.seller_permanent_badge_vault.authorize() as minter:
            return self.seller_permanent_badge_def.mint_nft(
                nft_id, _PermanentSellerNftData(), minter
            )

    def list_product(self, name: str, price: Any, fees: Bucket,
                     auth: Proof) -> tuple[Bucket, Bucket]:
        """List a product for sale; returns the seller badge and the change of the fees."""
        check_proof(auth, self.seller_permanent_badge_def)
        permanent_id = auth.nft_id
        if fees.resource_address != self.token_type.address:
            raise TransactionError("token address must match")
        if fees.amount < self.sell_fees:
            raise TransactionError(f"the fees must be >= {self.sell_fees}")

        product_id = self.ledger.generate_uuid()
        seller_nft_id = self.ledger.generate_uuid()
        buyer_nft_id = self.ledger.generate_uuid()
        self.products_for_sale[product_id] = Product(product_id, name, to_decimal(price))
        self.permanent_seller_nft_id_by_products_id[product_id] = permanent_id

        seller_badge = self._mint_product_badge(seller_nft_id, SellerNftData(product_id))
        self.seller_nft_id_by_product_id[product_id] = seller_nft_id
        self.buyer_nft_id_by_product_id[product_id] = buyer_nft_id

        self.fees_vault.put(fees.take(self.sell_fees))
        return seller_badge, fees

    def get_available_products(self, page_index: int) -> list[Product]:
        """Return the products still for sale on the given page of 100 listings."""
        start = MAX_PRODUCTS_BY_PAGE * page_index
        page = list(self.products_for_sale)[start:start + MAX_PRODUCTS_BY_PAGE]
        result = [
            replace(self.products_for_sale[key]) for key in page if self._is_available(key)
        ]
        self.ledger.info("products : " + ";".join(str(product) for product in result))
        return result

    def buy_product(self, product_id: int, city: str, street: str, zip_code: str,
                    payment: Bucket) -> tuple[Bucket, Bucket]:
        """Pay for a product; returns the buyer badge and the change."""
        if payment.resource_address != self.token_type.address:
            raise TransactionError("token address must match")
        if product_id not in self.products_for_sale:
            raise TransactionError("product not found")
        if not self._is_available(product_id):
            raise TransactionError("product is not available")
        product = self.products_for_sale[product_id]
        total = to_decimal(self.buy_fees + product.price)
        if payment.amount < total:
            raise TransactionError(f"payment amount must be greather than or equal {total}")

        buyer_nft_id = self.buyer_nft_id_by_product_id[product_id]
        buyer_badge = self._mint_product_badge(
            buyer_nft_id, BuyerNftData(product_id, self.buy_fees)
        )

        seller_nft_id = self.seller_nft_id_by_product_id[product_id]
        seller_data = self._seller_data(seller_nft_id)
        seller_data.buyer_address = PostalAddress(street=street, zip_code=zip_code, city=city)
        seller_data.product_has_been_purchased = True
        self._update(seller_nft_id, seller_data)

        self.fees_vault.put(payment.take(self.buy_fees))
        held = payment.take(product.price)
        vault = self.payment_by_buyer_nft_id.get(buyer_nft_id)
        if vault is None:
            self.payment_by_buyer_nft_id[buyer_nft_id] = Vault(held.resource, held)
        else:
            vault.put(held)
        return buyer_badge, payment

    def collect_postal_stamp(self, auth: Proof) -> PostalAddress:
        """Give the seller the buyer's postal address, once."""
        check_proof(auth, self.seller_buyer_product_badge_def)
        nft_id = auth.nft_id
        data = self._seller_data(nft_id)
        if data.postal_stamp_collected:
            raise TransactionError("postale stamp has already collected")
        if not data.product_has_been_purchased:
            raise TransactionError("product must be purchased")
        address = replace(data.buyer_address)
        data.postal_stamp_collected = True
        self._update(nft_id, data)
        return address

    def send_product(self, auth: Proof) -> None:
        """Mark the product as shipped on both the seller and the buyer badge."""
        check_proof(auth, self.seller_buyer_product_badge_def)
        seller_nft_id = auth.nft_id
        seller_data = self._seller_data(seller_nft_id)
        if not seller_data.product_has_been_purchased:
            raise TransactionError("product must be purchased")
        seller_data.has_been_sent = True
        self._update(seller_nft_id, seller_data)

        buyer_nft_id = self.buyer_nft_id_by_product_id[seller_data.product_id]
        buyer_data = self._buyer_data(buyer_nft_id)
        buyer_data.has_been_sent_by_seller = True
        self._update(buyer_nft_id, buyer_data)

    def confirm_reception(self, buyer_nft: Bucket) -> None:
        """Release the held payment to the seller and burn the buyer badge."""
        if not buyer_nft.amount > 0:
            raise TransactionError("the nft bucket quantity must be greather than or equal 1")
        if buyer_nft.resource_address != self.seller_buyer_product_badge_def.address:
            raise TransactionError("the nft bucket is not buyer nft")
        buyer_nft_id = buyer_nft.nft_id
        buyer_data = self._buyer_data(buyer_nft_id)

        seller_nft_id = self.seller_nft_id_by_product_id.get(buyer_data.product_id)
        if seller_nft_id is None:
            raise TransactionError("Seller badge not found")
        seller_data = self._seller_data(seller_nft_id)
        seller_data.was_received_by_buyer = True
        product_id = seller_data.product_id
        self._update(seller_nft_id, seller_data)

        payment = self.payment_by_buyer_nft_id.get(buyer_nft_id)
        if payment is None:
            raise TransactionError("Payment not found")
        permanent_id = self.permanent_seller_nft_id_by_products_id[product_id]
        released = payment.take_all()
        vault = self.vault_by_seller.get(permanent_id)
        if vault is None:
            self.vault_by_seller[permanent_id] = Vault(released.resource, released)
        else:
            vault.put(released)
        del self.payment_by_buyer_nft_id[buyer_nft_id]

        with self.seller_buyer_product_minter_badge_vault.authorize() as minter:
            self.seller_buyer_product_badge_def.burn(buyer_nft, minter)

    def get_available_amount(self, auth: Proof) -> Decimal:
        check_proof(auth, self.seller_permanent_badge_def)
        vault = self.vault_by_seller.get(auth.nft_id)
        return vault.amount if vault is not None else to_decimal(0)

    def collect_by_seller(self, auth: Proof) -> Bucket:
        check_proof(auth, self.seller_permanent_badge_def)
        vault = self.vault_by_seller.get(auth.nft_id)
        if vault is None or not vault.amount > 0:
            raise TransactionError("Nothing to collect")
        return vault.take_all()

    def collect_by_admin(self, auth: Proof) -> Bucket:
        check_proof(auth, self.admin_badge)
        if not self.fees_vault.amount > 0:
            raise TransactionError("Nothing to collect")
        return self.fees_vault.take_all()

    def burn_seller_nft(self, seller_nft: Bucket) -> None:
        if not seller_nft.amount > 0:
            raise TransactionError("the nft bucket quantity must be greather than or equal 1")
        if seller_nft.resource != self.seller_buyer_product_badge_def:
            raise TransactionError("bucket must be seller nft")
        nft_id = seller_nft.nft_id
        self.seller_nft_id_by_product_id.pop(nft_id, None)
        with self.seller_buyer_product_minter_badge_vault.authorize() as minter:
            self.seller_buyer_product_badge_def.burn(seller_nft, minter)