"""Lending library with paid memberships and late fees."""

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

LATE_FEE = 1


@dataclass
class Book:
    title: str
    author: str


@dataclass
class BorrowedBook:
    epoch: int
    user_id: str


def _default_books() -> dict[str, Book]:
    return {
        "9781611297560": Book(title="Leviathan Wakes", author="James S. A. Corey"),
        "9780450011849": Book(title="Dune", author="Frank Herbert"),
        "9781844162949": Book(title="Horus Rising", author="Dan Abnett"),
    }


@dataclass
class Library:
    ledger: Ledger
    librarian_badge_def: ResourceDef
    fees: Vault
    member_badges: Vault
    member_badge_def: ResourceDef
    membership_price: Decimal
    borrow_epochs: int
    books: dict[str, Book] = field(default_factory=_default_books)
    borrowed_books: dict[str, BorrowedBook] = field(default_factory=dict)

    @classmethod
    def new(cls, ledger: Ledger, member_badge_count: int, membership_price: Any,
            borrow_epochs: int) -> tuple["Library", Bucket]:
        librarian = ledger.create_badge({"name": "Librarian Badge", "symbol": "LB"}, 1)
        members = ledger.create_badge(
            {"name": "Library Membership Badge", "symbol": "LMB"}, member_badge_count
        )
        library = cls(
            ledger=ledger,
            librarian_badge_def=librarian.resource,
            fees=Vault(ledger.xrd),
            member_badges=Vault(members.resource, members),
            member_badge_def=members.resource,
            membership_price=to_decimal(membership_price),
            borrow_epochs=borrow_epochs,
        )
        return library, librarian

    def print_library(self) -> None:
        info = self.ledger.info
        info(f"Current epoch, {self.ledger.epoch}")
        info(f"Membership price: {self.membership_price}, "
             f"memberships available: {self.member_badges.amount}")
        info("All books:")
        for isbn, book in self.books.items():
            info(f"{isbn}: {book.title}, {book.author}")
        info("Borrowed books:")
        for isbn, borrowed in self.borrowed_books.items():
            info(f"{isbn}: {borrowed.user_id}, {borrowed.epoch}")

    def register(self, payment: Bucket) -> Bucket:
        """Sell one membership badge for the membership price in XRD."""
        self.ledger.info(
            f"Attempting to register user, membership badges remaining "
            f"{self.member_badges.amount}, payment amount {payment.amount}"
        )
        if self.member_badges.is_empty():
            raise TransactionError("No memberships available")
        if payment.amount != self.membership_price:
            raise TransactionError("Wrong amount sent")
        if payment.resource != self.ledger.xrd:
            raise TransactionError("Can only pay with XRD")
        self.fees.put(payment)
        self.ledger.info("Successfully registered user")
        return self.member_badges.take(1)

    def _log_book(self, isbn: str) -> None:
        book = self.books[isbn]
        self.ledger.info(f"Book found (ISBN: {isbn}, Title: {book.title}, Author: {book.author})")

    @staticmethod
    def _user_id(badge: Proof) -> str:
        if not badge.amount > 0:
            raise TransactionError("Invalid badge provided")
        return badge.resource_address

    def _borrowed_book(self, isbn: str, badge: Proof) -> BorrowedBook:
        borrowed = self.borrowed_books.get(isbn)
        if borrowed is None:
            raise TransactionError("Book not borrowed")
        if borrowed.user_id != self._user_id(badge):
            raise TransactionError("Book not borrowed by this user")
        self._log_book(isbn)
        return borrowed

    def _is_overdue(self, borrowed: BorrowedBook) -> bool:
        overdue = self.ledger.epoch > borrowed.epoch + self.borrow_epochs
        self.ledger.info(
            f"Book borrowed on epoch {borrowed.epoch}, current epoch {self.ledger.epoch}, "
            f"overdue = {str(overdue).lower()}"
        )
        return overdue

    def borrow_book(self, isbn: str, auth: Proof) -> None:
        check_proof(auth, self.member_badge_def)
        self.ledger.info(f"Attempting to borrow book with ISBN {isbn}")
        if isbn not in self.books:
            raise TransactionError("Book not in library")
        if isbn in self.borrowed_books:
            raise TransactionError("Book already borrowed")
        self._log_book(isbn)
        self.borrowed_books[isbn] = BorrowedBook(self.ledger.epoch, self._user_id(auth))
        self.ledger.info("Book borrowed")

    def return_book(self, isbn: str, auth: Proof) -> None:
        check_proof(auth, self.member_badge_def)
        self.ledger.info(f"Attempting to return book with ISBN {isbn}")
        borrowed = self._borrowed_book(isbn, auth)
        if self._is_overdue(borrowed):
            raise TransactionError("Book is overdue")
        del self.borrowed_books[isbn]
        self.ledger.info("Book returned")

    def pay_fee(self, isbn: str, payment: Bucket, auth: Proof) -> None:
        """Pay the late fee for an overdue book and return it."""
        check_proof(auth, self.member_badge_def)
        self.ledger.info(f"Attempting to pay fee with payment amount: {payment.amount}")
        borrowed = self._borrowed_book(isbn, auth)
        if not self._is_overdue(borrowed):
            raise TransactionError("Book is not overdue")
        if payment.amount != LATE_FEE:
            raise TransactionError("Wrong amount sent")
        if payment.resource != self.ledger.xrd:
            raise TransactionError("Can only pay with XRD")
        self.fees.put(payment)
        del self.borrowed_books[isbn]
        self.ledger.info("Late fee paid and book returned")

    def withdraw_fees(self, auth: Proof) -> Bucket:
        check_proof(auth, self.librarian_badge_def)
        self.ledger.info(f"Withdrawing all late fees: {self.fees.amount}")
        return self.fees.take_all()