import pytest

from blueprintkit.ledger import Ledger, TransactionError
from blueprintkit.library import Library

DUNE = "9780450011849"


@pytest.fixture
def env():
    ledger = Ledger()
    library, librarian = Library.new(ledger, 10, 1, 3)
    account = ledger.new_account()
    return ledger, library, librarian, account


def _member(ledger, library, account):
    return library.register(account.withdraw(1, ledger.xrd))


def test_new(env):
    _, library, librarian, _ = env
    assert librarian.amount == 1
    assert librarian.resource == library.librarian_badge_def
    assert library.member_badge_def != library.librarian_badge_def
    assert library.member_badges.amount == 10
    assert len(library.books) == 3


def test_print_library(env):
    ledger, library, _, _ = env
    start = len(ledger.logs)
    library.print_library()
    assert len(ledger.logs) - start == 7


def test_register(env):
    ledger, library, _, account = env
    badge = _member(ledger, library, account)
    assert badge.amount == 1
    start = len(ledger.logs)
    library.print_library()
    assert ledger.logs[start + 1] == "Membership price: 1, memberships available: 9"


def test_register_wrong_amount(env):
    ledger, library, _, account = env
    with pytest.raises(TransactionError, match="Wrong amount sent"):
        library.register(account.withdraw(2, ledger.xrd))


def test_register_wrong_token(env):
    ledger, library, _, _ = env
    other = ledger.create_badge({}, 1)
    with pytest.raises(TransactionError, match="Can only pay with XRD"):
        library.register(other)


def test_register_no_memberships():
    ledger = Ledger()
    library, _ = Library.new(ledger, 1, 1, 3)
    account = ledger.new_account()
    badge = _member(ledger, library, account)
    assert badge.amount == 1
    with pytest.raises(TransactionError) as excinfo:
        _member(ledger, library, account)
    assert "No memberships available" in str(excinfo.value)


def test_borrow_and_return(env):
    ledger, library, _, account = env
    badge = _member(ledger, library, account)
    library.borrow_book(DUNE, badge.present())
    assert DUNE in library.borrowed_books
    with pytest.raises(TransactionError, match="Book already borrowed"):
        library.borrow_book(DUNE, badge.present())
    library.return_book(DUNE, badge.present())
    assert DUNE not in library.borrowed_books


def test_borrow_unknown_book(env):
    ledger, library, _, account = env
    badge = _member(ledger, library, account)
    with pytest.raises(TransactionError, match="Book not in library"):
        library.borrow_book("0000000000000", badge.present())


def test_borrow_requires_membership(env):
    ledger, library, librarian, _ = env
    with pytest.raises(TransactionError, match="Unauthorized"):
        library.borrow_book(DUNE, librarian.present())


def test_return_not_borrowed(env):
    ledger, library, _, account = env
    badge = _member(ledger, library, account)
    with pytest.raises(TransactionError, match="Book not borrowed"):
        library.return_book(DUNE, badge.present())


def test_overdue_book_needs_fee(env):
    ledger, library, librarian, account = env
    badge = _member(ledger, library, account)
    library.borrow_book(DUNE, badge.present())
    with pytest.raises(TransactionError, match="Book is not overdue"):
        library.pay_fee(DUNE, account.withdraw(1, ledger.xrd), badge.present())
    ledger.advance_epoch(4)
    with pytest.raises(TransactionError, match="Book is overdue"):
        library.return_book(DUNE, badge.present())
    with pytest.raises(TransactionError, match="Wrong amount sent"):
        library.pay_fee(DUNE, account.withdraw(2, ledger.xrd), badge.present())
    library.pay_fee(DUNE, account.withdraw(1, ledger.xrd), badge.present())
    assert DUNE not in library.borrowed_books
    fees = library.withdraw_fees(librarian.present())
    assert fees.amount == 2
    assert library.fees.is_empty()


def test_return_on_last_allowed_epoch(env):
    ledger, library, _, account = env
    badge = _member(ledger, library, account)
    library.borrow_book(DUNE, badge.present())
    ledger.advance_epoch(3)
    library.return_book(DUNE, badge.present())
    assert library.borrowed_books == {}


def test_withdraw_fees_requires_librarian(env):
    ledger, library, _, account = env
    badge = _member(ledger, library, account)
    with pytest.raises(TransactionError, match="Unauthorized"):
        library.withdraw_fees(badge.present())