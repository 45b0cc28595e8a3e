from decimal import Decimal

import pytest

from blueprintkit.airdrop_withdraw import AirdropWithWithdraw
from blueprintkit.ledger import Ledger, TransactionError


@pytest.fixture
def env():
    ledger = Ledger()
    admin = ledger.new_account()
    component, badge = AirdropWithWithdraw.new(ledger, ledger.xrd)
    admin.deposit(badge)
    assert admin.balance(ledger.xrd) == Decimal(1000000)
    return ledger, admin, component, badge.resource


def _add(ledger, admin, component, badge, recipient, amount):
    component.add_recipient(
        recipient.address, admin.withdraw(amount, ledger.xrd), admin.present(badge)
    )


def test_try_withdraw_without_added_recipients_must_be_failed(env):
    ledger, admin, component, badge = env
    stranger = ledger.new_account()
    with pytest.raises(TransactionError, match="Insufficient balance"):
        component.withdraw_token(stranger.present(component.recipient_badge_def))


def test_try_withdraw_already_done_must_be_failed(env):
    ledger, admin, component, badge = env
    recipient = ledger.new_account()
    _add(ledger, admin, component, badge, recipient, 100)
    proof = recipient.present(component.recipient_badge_def)
    recipient.deposit(component.withdraw_token(proof))
    with pytest.raises(TransactionError, match="withdraw already done"):
        component.withdraw_token(recipient.present(component.recipient_badge_def))


def test_try_withdraw_after_added_recipients_must_be_succeeded(env):
    ledger, admin, component, badge = env
    token_by_recipient = Decimal(100)
    recipients = [ledger.new_account() for _ in range(2)]
    for recipient in recipients:
        _add(ledger, admin, component, badge, recipient, token_by_recipient)
    assert admin.balance(ledger.xrd) == Decimal(1000000) - token_by_recipient * 2

    for recipient in recipients:
        proof = recipient.present(component.recipient_badge_def)
        assert component.available_token(proof) == token_by_recipient
        assert ledger.logs[-1] == f"available : {token_by_recipient}"
        recipient.deposit(component.withdraw_token(proof))
        assert ledger.logs[-1] == f"withdraw_token : {token_by_recipient}"
        assert recipient.balance(ledger.xrd) == Decimal(1000000) + token_by_recipient


def test_available_is_zero_after_withdraw(env):
    ledger, admin, component, badge = env
    recipient = ledger.new_account()
    _add(ledger, admin, component, badge, recipient, 100)
    proof = recipient.present(component.recipient_badge_def)
    component.withdraw_token(proof)
    assert component.available_token(proof) == 0


def test_add_recipient_rejects_wrong_token(env):
    ledger, admin, component, badge = env
    recipient = ledger.new_account()
    other = ledger.create_badge({}, 5)
    with pytest.raises(TransactionError, match="token address must match"):
        component.add_recipient(recipient.address, other, admin.present(badge))


def test_add_recipient_rejects_empty_bucket(env):
    ledger, admin, component, badge = env
    recipient = ledger.new_account()
    with pytest.raises(TransactionError, match="tokens quantity cannot be 0"):
        component.add_recipient(
            recipient.address, admin.withdraw(0, ledger.xrd), admin.present(badge)
        )