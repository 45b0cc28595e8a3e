from decimal import Decimal

import pytest

from blueprintkit.escrow import Escrow
from blueprintkit.ledger import Ledger, TransactionError


@pytest.fixture
def env():
    ledger = Ledger()
    account1, account2 = ledger.new_account(), ledger.new_account()
    token1 = ledger.create_badge({"symbol": "T1"}, 8000)
    token2 = ledger.create_badge({"symbol": "T2"}, 8000000)
    account1.deposit(token1)
    account2.deposit(token2)
    component, badge1, badge2 = Escrow.new(ledger, token1.resource, token2.resource)
    account1.deposit(badge1)
    account1.deposit(badge2)
    account2.deposit(account1.withdraw(1, badge2.resource))
    return {
        "c": component, "a1": account1, "a2": account2,
        "t1": token1.resource, "t2": token2.resource,
        "b1": badge1.resource, "b2": badge2.resource,
    }


def _fill(e):
    e["c"].put_tokens(e["a1"].withdraw(500, e["t1"]), e["a1"].present(e["b1"]))
    e["c"].put_tokens(e["a2"].withdraw(500, e["t2"]), e["a2"].present(e["b2"]))


def test_simple_trade(env):
    c, a1, a2 = env["c"], env["a1"], env["a2"]
    c.put_tokens(a1.withdraw(500, env["t1"]), a1.present(env["b1"]))
    c.put_tokens(a1.withdraw(500, env["t1"]), a1.present(env["b1"]))
    assert c.token_a.amount == Decimal(1000)

    with pytest.raises(TransactionError):
        c.put_tokens(a2.withdraw(500, env["t2"]), a2.present(env["b1"]))

    c.put_tokens(a2.withdraw(500, env["t2"]), a2.present(env["b2"]))
    c.put_tokens(a2.withdraw(500, env["t2"]), a2.present(env["b2"]))
    c.accept(a1.present(env["b1"]))
    c.accept(a2.present(env["b2"]))
    assert c.account_a_accepted and c.account_b_accepted


def test_withdraw_after_accept_swaps(env):
    c, a1, a2 = env["c"], env["a1"], env["a2"]
    _fill(env)
    c.accept(a1.present(env["b1"]))
    c.accept(a2.present(env["b2"]))
    a1.deposit(c.withdraw(a1.present(env["b1"])))
    a2.deposit(c.withdraw(a2.present(env["b2"])))
    assert a1.balance(env["t2"]) == Decimal(500)
    assert a2.balance(env["t1"]) == Decimal(500)


def test_cancel_returns_own_tokens(env):
    c, a1 = env["c"], env["a1"]
    _fill(env)
    c.cancel(a1.present(env["b1"]))
    a1.deposit(c.withdraw(a1.present(env["b1"])))
    assert a1.balance(env["t1"]) == Decimal(8000)
    with pytest.raises(TransactionError, match="already canceled"):
        c.cancel(a1.present(env["b1"]))


def test_accept_requires_both_deposits(env):
    c, a1 = env["c"], env["a1"]
    c.put_tokens(a1.withdraw(500, env["t1"]), a1.present(env["b1"]))
    with pytest.raises(TransactionError, match="Both parties must add their tokens"):
        c.accept(a1.present(env["b1"]))


def test_no_put_or_double_accept_after_accept(env):
    c, a1 = env["c"], env["a1"]
    _fill(env)
    c.accept(a1.present(env["b1"]))
    with pytest.raises(TransactionError, match="You already accepted the offer"):
        c.accept(a1.present(env["b1"]))
    with pytest.raises(TransactionError, match="Can't add more tokens"):
        c.put_tokens(a1.withdraw(1, env["t1"]), a1.present(env["b1"]))


def test_withdraw_before_settlement_fails(env):
    c, a1 = env["c"], env["a1"]
    _fill(env)
    with pytest.raises(TransactionError, match="must be accepted or canceled"):
        c.withdraw(a1.present(env["b1"]))