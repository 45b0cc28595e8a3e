from dataclasses import dataclass
from decimal import Decimal

import pytest

from blueprintkit.ledger import (
    Bucket,
    Ledger,
    TransactionError,
    Vault,
    check_proof,
    to_decimal,
)


@dataclass
class Note:
    text: str
    done: bool = False


@pytest.fixture
def ledger():
    return Ledger()


def test_to_decimal_truncates_and_prints_plainly():
    assert to_decimal("1.5") == Decimal("1.5")
    assert str(to_decimal(100)) == "100"
    assert to_decimal("0.0000000000000000019") == Decimal("0.000000000000000001")


def test_to_decimal_rejects_garbage():
    with pytest.raises(TransactionError):
        to_decimal("abc")


def test_new_account_is_funded(ledger):
    account = ledger.new_account()
    assert account.balance(ledger.xrd) == Decimal(1000000)
    assert ledger.account(account.address) is account


def test_withdraw_deposit_round_trip(ledger):
    first, second = ledger.new_account(), ledger.new_account()
    bucket = first.withdraw(250, ledger.xrd)
    assert bucket.amount == Decimal(250)
    second.deposit(bucket)
    assert bucket.is_empty()
    assert first.balance(ledger.xrd) + second.balance(ledger.xrd) == Decimal(2000000)


def test_withdraw_too_much(ledger):
    account = ledger.new_account(10)
    with pytest.raises(TransactionError, match="Insufficient balance"):
        account.withdraw(11, ledger.xrd)


def test_badge_is_indivisible(ledger):
    badge = ledger.create_badge({"name": "b"}, 3)
    with pytest.raises(TransactionError, match="Invalid amount"):
        badge.take("0.5")
    assert badge.take(2).amount == Decimal(2)
    assert badge.amount == Decimal(1)


def test_mint_requires_minter_proof(ledger):
    minter = ledger.create_badge({}, 1)
    other = ledger.create_badge({}, 1)
    coin = ledger.new_fungible(18, {"name": "t"}, minter.resource)
    with pytest.raises(TransactionError):
        coin.mint(5, other.present())
    minted = coin.mint(5, minter.present())
    assert minted.amount == Decimal(5)
    assert coin.total_supply == Decimal(5)


def test_fixed_supply_cannot_mint(ledger):
    badge = ledger.create_badge({}, 1)
    with pytest.raises(TransactionError, match="not mintable"):
        badge.resource.mint(1, badge.present())


def test_nft_data_is_copied_until_updated(ledger):
    minter = ledger.create_badge({}, 1)
    nfts = ledger.new_non_fungible({"name": "n"}, minter.resource)
    bucket = nfts.mint_nft(7, Note("hello"), minter.present())
    assert bucket.nft_id == 7
    data = nfts.get_nft_data(7)
    data.done = True
    assert nfts.get_nft_data(7).done is False
    nfts.update_nft_data(7, data, minter.present())
    assert nfts.get_nft_data(7).done is True


def test_duplicate_nft_rejected(ledger):
    minter = ledger.create_badge({}, 1)
    nfts = ledger.new_non_fungible({}, minter.resource)
    nfts.mint_nft(1, Note("a"), minter.present())
    with pytest.raises(TransactionError, match="already exists"):
        nfts.mint_nft(1, Note("b"), minter.present())


def test_burn_removes_nft(ledger):
    minter = ledger.create_badge({}, 1)
    nfts = ledger.new_non_fungible({}, minter.resource)
    bucket = nfts.mint_nft(3, Note("x"), minter.present())
    nfts.burn(bucket, minter.present())
    assert bucket.is_empty()
    assert nfts.total_supply == Decimal(0)
    with pytest.raises(TransactionError, match="NFT not found"):
        nfts.get_nft_data(3)


def test_bucket_put_mismatch(ledger):
    a = ledger.create_badge({}, 1)
    b = ledger.create_badge({}, 1)
    with pytest.raises(TransactionError, match="Resource mismatch"):
        a.put(b)


def test_nft_take_and_take_nft(ledger):
    minter = ledger.create_badge({}, 1)
    nfts = ledger.new_non_fungible({}, minter.resource)
    bucket = Bucket(nfts)
    for nft_id in (5, 2, 9):
        bucket.put(nfts.mint_nft(nft_id, Note(str(nft_id)), minter.present()))
    assert bucket.take(1).nft_ids == [2]
    assert bucket.take_nft(9).nft_id == 9
    assert bucket.nft_ids == [5]


def test_vault_round_trip_and_authorize(ledger):
    badge = ledger.create_badge({}, 2)
    vault = Vault(badge.resource, badge)
    assert vault.amount == Decimal(2)
    with vault.authorize() as proof:
        assert check_proof(proof, badge.resource) is proof
    taken = vault.take_all()
    assert taken.amount == Decimal(2)
    assert vault.is_empty()
    with pytest.raises(TransactionError, match="Vault is empty"):
        with vault.authorize():
            pass


def test_check_proof_wrong_resource(ledger):
    a = ledger.create_badge({}, 1)
    b = ledger.create_badge({}, 1)
    with pytest.raises(TransactionError, match="Unauthorized"):
        check_proof(a.present(), b.resource)


def test_present_keeps_balance(ledger):
    account = ledger.new_account()
    account.deposit(ledger.create_badge({}, 1))
    proof = account.present(ledger.xrd, 10)
    assert proof.amount == Decimal(10)
    assert account.balance(ledger.xrd) == Decimal(1000000)
    with pytest.raises(TransactionError, match="Insufficient balance"):
        account.present(ledger.create_badge({}, 1).resource)


def test_withdraw_nft_from_account(ledger):
    minter = ledger.create_badge({}, 1)
    nfts = ledger.new_non_fungible({}, minter.resource)
    account = ledger.new_account()
    account.deposit(nfts.mint_nft(4, Note("n"), minter.present()))
    assert account.nft_ids(nfts) == [4]
    assert account.withdraw_nft(4, nfts).nft_id == 4
    assert account.nft_ids(nfts) == []


def test_log_epoch_and_uuids(ledger):
    ledger.info("hello")
    assert ledger.logs == ["hello"]
    assert ledger.advance_epoch(5) == 5
    assert ledger.generate_uuid() != ledger.generate_uuid()
    with pytest.raises(TransactionError, match="Account not found"):
        ledger.account("nowhere")