# blueprintkit

blueprintkit is an in-memory ledger. It holds fungible and non-fungible resources, buckets, vaults and accounts, and it authorizes actions with badges. A set of small financial components is built on top of it. Each component enforces its rules against the ledger, so you can work through token flows in plain Python. Nothing runs over a network.

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## The ledger

The building blocks are in `blueprintkit.ledger`.

### `Ledger`

A registry of resources and accounts. It also keeps an epoch counter and a log.

- `xrd` is the built-in fungible resource, with 18 decimal places.
- `create_badge(metadata, supply)` creates an indivisible resource with a fixed supply and returns a `Bucket` that holds that supply.
- `new_fungible(divisibility, metadata, minter)` creates a mintable fungible resource. The divisibility must be between 0 and 18.
- `new_non_fungible(metadata, minter)` creates a mintable non-fungible resource.
- `new_account(xrd=1_000_000)` creates an `Account` and funds it with that much XRD.
- `account(address)` looks up an account by address. An unknown address raises `TransactionError`.
- `generate_uuid()` returns a random 128-bit integer. Components use it for NFT ids.
- `advance_epoch(epochs=1)` moves the clock forward and returns the new `epoch`.
- `info(message)` appends a line to `logs`. Components log their messages here.

### `ResourceDef`

A resource. Only a proof of the resource's minter badge allows `mint(amount, auth)`, `mint_nft(nft_id, data, auth)`, `burn(bucket, auth)` and `update_nft_data(nft_id, data, auth)`.

`get_nft_data(nft_id)` returns a copy of an NFT's data. To change the data, pass an updated copy to `update_nft_data`.

### `Bucket`

A transient amount of one resource.

- `amount` is the quantity. For non-fungible resources it is the number of NFTs.
- `nft_ids` lists the NFT ids in the bucket. `nft_id` returns the id when the bucket holds exactly one.
- `take(amount)` and `take_nft(nft_id)` split part of the bucket off into a new bucket.
- `put(other)` moves everything from `other` into this bucket.
- `is_empty()` reports whether the bucket holds nothing.
- `present()` returns a `Proof` of the bucket's contents.

### `Vault`

Persistent storage for one resource. It has `put`, `take`, `take_all` and `is_empty`. `authorize()` is a context manager: it yields a `Proof` of the vault's contents and raises if the vault is empty.

### `Account`

A user's holdings, with one vault per resource.

- `deposit(bucket)` adds a bucket to the account.
- `withdraw(amount, resource)` and `withdraw_nft(nft_id, resource)` take tokens out.
- `balance(resource)` and `nft_ids(resource)` report holdings.
- `present(resource, amount=1)` returns a `Proof` without moving any tokens.

### `Proof`, `check_proof` and errors

A `Proof` shows that the caller holds an amount of a resource, and for NFTs which ids. `check_proof(proof, *resources)` accepts the proof only if it shows a positive amount of one of the given resources. Otherwise it raises `TransactionError("Unauthorized access")`.

`TransactionError` is raised whenever an operation breaks a rule. Examples are a wrong token, too small an amount, a missing badge or a repeated action. The message gives the reason.

`to_decimal(value)` converts ints, strings, floats and decimals into the `Decimal` values used for every amount. It truncates to 18 fractional digits.

## Components

Each component is a dataclass. Its `new` classmethod creates the component together with its badges. Methods that need a badge take the badge's `Proof` as `auth`.

| Module | Class | What it does |
| --- | --- | --- |
| `blueprintkit.airdrop` | `Airdrop` | Splits a bucket evenly among the registered recipient addresses. The last recipient receives the rounding remainder. |
| `blueprintkit.airdrop_withdraw` | `AirdropWithWithdraw` | Mints one NFT badge per recipient, which records the amount allotted to that recipient. The badge holder can check the amount with `available_token` and withdraw it once with `withdraw_token`. |
| `blueprintkit.escrow` | `Escrow` | Two-party swap guarded by one badge per party. Each party puts tokens in. Once both parties accept, each withdraws the other party's tokens. After a cancel, each party withdraws its own tokens. |
| `blueprintkit.multisig` | `MultiSigMaker` | Mints signer badges. Each `approve` burns the badges it is given and counts as one approval. When the required count is reached, the held tokens go to the destination account. |
| `blueprintkit.auction` | `Auction` | Auction with bid bonds, a reserve price, a bidding period in epochs and a payment deadline of 100 epochs after the close. |
| `blueprintkit.library` | `Library` | Sells memberships for XRD. Members borrow and return books. A late fee of 1 XRD returns an overdue book, and the librarian withdraws the collected fees. It comes with three books. |
| `blueprintkit.token_sale` | `TokenSale` | Sale gated by tickets. Each ticket is burned on use. Purchases are capped per ticket and priced at a fixed rate per token. |
| `blueprintkit.marketplace` | `ProductMarketPlace` | Sellers register and list products. Buyers pay the price plus a fee, and the payment is held until the buyer confirms reception. The seller collects the buyer's postal address and marks the product as sent. Sellers and the admin then collect their payouts. Listings come in pages of 100. |
| `blueprintkit.name_service` | `NameService` | Registers names ending in `.xrd` for a deposit of 50 XRD per year. A name can be re-pointed for a fee of 10 XRD or renewed for 25 XRD per year. Unregistering a name burns it and refunds the deposit. `hash_name` gives a name's NFT id. |
| `blueprintkit.transit` | `Transit` | Sells tickets for dollars or euros and burns tickets on each ride. It logs whether the riders are new, returning or repeat riders in the same epoch. Hosts can turn rides on or off and withdraw the takings. |
| `blueprintkit.utility_token` | `UtilityTokenFactory` | Sells a utility token for XRD, at no more than `max_buy` tokens per purchase, and mints a new batch when stock runs short. If the payment is insufficient, it logs the required price and returns the payment untouched. Spent tokens can be burned with `redeem`. |
| `blueprintkit.service_stub` | `ServiceStub` | Charges 1 utility token for `simple_service` or 3 for `premium_service` and returns the change. Once it holds more than 100 spent tokens, it redeems them. |

## Example

```python
from blueprintkit.ledger import Ledger, TransactionError
from blueprintkit.airdrop import Airdrop

ledger = Ledger()
admin = ledger.new_account(1_000_000)
alice = ledger.new_account(1_000_000)
bob = ledger.new_account(1_000_000)

airdrop, admin_badge = Airdrop.new(ledger)
badge = admin_badge.resource
admin.deposit(admin_badge)

airdrop.add_recipient(alice.address, admin.present(badge))
airdrop.add_recipient(bob.address, admin.present(badge))

tokens = admin.withdraw(1000, ledger.xrd)
airdrop.perform_airdrop(tokens, admin.present(badge))

print(alice.balance(ledger.xrd))  # 1000500
print(bob.balance(ledger.xrd))    # 1000500
```

A rule that fails raises `TransactionError`:

```python
empty, other_badge = Airdrop.new(ledger)
admin.deposit(other_badge)
try:
    empty.perform_airdrop(admin.withdraw(10, ledger.xrd), admin.present(other_badge.resource))
except TransactionError as exc:
    print(exc)  # You must register at least one recipient before performing an airdrop
```

## What it does not do

blueprintkit is a library only. It has no command-line tool. It does not store anything on disk, connect to any network or sign transactions. A failed call raises an error but does not roll back changes made earlier in the same call. All state lives in the `Ledger` object and its components for as long as the Python process runs.