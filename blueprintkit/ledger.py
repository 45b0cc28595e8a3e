"""In-memory ledger of resources, buckets, vaults, proofs and accounts."""

from __future__ import annotations

import copy
import itertools
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from decimal import ROUND_DOWN, Context, Decimal, InvalidOperation, localcontext
from typing import Any, Iterator

_SCALE = Decimal(1).scaleb(-18)
_MATH = Context(prec=80)
DEFAULT_XRD = 1_000_000


class TransactionError(Exception):
    """Raised when a component or resource operation is rejected."""


def to_decimal(value: Any) -> Decimal:
    """Return ``value`` as a decimal with at most 18 fractional digits, truncated."""
    if isinstance(value, bool):
        raise TransactionError(f"Invalid decimal: {value!r}")
    try:
        with localcontext() as ctx:
            ctx.prec = 80
            number = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
            if not number.is_finite():
                raise TransactionError(f"Invalid decimal: {value!r}")
            number = number.quantize(_SCALE, rounding=ROUND_DOWN)
            if number == number.to_integral_value():
                return number.quantize(Decimal(1)) + 0
            return number.normalize()
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise TransactionError(f"Invalid decimal: {value!r}") from exc


def _key(resource: Any) -> str:
    return resource.address if isinstance(resource, ResourceDef) else str(resource)


def check_proof(proof: "Proof | None", *args: "ResourceDef") -> "Proof":
    """Check that ``proof`` shows a positive amount of one of the given resources."""
    allowed = {_key(resource) for resource in args}
    if proof is None or proof.amount <= 0 or proof.resource_address not in allowed:
        raise TransactionError("Unauthorized access")
    return proof


class ResourceDef:
    """Definition of a fungible or non-fungible resource."""

    def __init__(self, address: str, divisibility: int | None,
                 metadata: dict[str, str] | None = None, minter: str | None = None):
        self.address = address
        self.divisibility = divisibility
        self.metadata = dict(metadata or {})
        self.minter = minter
        self.total_supply = Decimal(0)
        self._nfts: dict[int, Any] = {}

    def __repr__(self) -> str:
        return f"ResourceDef({self.address!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ResourceDef) and other.address == self.address

    def __hash__(self) -> int:
        return hash(self.address)

    @property
    def is_fungible(self) -> bool:
        return self.divisibility is not None

    def _authorize(self, auth: "Proof | None") -> None:
        if self.minter is None:
            raise TransactionError("Resource is not mintable")
        check_proof(auth, self.minter)

    def _validate(self, amount: Any) -> Decimal:
        value = to_decimal(amount)
        if value < 0:
            raise TransactionError("Negative amount")
        places = self.divisibility if self.is_fungible else 0
        if value != value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_DOWN):
            raise TransactionError("Invalid amount")
        return value

    def _issue(self, amount: Any) -> "Bucket":
        if not self.is_fungible:
            raise TransactionError("Not a fungible resource")
        value = self._validate(amount)
        self.total_supply = to_decimal(_MATH.add(self.total_supply, value))
        return Bucket(self, value)

    def mint(self, amount: Any, auth: "Proof") -> "Bucket":
        """Mint ``amount`` new fungible units."""
        if not self.is_fungible:
            raise TransactionError("Not a fungible resource")
        self._authorize(auth)
        return self._issue(amount)

    def mint_nft(self, nft_id: int, data: Any, auth: "Proof") -> "Bucket":
        """Mint one non-fungible unit with the given id and data."""
        if self.is_fungible:
            raise TransactionError("Not a non-fungible resource")
        self._authorize(auth)
        if nft_id in self._nfts:
            raise TransactionError("NFT already exists")
        self._nfts[nft_id] = copy.deepcopy(data)
        self.total_supply = to_decimal(self.total_supply + 1)
        return Bucket(self, nft_ids=[nft_id])

    def burn(self, bucket: "Bucket", auth: "Proof") -> None:
        """Destroy everything held in ``bucket``."""
        self._authorize(auth)
        if bucket.resource != self:
            raise TransactionError("Resource mismatch")
        amount, ids = bucket._drain()
        for nft_id in ids:
            del self._nfts[nft_id]
        self.total_supply = to_decimal(_MATH.subtract(self.total_supply, amount))

    def get_nft_data(self, nft_id: int) -> Any:
        """Return a copy of the data of an NFT."""
        try:
            return copy.deepcopy(self._nfts[nft_id])
        except KeyError:
            raise TransactionError("NFT not found") from None

    def update_nft_data(self, nft_id: int, data: Any, auth: "Proof") -> None:
        """Replace the data of an existing NFT."""
        self._authorize(auth)
        if nft_id not in self._nfts:
            raise TransactionError("NFT not found")
        self._nfts[nft_id] = copy.deepcopy(data)


class Bucket:
    """A transient container of one resource."""

    def __init__(self, resource: ResourceDef, amount: Any = 0, nft_ids: Any = ()):
        self.resource = resource
        self._amount = to_decimal(amount) if resource.is_fungible else Decimal(0)
        self._nft_ids: set[int] = set() if resource.is_fungible else set(nft_ids)

    def __repr__(self) -> str:
        return f"Bucket({self.resource.address!r}, {self.amount})"

    @property
    def resource_address(self) -> str:
        return self.resource.address

    @property
    def amount(self) -> Decimal:
        if self.resource.is_fungible:
            return self._amount
        return to_decimal(len(self._nft_ids))

    @property
    def nft_ids(self) -> list[int]:
        return sorted(self._nft_ids)

    @property
    def nft_id(self) -> int:
        if len(self._nft_ids) != 1:
            raise TransactionError("Expected exactly one NFT")
        return next(iter(self._nft_ids))

    def take(self, amount: Any) -> "Bucket":
        """Split ``amount`` off into a new bucket."""
        value = self.resource._validate(amount)
        if value > self.amount:
            raise TransactionError("Insufficient balance")
        if self.resource.is_fungible:
            self._amount = to_decimal(_MATH.subtract(self._amount, value))
            return Bucket(self.resource, value)
        taken = self.nft_ids[: int(value)]
        self._nft_ids.difference_update(taken)
        return Bucket(self.resource, nft_ids=taken)

    def take_nft(self, nft_id: int) -> "Bucket":
        """Split one NFT off into a new bucket."""
        if nft_id not in self._nft_ids:
            raise TransactionError("NFT not found")
        self._nft_ids.remove(nft_id)
        return Bucket(self.resource, nft_ids=[nft_id])

    def put(self, other: "Bucket") -> None:
        """Move everything in ``other`` into this bucket."""
        if other.resource != self.resource:
            raise TransactionError("Resource mismatch")
        amount, ids = other._drain()
        if self.resource.is_fungible:
            self._amount = to_decimal(_MATH.add(self._amount, amount))
        else:
            self._nft_ids.update(ids)

    def is_empty(self) -> bool:
        return self.amount == 0

    def present(self) -> "Proof":
        """Return a proof of what this bucket holds."""
        return Proof(self.resource, self.amount, frozenset(self._nft_ids))

    def _drain(self) -> tuple[Decimal, list[int]]:
        amount, ids = self.amount, self.nft_ids
        self._amount = Decimal(0)
        self._nft_ids = set()
        return amount, ids


@dataclass(frozen=True)
class Proof:
    """Evidence that the caller holds an amount of a resource."""

    resource: ResourceDef
    amount: Decimal
    nft_ids: frozenset = field(default_factory=frozenset)

    @property
    def resource_address(self) -> str:
        return self.resource.address

    @property
    def nft_id(self) -> int:
        if len(self.nft_ids) != 1:
            raise TransactionError("Expected exactly one NFT")
        return next(iter(self.nft_ids))


class Vault:
    """Persistent storage of one resource inside a component or account."""

    def __init__(self, resource: ResourceDef, contents: Bucket | None = None):
        self._bucket = Bucket(resource)
        if contents is not None:
            self.put(contents)

    @property
    def resource(self) -> ResourceDef:
        return self._bucket.resource

    @property
    def resource_address(self) -> str:
        return self._bucket.resource_address

    @property
    def amount(self) -> Decimal:
        return self._bucket.amount

    @property
    def nft_ids(self) -> list[int]:
        return self._bucket.nft_ids

    def put(self, bucket: Bucket) -> None:
        self._bucket.put(bucket)

    def take(self, amount: Any) -> Bucket:
        return self._bucket.take(amount)

    def take_all(self) -> Bucket:
        return self._bucket.take(self.amount)

    def is_empty(self) -> bool:
        return self._bucket.is_empty()

    @contextmanager
    def authorize(self) -> Iterator[Proof]:
        """Yield a proof of the vault's contents for the duration of the block."""
        if self.is_empty():
            raise TransactionError("Vault is empty")
        yield self._bucket.present()


class Account:
    """A user account holding one vault per resource."""

    def __init__(self, address: str):
        self.address = address
        self._vaults: dict[str, Vault] = {}

    def __repr__(self) -> str:
        return f"Account({self.address!r})"

    def deposit(self, bucket: Bucket) -> None:
        vault = self._vaults.setdefault(bucket.resource_address, Vault(bucket.resource))
        vault.put(bucket)

    def withdraw(self, amount: Any, resource: Any) -> Bucket:
        vault = self._vaults.get(_key(resource))
        if vault is None or to_decimal(amount) > vault.amount:
            raise TransactionError("Insufficient balance")
        return vault.take(amount)

    def withdraw_nft(self, nft_id: int, resource: Any) -> Bucket:
        vault = self._vaults.get(_key(resource))
        if vault is None or nft_id not in vault.nft_ids:
            raise TransactionError("Insufficient balance")
        return vault._bucket.take_nft(nft_id)

    def balance(self, resource: Any) -> Decimal:
        vault = self._vaults.get(_key(resource))
        return vault.amount if vault is not None else Decimal(0)

    def nft_ids(self, resource: Any) -> list[int]:
        vault = self._vaults.get(_key(resource))
        return vault.nft_ids if vault is not None else []

    def present(self, resource: Any, amount: Any = 1) -> Proof:
        """Return a proof of ``amount`` of ``resource`` without moving it."""
        vault = self._vaults.get(_key(resource))
        value = to_decimal(amount)
        if vault is None or value <= 0 or vault.amount < value:
            raise TransactionError("Insufficient balance")
        ids = frozenset() if vault.resource.is_fungible else frozenset(vault.nft_ids[: int(value)])
        return Proof(vault.resource, value, ids)


class Ledger:
    """Registry of resources and accounts, with an epoch clock and a log."""

    def __init__(self) -> None:
        self.epoch = 0
        self.logs: list[str] = []
        self._counter = itertools.count(1)
        self._resources: dict[str, ResourceDef] = {}
        self._accounts: dict[str, Account] = {}
        self.xrd = self._register(18, {"name": "Radix", "symbol": "XRD"}, None)

    def _address(self, prefix: str) -> str:
        return f"{prefix}{next(self._counter):052x}"

    def _register(self, divisibility: int | None, metadata: dict[str, str] | None,
                  minter: Any) -> ResourceDef:
        resource = ResourceDef(self._address("03"), divisibility, metadata,
                               None if minter is None else _key(minter))
        self._resources[resource.address] = resource
        return resource

    def create_badge(self, metadata: dict[str, str] | None = None, supply: Any = 1) -> Bucket:
        """Create a fixed-supply, indivisible resource and return its supply."""
        return self._register(0, metadata, None)._issue(supply)

    def new_fungible(self, divisibility: int, metadata: dict[str, str] | None = None,
                     minter: Any = None) -> ResourceDef:
        if not 0 <= divisibility <= 18:
            raise TransactionError("Invalid divisibility")
        return self._register(divisibility, metadata, minter)

    def new_non_fungible(self, metadata: dict[str, str] | None = None,
                         minter: Any = None) -> ResourceDef:
        return self._register(None, metadata, minter)

    def new_account(self, xrd: Any = DEFAULT_XRD) -> Account:
        account = Account(self._address("02"))
        self._accounts[account.address] = account
        if to_decimal(xrd) > 0:
            account.deposit(self.xrd._issue(xrd))
        return account

    def account(self, address: Any) -> Account:
        key = address.address if isinstance(address, Account) else str(address)
        try:
            return self._accounts[key]
        except KeyError:
            raise TransactionError(f"Account not found: {key}") from None

    def generate_uuid(self) -> int:
        return uuid.uuid4().int

    def advance_epoch(self, epochs: int = 1) -> int:
        self.epoch += epochs
        return self.epoch

    def info(self, message: str) -> None:
        self.logs.append(message)