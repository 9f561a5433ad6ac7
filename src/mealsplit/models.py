from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional, Sequence, Union


class SplitMode(str, Enum):
    AUTO = "auto"
    ITEMIZED = "itemized"
    NETTING = "netting"


class OutputFormat(str, Enum):
    JSON = "json"
    TEXT = "text"


@dataclass(slots=True, frozen=True)
class SharedItem:
    name: str
    price: Decimal


@dataclass(slots=True, frozen=True)
class PersonalItem:
    name: str
    price: Decimal
    person: str

    def __post_init__(self) -> None:
        if not self.person:
            raise ValueError("personal item must name a person")


BillItem = Union[SharedItem, PersonalItem]


@dataclass(slots=True, frozen=True)
class BillInput:
    date: str
    location: str
    tip_percentage: Decimal
    items: tuple[BillItem, ...] = ()


@dataclass(slots=True)
class PersonItem:
    name: str
    amount: Decimal


@dataclass(slots=True)
class BillOutput:
    date: str
    location: str
    sub_total: Decimal
    tip: Decimal
    total_amount: Decimal
    items: list[PersonItem] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class Person:
    name: str
    paid: Decimal


@dataclass(slots=True, frozen=True)
class NettingInput:
    people: Sequence[Person]
    total_amount: Optional[Decimal] = None


@dataclass(slots=True)
class PaymentRecord:
    payer: str
    payee: str
    amount: Decimal


@dataclass(slots=True)
class BalanceResult:
    total_amount: Decimal
    per_person_amount: Decimal
    payments: list[PaymentRecord] = field(default_factory=list)
