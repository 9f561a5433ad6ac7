from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Sequence, assert_never

from mealsplit.errors import EmptyItemList, NoRecipientForSharedCost
from mealsplit.models import BillInput, BillItem, BillOutput, PersonalItem, PersonItem, SharedItem
from mealsplit.services.rounding import Number, round_half_up, to_decimal
from mealsplit.utils.parse import format_bill_date


AMOUNT_PLACES = 1
HUNDRED = Decimal(100)


def calculate_tip(sub_total: Number, tip_percentage: Number) -> Decimal:
    return round_half_up(to_decimal(sub_total) * to_decimal(tip_percentage) / HUNDRED, AMOUNT_PLACES)


def collect_people(items: Iterable[BillItem]) -> list[str]:
    people: list[str] = []
    for item in items:
        match item:
            case PersonalItem(person=person):
                if person not in people:
                    people.append(person)
            case SharedItem():
                pass
            case _:
                assert_never(item)
    return people


def split_totals(items: Sequence[BillItem]) -> tuple[Decimal, dict[str, Decimal]]:
    shared_total = Decimal(0)
    personal: dict[str, Decimal] = {}
    for item in items:
        match item:
            case SharedItem(price=price):
                shared_total += price
            case PersonalItem(price=price, person=person):
                personal[person] = personal.get(person, Decimal(0)) + price
            case _:
                assert_never(item)
    return shared_total, personal


def reconcile(amounts: list[PersonItem], total: Decimal) -> None:
    """
    Остаток округления целиком уходит первому человеку в списке.

    После этого сумма долей совпадает с итогом с точностью до 0.1.
    """
    if not amounts:
        return
    discrepancy = round_half_up(total - sum((p.amount for p in amounts), Decimal(0)), AMOUNT_PLACES)
    if discrepancy:
        first = amounts[0]
        first.amount = round_half_up(first.amount + discrepancy, AMOUNT_PLACES)


def compute_split(bill: BillInput, *, strict: bool = False) -> BillOutput:
    date = format_bill_date(bill.date)

    if strict and not bill.items:
        raise EmptyItemList("帳單沒有任何項目", field="items")

    sub_total = sum((item.price for item in bill.items), Decimal(0))
    tip = calculate_tip(sub_total, bill.tip_percentage)
    total = sub_total + tip

    people = collect_people(bill.items)
    shared_total, personal = split_totals(bill.items)

    if strict and not people and shared_total > 0:
        raise NoRecipientForSharedCost("均分項目沒有可分攤的人", field="items")

    rate = bill.tip_percentage / HUNDRED
    shared_per_person = shared_total / len(people) if people else Decimal(0)

    amounts: list[PersonItem] = []
    for name in people:
        pre_tip = personal[name] + shared_per_person
        amounts.append(PersonItem(name=name, amount=round_half_up(pre_tip + pre_tip * rate, AMOUNT_PLACES)))

    reconcile(amounts, total)

    return BillOutput(
        date=date,
        location=bill.location,
        sub_total=sub_total,
        tip=tip,
        total_amount=total,
        items=amounts,
    )
