from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Sequence

from mealsplit.errors import EmptyRoster
from mealsplit.models import BalanceResult, PaymentRecord, Person
from mealsplit.services.rounding import Number, round_half_up, to_decimal


AMOUNT_PLACES = 2


def calculate_per_person_amount(total_amount: Number, number_of_people: int) -> Decimal:
    return round_half_up(to_decimal(total_amount) / number_of_people, AMOUNT_PLACES)


def settle(balances: Sequence[tuple[str, Decimal]]) -> List[PaymentRecord]:
    creditors = [[name, balance] for name, balance in balances if balance > 0]
    debtors = [[name, balance] for name, balance in balances if balance < 0]

    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1])

    payments: list[PaymentRecord] = []
    i, j = 0, 0

    while i < len(creditors) and j < len(debtors):
        creditor = creditors[i]
        debtor = debtors[j]

        amount = round_half_up(min(creditor[1], -debtor[1]), AMOUNT_PLACES)
        if amount > 0:
            payments.append(PaymentRecord(payer=debtor[0], payee=creditor[0], amount=amount))

        creditor[1] = round_half_up(creditor[1] - amount, AMOUNT_PLACES)
        debtor[1] = round_half_up(debtor[1] + amount, AMOUNT_PLACES)

        if creditor[1] == 0:
            i += 1
        if debtor[1] == 0:
            j += 1

    return payments


def compute_netting(people: Sequence[Person], total_amount: Optional[Number] = None) -> BalanceResult:
    if not people:
        raise EmptyRoster("至少需要一個人的資料", field="people")

    if not total_amount:
        total = sum((person.paid for person in people), Decimal(0))
    else:
        total = to_decimal(total_amount)

    share = calculate_per_person_amount(total, len(people))
    balances = [(person.name, round_half_up(person.paid - share, AMOUNT_PLACES)) for person in people]
    payments = settle(balances)

    return BalanceResult(total_amount=total, per_person_amount=share, payments=payments)
