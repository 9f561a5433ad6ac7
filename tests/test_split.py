from decimal import Decimal

import pytest

from mealsplit.errors import EmptyItemList, InvalidDateFormat, NoRecipientForSharedCost
from mealsplit.models import BillInput, PersonalItem, SharedItem
from mealsplit.services.split import calculate_tip, collect_people, compute_split
from mealsplit.utils.parse import format_bill_date


def make_bill(items, tip="10", date="2024-03-21", location="開心小館"):
    return BillInput(date=date, location=location, tip_percentage=Decimal(tip), items=tuple(items))


def dinner_items():
    return [
        SharedItem(name="牛排", price=Decimal("199")),
        PersonalItem(name="橙汁", price=Decimal("10"), person="Alice"),
        SharedItem(name="薯條", price=Decimal("12")),
        PersonalItem(name="熱檸檬水", price=Decimal("8"), person="Bob"),
        PersonalItem(name="熱檸檬水", price=Decimal("8"), person="Charlie"),
    ]


def test_format_bill_date_strips_leading_zeros():
    assert format_bill_date("2024-03-21") == "2024年3月21日"
    assert format_bill_date("2024-12-01") == "2024年12月1日"


@pytest.mark.parametrize("value", ["2024/03/21", "2024-03", "2024-03-21-01", "2024-ab-01", ""])
def test_format_bill_date_rejects_malformed(value):
    with pytest.raises(InvalidDateFormat):
        format_bill_date(value)


def test_calculate_tip():
    assert calculate_tip(100, 10) == Decimal("10.0")
    assert calculate_tip(100, 15) == Decimal("15.0")
    assert calculate_tip(100, 12.5) == Decimal("12.5")
    assert calculate_tip(237, 10) == Decimal("23.7")


def test_calculate_tip_rounds_half_up():
    assert calculate_tip(Decimal("0.5"), 10) == Decimal("0.1")
    assert calculate_tip(Decimal("2.5"), 10) == Decimal("0.3")


def test_collect_people_keeps_first_appearance_order():
    assert collect_people(dinner_items()) == ["Alice", "Bob", "Charlie"]


def test_compute_split_mixed_items():
    result = compute_split(make_bill(dinner_items()))

    assert result.date == "2024年3月21日"
    assert result.location == "開心小館"
    assert result.sub_total == Decimal("237")
    assert result.tip == Decimal("23.7")
    assert result.total_amount == Decimal("260.7")
    assert [p.name for p in result.items] == ["Alice", "Bob", "Charlie"]
    assert sum(p.amount for p in result.items) == result.total_amount


def test_compute_split_residual_goes_to_first_person():
    result = compute_split(make_bill(dinner_items()))

    amounts = {p.name: p.amount for p in result.items}
    # 88.4 + 86.2 + 86.2 = 260.8, лишние 0.1 снимаются с Alice
    assert amounts == {
        "Alice": Decimal("88.3"),
        "Bob": Decimal("86.2"),
        "Charlie": Decimal("86.2"),
    }


def test_compute_split_only_personal_items():
    items = [
        PersonalItem(name="飲料", price=Decimal("30"), person="Alice"),
        PersonalItem(name="甜點", price=Decimal("20"), person="Bob"),
    ]

    result = compute_split(make_bill(items))

    assert result.sub_total == 50
    assert result.tip == 5
    assert result.total_amount == 55
    assert {p.name: p.amount for p in result.items} == {"Alice": 33, "Bob": 22}


def test_compute_split_only_shared_items_drops_cost():
    items = [
        SharedItem(name="主菜", price=Decimal("100")),
        SharedItem(name="配菜", price=Decimal("50")),
    ]

    result = compute_split(make_bill(items))

    assert result.sub_total == 150
    assert result.tip == 15
    assert result.total_amount == 165
    assert result.items == []


def test_compute_split_empty_items():
    result = compute_split(make_bill([]))

    assert result.sub_total == 0
    assert result.tip == 0
    assert result.total_amount == 0
    assert result.items == []


def test_compute_split_strict_rejects_degenerate_bills():
    with pytest.raises(EmptyItemList):
        compute_split(make_bill([]), strict=True)
    with pytest.raises(NoRecipientForSharedCost):
        compute_split(make_bill([SharedItem(name="主菜", price=Decimal("100"))]), strict=True)


def test_compute_split_person_with_several_items():
    items = [
        PersonalItem(name="咖啡", price=Decimal("4.5"), person="Alice"),
        SharedItem(name="披薩", price=Decimal("20")),
        PersonalItem(name="蛋糕", price=Decimal("6.5"), person="Alice"),
        PersonalItem(name="茶", price=Decimal("3"), person="Bob"),
    ]

    result = compute_split(make_bill(items, tip="15"))

    assert result.sub_total == Decimal("34")
    assert result.tip == Decimal("5.1")
    assert {p.name: p.amount for p in result.items} == {"Alice": Decimal("24.1"), "Bob": Decimal("15.0")}
    assert sum(p.amount for p in result.items) == result.total_amount


def test_compute_split_sum_matches_total_for_awkward_thirds():
    items = [
        SharedItem(name="火鍋", price=Decimal("100")),
        PersonalItem(name="可樂", price=Decimal("1"), person="A"),
        PersonalItem(name="可樂", price=Decimal("1"), person="B"),
        PersonalItem(name="可樂", price=Decimal("1"), person="C"),
    ]

    result = compute_split(make_bill(items, tip="7"))

    assert result.total_amount == Decimal("110.2")
    assert sum(p.amount for p in result.items) == result.total_amount


def test_compute_split_is_deterministic():
    bill = make_bill(dinner_items())
    assert compute_split(bill) == compute_split(bill)


def test_compute_split_rejects_bad_date():
    with pytest.raises(InvalidDateFormat):
        compute_split(make_bill(dinner_items(), date="21.03.2024"))


def test_compute_split_writes_nothing_to_stdout(capsys):
    compute_split(make_bill([PersonalItem(name="a", price=Decimal("1"), person="A")]))

    assert capsys.readouterr().out == ""
