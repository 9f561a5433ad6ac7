from __future__ import annotations

from typing import Iterable

from mealsplit.models import BalanceResult, BillInput, BillItem, BillOutput, PersonalItem, SharedItem
from mealsplit.services.rounding import format_money


BILL_HEADER = "===== 聚餐分帳結果 ====="
NETTING_HEADER = "=== 聚餐分帳結果 ==="
BALANCED_LABEL = "無需支付（已平衡）"


def _item_lines(items: Iterable[BillItem]) -> list[str]:
    return [f"{index}. {item.name} (${format_money(item.price, 1)})" for index, item in enumerate(items, start=1)]


def group_personal_items(items: Iterable[BillItem]) -> dict[str, list[PersonalItem]]:
    grouped: dict[str, list[PersonalItem]] = {}
    for item in items:
        if isinstance(item, PersonalItem):
            grouped.setdefault(item.person, []).append(item)
    return grouped


def format_bill_text(output: BillOutput, bill: BillInput) -> str:
    shared = [item for item in bill.items if isinstance(item, SharedItem)]

    lines = [
        BILL_HEADER,
        f"日期：{output.date}",
        f"地點：{output.location}",
        "",
    ]

    if shared:
        lines.append("均分項目：")
        lines.extend(_item_lines(shared))
        lines.append("")

    for person, items in group_personal_items(bill.items).items():
        lines.append(f"非均分項目 - {person}：")
        lines.extend(_item_lines(items))
        lines.append("")

    lines.extend(
        [
            f"小結：${format_money(output.sub_total, 1)}",
            "",
            f"小費：${format_money(output.tip, 1)}",
            "",
            f"總金額：${format_money(output.total_amount, 1)}",
            "",
            "分帳結果：",
        ]
    )
    for index, person in enumerate(output.items, start=1):
        lines.append(f"{index}. {person.name} 應付：${format_money(person.amount, 1)}")

    return "\n".join(lines) + "\n"


def format_netting_text(result: BalanceResult) -> str:
    lines = [
        NETTING_HEADER,
        "",
        f"總金額: ${format_money(result.total_amount, 2)}",
        f"每人應付: ${format_money(result.per_person_amount, 2)}",
        "",
        "支付明細:",
    ]

    if not result.payments:
        lines.append(f"  {BALANCED_LABEL}")
    for index, payment in enumerate(result.payments, start=1):
        lines.append(f"  {index}. {payment.payer} → {payment.payee}: ${format_money(payment.amount, 2)}")

    return "\n".join(lines) + "\n"
