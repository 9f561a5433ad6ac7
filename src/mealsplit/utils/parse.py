from __future__ import annotations

import re

from mealsplit.errors import InvalidDateFormat


_DATE_SEGMENT = re.compile(r"^\d+$")


def parse_bill_date(value: str) -> tuple[int, int, int]:
    """
    Разбор даты счёта в формате YYYY-MM-DD.

    Проверяется только форма строки: три числовых сегмента через дефис.
    Календарная корректность (например, 2024-02-31) не проверяется.
    """
    parts = value.strip().split("-")
    if len(parts) != 3 or not all(_DATE_SEGMENT.match(part) for part in parts):
        raise InvalidDateFormat(f"日期格式錯誤，應為 YYYY-MM-DD: {value}", field="date")

    year, month, day = (int(part) for part in parts)
    return year, month, day


def format_bill_date(value: str) -> str:
    year, month, day = parse_bill_date(value)
    return f"{year}年{month}月{day}日"
