"""Проверка входного JSON и сериализация результатов."""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from mealsplit.errors import InvalidInputShape, MealSplitError, NonNumericOrNegativeAmount
from mealsplit.models import (
    BalanceResult,
    BillInput,
    BillItem,
    BillOutput,
    NettingInput,
    Person,
    PersonalItem,
    SharedItem,
    SplitMode,
)
from mealsplit.services.rounding import to_decimal, to_wire_number
from mealsplit.utils.parse import parse_bill_date


WireNumber = Union[int, float]

AMOUNT_FIELDS = {"price", "paid", "tipPercentage", "totalAmount"}
AMOUNT_ERRORS = {"float_type", "float_parsing", "finite_number", "greater_than_equal"}


def _amount(**kwargs: Any) -> Any:
    return Field(strict=True, ge=0, allow_inf_nan=False, **kwargs)


class _InputModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class BillItemSchema(_InputModel):
    name: str = Field(strict=True, min_length=1)
    price: float = _amount()
    is_shared: bool = Field(strict=True, alias="isShared")
    person: Optional[str] = Field(None, strict=True)

    @model_validator(mode="after")
    def check_person(self) -> "BillItemSchema":
        if not self.is_shared and not self.person:
            raise ValueError("個人項目缺少 person 欄位")
        return self

    def to_item(self) -> BillItem:
        price = to_decimal(self.price)
        if self.is_shared:
            return SharedItem(name=self.name, price=price)
        if not self.person:
            raise InvalidInputShape("個人項目缺少 person 欄位", field="person")
        return PersonalItem(name=self.name, price=price, person=self.person)


class BillInputSchema(_InputModel):
    date: str = Field(strict=True, min_length=1)
    location: str = Field(strict=True, min_length=1)
    tip_percentage: float = _amount(alias="tipPercentage")
    items: list[BillItemSchema]

    def to_model(self) -> BillInput:
        return BillInput(
            date=self.date,
            location=self.location,
            tip_percentage=to_decimal(self.tip_percentage),
            items=tuple(item.to_item() for item in self.items),
        )


class PersonSchema(_InputModel):
    name: str = Field(strict=True, min_length=1)
    paid: float = _amount()


class NettingInputSchema(_InputModel):
    people: list[PersonSchema]
    total_amount: Optional[float] = _amount(default=None, alias="totalAmount")

    def to_model(self) -> NettingInput:
        return NettingInput(
            people=tuple(Person(name=p.name, paid=to_decimal(p.paid)) for p in self.people),
            total_amount=to_decimal(self.total_amount) if self.total_amount is not None else None,
        )


class _OutputModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PersonItemSchema(_OutputModel):
    name: str
    amount: WireNumber


class BillOutputSchema(_OutputModel):
    date: str
    location: str
    sub_total: WireNumber = Field(alias="subTotal")
    tip: WireNumber
    total_amount: WireNumber = Field(alias="totalAmount")
    items: list[PersonItemSchema]

    @classmethod
    def from_result(cls, result: BillOutput) -> "BillOutputSchema":
        return cls(
            date=result.date,
            location=result.location,
            sub_total=to_wire_number(result.sub_total),
            tip=to_wire_number(result.tip),
            total_amount=to_wire_number(result.total_amount),
            items=[PersonItemSchema(name=p.name, amount=to_wire_number(p.amount)) for p in result.items],
        )


class PaymentRecordSchema(_OutputModel):
    payer: str = Field(alias="from")
    payee: str = Field(alias="to")
    amount: WireNumber


class BalanceResultSchema(_OutputModel):
    total_amount: WireNumber = Field(alias="totalAmount")
    per_person_amount: WireNumber = Field(alias="perPersonAmount")
    payments: list[PaymentRecordSchema]

    @classmethod
    def from_result(cls, result: BalanceResult) -> "BalanceResultSchema":
        return cls(
            total_amount=to_wire_number(result.total_amount),
            per_person_amount=to_wire_number(result.per_person_amount),
            payments=[
                PaymentRecordSchema(payer=p.payer, payee=p.payee, amount=to_wire_number(p.amount))
                for p in result.payments
            ],
        )


def _format_loc(loc: tuple[Any, ...]) -> str:
    path = ""
    for part in loc:
        path += f"[{part}]" if isinstance(part, int) else (f".{part}" if path else str(part))
    return path


def _translate(exc: ValidationError) -> MealSplitError:
    first = exc.errors()[0]
    field = _format_loc(first["loc"]) or None
    message = first["msg"]
    if first["loc"] and first["loc"][-1] in AMOUNT_FIELDS and first["type"] in AMOUNT_ERRORS:
        return NonNumericOrNegativeAmount(f"{field} 必須是非負數", field=field)
    if field:
        return InvalidInputShape(f"缺少或無效的 {field} 欄位: {message}", field=field)
    return InvalidInputShape(f"無效的資料格式: {message}")


def _require_object(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise InvalidInputShape("無效的 JSON 格式: 頂層必須是物件")
    return data


def decode_bill(data: Any) -> BillInput:
    try:
        schema = BillInputSchema.model_validate(_require_object(data))
    except ValidationError as exc:
        raise _translate(exc) from exc
    parse_bill_date(schema.date)
    return schema.to_model()


def decode_netting(data: Any) -> NettingInput:
    try:
        schema = NettingInputSchema.model_validate(_require_object(data))
    except ValidationError as exc:
        raise _translate(exc) from exc
    return schema.to_model()


def detect_mode(data: Any) -> SplitMode:
    payload = _require_object(data)
    if "people" in payload:
        return SplitMode.NETTING
    if "items" in payload:
        return SplitMode.ITEMIZED
    raise InvalidInputShape("無法判斷資料類型: 需要 items 或 people 欄位")
