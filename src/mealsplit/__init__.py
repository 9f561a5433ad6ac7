from mealsplit.models import (
    BalanceResult,
    BillInput,
    BillOutput,
    Person,
    PersonalItem,
    SharedItem,
)
from mealsplit.services.settlement import compute_netting
from mealsplit.services.split import compute_split

__all__ = [
    "BalanceResult",
    "BillInput",
    "BillOutput",
    "Person",
    "PersonalItem",
    "SharedItem",
    "compute_netting",
    "compute_split",
]
