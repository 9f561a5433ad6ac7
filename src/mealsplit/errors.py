from __future__ import annotations

from typing import Optional


class MealSplitError(ValueError):
    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class InvalidInputShape(MealSplitError):
    pass


class InvalidDateFormat(MealSplitError):
    pass


class NonNumericOrNegativeAmount(MealSplitError):
    pass


class EmptyRoster(MealSplitError):
    pass


class EmptyItemList(MealSplitError):
    pass


class NoRecipientForSharedCost(MealSplitError):
    pass


class InputFileError(MealSplitError):
    pass


class OutputWriteError(MealSplitError):
    pass
