"""Pydantic models for calculator operations and key-press actions."""
from collections.abc import Callable as ABCCallable
from enum import Enum
import math
import operator
from typing import Annotated, Callable, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


# Type alias for operator functions (taking two floats, returning a float)
OperatorFn: ABCCallable[[float, float], float] = Callable[[float, float], float]


class CalculatorOperation(str, Enum):
    """Binary operation selected on the keypad, valued by its display symbol."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "x"
    DIVIDE = "/"

    @property
    def symbol(self) -> str:
        """Symbol shown between the two operands."""
        return self.value

    def compute(self, a: float, b: float) -> float:
        """
        Apply the operation to two operands.

        Division by zero follows IEEE semantics and returns inf or nan
        instead of raising.

        :param float a: Left operand
        :param float b: Right operand

        :return: Result of ``a <op> b``
        :rtype: float
        """
        if self is CalculatorOperation.DIVIDE and b == 0:
            if a == 0 or math.isnan(a):
                return math.nan
            return math.copysign(math.inf, a) * math.copysign(1.0, b)
        return OPERATORS[self](a, b)


# Mapping of operations to their arithmetic function
OPERATORS: dict[CalculatorOperation, OperatorFn] = {
    CalculatorOperation.ADD: operator.add,
    CalculatorOperation.SUBTRACT: operator.sub,
    CalculatorOperation.MULTIPLY: operator.mul,
    CalculatorOperation.DIVIDE: operator.truediv,
}


class _Action(BaseModel):
    """Base class of every key-press action."""

    model_config = ConfigDict(frozen=True)


class DigitAction(_Action):
    """A digit key (0-9) was pressed."""

    kind: Literal["digit"] = "digit"
    value: int = Field(..., ge=0, le=9, description="Digit entered")


class DecimalAction(_Action):
    """The decimal point key was pressed."""

    kind: Literal["decimal"] = "decimal"


class SetOperationAction(_Action):
    """An operator key was pressed."""

    kind: Literal["operation"] = "operation"
    operation: CalculatorOperation = Field(..., description="Selected operation")


class DeleteAction(_Action):
    """The Del key was pressed."""

    kind: Literal["delete"] = "delete"


class ClearAction(_Action):
    """The AC key was pressed."""

    kind: Literal["clear"] = "clear"


class CalculateAction(_Action):
    """The = key was pressed."""

    kind: Literal["calculate"] = "calculate"


CalculatorAction = Annotated[
    Union[
        DigitAction,
        DecimalAction,
        SetOperationAction,
        DeleteAction,
        ClearAction,
        CalculateAction,
    ],
    Field(discriminator="kind"),
]
