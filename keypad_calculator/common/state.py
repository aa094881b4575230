"""Immutable calculator state."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from keypad_calculator.common.operations import CalculatorOperation


# Maximum operand length shown on screen, enough for a double's precision
MAX_NUM_LENGTH: int = 15


class CalculatorState(BaseModel):
    """
    Snapshot of the calculator: two operand buffers and the pending operation.

    Instances are frozen; every transition builds a new one with ``model_copy``.
    """

    model_config = ConfigDict(frozen=True)

    number1: str = Field(default="", max_length=MAX_NUM_LENGTH, description="First operand text")
    number2: str = Field(default="", max_length=MAX_NUM_LENGTH, description="Second operand text")
    operation: Optional[CalculatorOperation] = Field(default=None, description="Selected operation")

    @field_validator("number1", "number2")
    def at_most_one_decimal_point(cls, v: str) -> str:
        """Ensure that an operand holds at most one decimal point."""
        if v.count(".") > 1:
            raise ValueError("Operand cannot contain more than one decimal point")
        return v

    @model_validator(mode="after")
    def second_operand_needs_operation(self) -> "CalculatorState":
        """Ensure that the second operand is only set once an operation is chosen."""
        if self.number2 and self.operation is None:
            raise ValueError("Second operand requires an operation")
        return self

    @property
    def display(self) -> str:
        """Text line rendered by a host: ``number1 + symbol + number2``."""
        symbol = self.operation.symbol if self.operation is not None else ""
        return f"{self.number1}{symbol}{self.number2}"
