"""Test CalculatorOperation and the key-press action models."""
import math

from pydantic import TypeAdapter, ValidationError
import pytest

from keypad_calculator.common.operations import (
    CalculateAction,
    CalculatorAction,
    CalculatorOperation,
    DigitAction,
    SetOperationAction,
)


@pytest.mark.parametrize("operation,symbol", [
    (CalculatorOperation.ADD, "+"),
    (CalculatorOperation.SUBTRACT, "-"),
    (CalculatorOperation.MULTIPLY, "x"),
    (CalculatorOperation.DIVIDE, "/"),
])
def test_operation_symbol(operation: CalculatorOperation, symbol: str) -> None:
    """Each operation carries its display symbol."""
    assert operation.symbol == symbol


@pytest.mark.parametrize("operation,a,b,expected", [
    (CalculatorOperation.ADD, 2.0, 3.0, 5.0),
    (CalculatorOperation.SUBTRACT, 2.0, 3.0, -1.0),
    (CalculatorOperation.MULTIPLY, 2.0, 3.0, 6.0),
    (CalculatorOperation.DIVIDE, 3.0, 2.0, 1.5),
])
def test_operation_compute(operation: CalculatorOperation, a: float, b: float, expected: float) -> None:
    """compute applies the arithmetic function of the operation."""
    assert operation.compute(a, b) == expected


@pytest.mark.parametrize("a,b,expected", [
    (5.0, 0.0, math.inf),
    (-5.0, 0.0, -math.inf),
    (5.0, -0.0, -math.inf),
])
def test_divide_by_zero_is_infinite(a: float, b: float, expected: float) -> None:
    """Dividing a non-zero value by zero gives a signed infinity instead of raising."""
    assert CalculatorOperation.DIVIDE.compute(a, b) == expected


def test_zero_divided_by_zero_is_nan() -> None:
    """0 / 0 gives NaN instead of raising."""
    assert math.isnan(CalculatorOperation.DIVIDE.compute(0.0, 0.0))


def test_digit_action_valid() -> None:
    """A DigitAction accepts 0 to 9."""
    assert DigitAction(value=0).value == 0
    assert DigitAction(value=9).value == 9


@pytest.mark.parametrize("value", [-1, 10])
def test_digit_action_out_of_range(value: int) -> None:
    """Values outside 0-9 raise a validation error."""
    with pytest.raises(ValidationError):
        DigitAction(value=value)


def test_set_operation_action_from_symbol() -> None:
    """An operation can be given by its symbol."""
    assert SetOperationAction(operation="x").operation is CalculatorOperation.MULTIPLY


def test_set_operation_action_invalid_symbol() -> None:
    """Unknown operation symbols raise a validation error."""
    with pytest.raises(ValidationError):
        SetOperationAction(operation="%")


def test_actions_are_frozen() -> None:
    """Actions cannot be modified after creation."""
    action = DigitAction(value=3)
    with pytest.raises(ValidationError):
        action.value = 4


def test_action_union_dispatches_on_kind() -> None:
    """The action union picks the model named by its kind."""
    adapter = TypeAdapter(CalculatorAction)
    assert adapter.validate_python({"kind": "digit", "value": 7}) == DigitAction(value=7)
    assert adapter.validate_python({"kind": "calculate"}) == CalculateAction()
    with pytest.raises(ValidationError):
        adapter.validate_python({"kind": "percent"})
