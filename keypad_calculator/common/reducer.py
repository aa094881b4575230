"""Apply key-press actions to the calculator state."""
import math
from typing import Callable, Optional

from keypad_calculator.common.operations import (
    CalculateAction,
    CalculatorAction,
    ClearAction,
    DecimalAction,
    DeleteAction,
    DigitAction,
    SetOperationAction,
)
from keypad_calculator.common.state import MAX_NUM_LENGTH, CalculatorState


class CalculatorReducer:
    """
    Pure state reducer for a four-function calculator.

    Design constraints:
        - No side effects, no I/O
        - Total: every (state, action) pair has a successor state, nothing raises

    Invalid input (a full buffer, a second decimal point, an operator with no
    first operand, operands that do not parse) leaves the state unchanged.

    Examples:
        - Keys 2 + 3 = : number1 "5", number2 "", no operation
        - Keys 2 + 3 x : number1 "5", operation x (the pending sum is folded first)
    """

    @staticmethod
    def apply(state: CalculatorState, action: CalculatorAction) -> CalculatorState:
        """
        Compute the state that follows ``action``.

        :param CalculatorState state: Current state
        :param CalculatorAction action: Key-press action

        :return: New state (equal to ``state`` when the action is a no-op)
        :rtype: CalculatorState
        """
        handler = _HANDLERS[type(action)]
        return handler(state, action)

    @staticmethod
    def clear(state: CalculatorState, action: ClearAction) -> CalculatorState:
        """Discard everything and return the initial state."""
        return CalculatorState()

    @staticmethod
    def enter_digit(state: CalculatorState, action: DigitAction) -> CalculatorState:
        """Append a digit to the operand being entered, unless it is full."""
        if state.operation is None:
            if len(state.number1) >= MAX_NUM_LENGTH:
                return state
            return state.model_copy(update={"number1": state.number1 + str(action.value)})

        if len(state.number2) >= MAX_NUM_LENGTH:
            return state
        return state.model_copy(update={"number2": state.number2 + str(action.value)})

    @staticmethod
    def enter_decimal(state: CalculatorState, action: DecimalAction) -> CalculatorState:
        """
        Append a decimal point to the operand being entered.

        A leading point is never accepted: the operand needs at least one digit.
        """
        if state.operation is None and state.number1 and "." not in state.number1:
            return state.model_copy(update={"number1": state.number1 + "."})
        if state.number2 and "." not in state.number2:
            return state.model_copy(update={"number2": state.number2 + "."})
        return state

    @staticmethod
    def enter_operation(state: CalculatorState, action: SetOperationAction) -> CalculatorState:
        """Select an operation, folding a complete pending expression first."""
        if state.number1 and state.number2:
            state = CalculatorReducer.calculate(state, CalculateAction())
        if state.number1:
            return state.model_copy(update={"operation": action.operation})
        return state

    @staticmethod
    def delete(state: CalculatorState, action: DeleteAction) -> CalculatorState:
        """Remove one character, or the operation, from the end of the input."""
        if state.number2:
            return state.model_copy(update={"number2": state.number2[:-1]})
        if state.operation is not None:
            return state.model_copy(update={"operation": None})
        if state.number1:
            return state.model_copy(update={"number1": state.number1[:-1]})
        return state

    @staticmethod
    def calculate(state: CalculatorState, action: CalculateAction) -> CalculatorState:
        """Evaluate ``number1 <op> number2`` and make the result the first operand."""
        a: Optional[float] = CalculatorReducer._parse_operand(state.number1)
        b: Optional[float] = CalculatorReducer._parse_operand(state.number2)
        if a is None or b is None or state.operation is None:
            return state

        result: float = state.operation.compute(a, b)
        return CalculatorState(number1=CalculatorReducer.format_result(result)[:MAX_NUM_LENGTH])

    @staticmethod
    def _parse_operand(text: str) -> Optional[float]:
        """
        Parse an operand buffer as a float.

        :param str text: Operand text

        :return: Parsed value, or None if the text is empty or malformed
        :rtype: Optional[float]
        """
        try:
            return float(text)
        except ValueError:
            return None

    @staticmethod
    def format_result(value: float) -> str:
        """
        Format a computed value for the display, before truncation.

        :param float value: Computed value

        :return: ``"5"`` for 5.0, ``"2.5"`` for 2.5, ``"Infinity"`` / ``"NaN"`` for non-finite values
        :rtype: str
        """
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        text = repr(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text


_HANDLERS: dict[type, Callable[[CalculatorState, CalculatorAction], CalculatorState]] = {
    ClearAction: CalculatorReducer.clear,
    DigitAction: CalculatorReducer.enter_digit,
    DecimalAction: CalculatorReducer.enter_decimal,
    SetOperationAction: CalculatorReducer.enter_operation,
    DeleteAction: CalculatorReducer.delete,
    CalculateAction: CalculatorReducer.calculate,
}


def apply(state: CalculatorState, action: CalculatorAction) -> CalculatorState:
    """Module-level shortcut for :meth:`CalculatorReducer.apply`."""
    return CalculatorReducer.apply(state, action)
