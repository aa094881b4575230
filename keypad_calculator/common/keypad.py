"""Translate keypad labels typed as text into calculator actions."""
from typing import List

from keypad_calculator.common.operations import (
    CalculateAction,
    CalculatorAction,
    CalculatorOperation,
    ClearAction,
    DecimalAction,
    DeleteAction,
    DigitAction,
    SetOperationAction,
)


# Mapping of key labels (lower case) to the action they trigger
KEY_ACTIONS: dict[str, CalculatorAction] = {
    "+": SetOperationAction(operation=CalculatorOperation.ADD),
    "-": SetOperationAction(operation=CalculatorOperation.SUBTRACT),
    "x": SetOperationAction(operation=CalculatorOperation.MULTIPLY),
    "*": SetOperationAction(operation=CalculatorOperation.MULTIPLY),
    "/": SetOperationAction(operation=CalculatorOperation.DIVIDE),
    "=": CalculateAction(),
    "ac": ClearAction(),
    "c": ClearAction(),
    "del": DeleteAction(),
    "<": DeleteAction(),
}


class KeypadParser:
    """
    Parse a line of keypad labels into actions.

    Labels are whitespace-separated and case-insensitive. A run of digits and
    decimal points is one press per character, so ``12.5 + 3 =`` is the same
    as ``1 2 . 5 + 3 =``.

    Examples:
        - ``AC 7 x 6 =``: Clear, Digit 7, Multiply, Digit 6, Calculate
        - ``9 Del 8``: Digit 9, Delete, Digit 8
    """

    @staticmethod
    def tokenize(line: str) -> List[str]:
        """
        Split a line of keypad labels into tokens.

        :param str line: Key labels separated by whitespace

        :return: List of tokens
        :rtype: List[str]
        """
        return line.split()

    @staticmethod
    def _is_number_run(token: str) -> bool:
        """
        Determine if a token is a run of digit and decimal point keys.

        :param str token: Token string

        :return: True if every character is a digit or ``.``
        :rtype: bool
        """
        return all(char in "0123456789." for char in token)

    @staticmethod
    def _expand_number_run(token: str) -> List[CalculatorAction]:
        """Turn ``12.5`` into Digit 1, Digit 2, Decimal, Digit 5."""
        return [
            DecimalAction() if char == "." else DigitAction(value=int(char))
            for char in token
        ]

    @staticmethod
    def parse(line: str) -> List[CalculatorAction]:
        """
        Convert a line of keypad labels into the actions it presses.

        :param str line: Key labels separated by whitespace

        :return: Actions in the order they are pressed
        :rtype: List[CalculatorAction]
        :raises ValueError: If a label does not match any key
        """
        actions: List[CalculatorAction] = []
        for token in KeypadParser.tokenize(line):
            if KeypadParser._is_number_run(token):
                actions.extend(KeypadParser._expand_number_run(token))
                continue

            action = KEY_ACTIONS.get(token.lower())
            if action is None:
                raise ValueError(f"Unknown key: {token!r}")
            actions.append(action)

        return actions
