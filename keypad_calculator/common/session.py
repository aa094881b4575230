"""Stateful holder that feeds actions through the reducer."""
from typing import Iterable

from pydantic import BaseModel, Field

from keypad_calculator.common.logger import logger
from keypad_calculator.common.operations import CalculatorAction
from keypad_calculator.common.reducer import CalculatorReducer
from keypad_calculator.common.state import CalculatorState


class CalculatorSession(BaseModel):
    """
    Holds the current calculator state on behalf of a host.

    The host forwards every key press to ``on_action`` and renders ``display``
    afterwards. The state itself is immutable: each action swaps in the value
    returned by the reducer.
    """

    state: CalculatorState = Field(default_factory=CalculatorState, description="Current calculator state")

    @property
    def display(self) -> str:
        """Current display line."""
        return self.state.display

    def on_action(self, action: CalculatorAction) -> CalculatorState:
        """
        Apply one action and keep the resulting state.

        :param CalculatorAction action: Key-press action

        :return: The new current state
        :rtype: CalculatorState
        """
        new_state = CalculatorReducer.apply(self.state, action)
        if new_state == self.state:
            logger.debug(f"🔢💤 Ignored {action.kind} on {self.display!r}")
        self.state = new_state
        return new_state

    def feed(self, actions: Iterable[CalculatorAction]) -> CalculatorState:
        """
        Apply several actions in order.

        :param Iterable[CalculatorAction] actions: Actions to apply

        :return: The state after the last action
        :rtype: CalculatorState
        """
        for action in actions:
            self.on_action(action)
        return self.state

    def reset(self) -> None:
        """Return to the initial state."""
        self.state = CalculatorState()
