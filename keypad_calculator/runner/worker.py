"""Worker process replaying one line of key presses."""
from multiprocessing.connection import Connection
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from keypad_calculator.common.keypad import KeypadParser
from keypad_calculator.common.logger import logger
from keypad_calculator.common.session import CalculatorSession


class ReplayWorker(BaseModel):
    """
    Worker responsible for replaying a single key sequence from a fresh calculator.

    Lifecycle:
        - Spawned by the batch replayer
        - Receives one key sequence only
        - Sends the final display or an error through a Pipe
        - Terminates immediately afterwards
    """

    # Allow arbitrary types like multiprocessing.Connection
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    conn: Connection = Field(..., description="Connection object for sending the outcome back")
    keys: str = Field(..., description="Whitespace-separated keypad labels")
    line_number: int = Field(..., ge=1, description="Line number in the input file")

    @field_validator("keys")
    def keys_must_not_be_empty(cls, v: str) -> str:
        """Ensure that the key sequence is not empty."""
        if not v.strip():
            raise ValueError("Key sequence cannot be empty")
        return v

    def run(self) -> None:
        """
        Replay the key sequence and send the display or error through the pipe.

        :return: None
        """
        logger.info(f"👷🏁 Worker started on line {self.line_number}: {self.keys}")

        display: Union[str, None] = None

        try:
            session = CalculatorSession()
            session.feed(KeypadParser.parse(self.keys))
            display = session.display

            self.conn.send(
                {
                    "line": self.line_number,
                    "keys": self.keys,
                    "display": display,
                }
            )

        except ValueError as exc:
            logger.error(f"👷❌ Worker failed on line {self.line_number}: {exc}")

            self.conn.send(
                {
                    "line": self.line_number,
                    "keys": self.keys,
                    "error": str(exc),
                }
            )

        finally:
            self.conn.close()

            if display is not None:
                logger.info(f"👷✅ Worker finished on line {self.line_number}: {display!r}")
