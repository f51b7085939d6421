from __future__ import annotations

from typing import Callable, List, Optional

import pytest


class FakeOracle:
    """In-memory correction surface.

    The output follows the input after ``lag`` reads, mimicking a service that
    needs a few polls before its rendered output changes.
    """

    def __init__(self, correct: Optional[Callable[[str], str]] = None, lag: int = 0, output: str = ""):
        self.correct = correct or (lambda text: f"<{text}>")
        self.lag = lag
        self.input = ""
        self.output = output
        self.calls: List[tuple] = []
        self._countdown = 0

    def reset_input(self) -> None:
        self.calls.append(("reset_input",))
        self.input = ""

    def replace_input(self, text: str) -> None:
        self.calls.append(("replace_input", text))
        self.input = text
        self._countdown = self.lag

    def read_output(self) -> str:
        self.calls.append(("read_output",))
        if self.input:
            if self._countdown > 0:
                self._countdown -= 1
            else:
                self.output = self.correct(self.input)
        return self.output

    def await_confirmation(self) -> None:
        self.calls.append(("await_confirmation",))

    def submitted(self) -> List[str]:
        return [call[1] for call in self.calls if call[0] == "replace_input"]


@pytest.fixture
def fake_oracle():
    return FakeOracle()


@pytest.fixture
def no_sleep():
    slept: List[float] = []
    return slept.append, slept
