"""
Correction oracle client.

One batch goes through an explicit state machine:

    IDLE -> SUBMITTED -> POLLING -> STABILIZED -> AWAITING_CONFIRMATION -> DONE
                           ^   |
                           |   v
                          RETRYING

Every transition is a method returning the next state, so a watchdog or a
cancellation check can be layered on ``CorrectionClient.advance`` without
touching the handlers. Polling and retrying have no upper bound, and the
confirmation wait blocks until the human accepts the output.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Protocol, runtime_checkable

from texcorrect.core.logging_setup import get_logger

LOGGER = get_logger(__name__)


@runtime_checkable
class CorrectionOracle(Protocol):
    """Capabilities the client needs from the correction service surface."""

    def reset_input(self) -> None: ...

    def replace_input(self, text: str) -> None: ...

    def read_output(self) -> str: ...

    def await_confirmation(self) -> None: ...


class OracleState(str, Enum):
    IDLE = "IDLE"
    SUBMITTED = "SUBMITTED"
    POLLING = "POLLING"
    RETRYING = "RETRYING"
    STABILIZED = "STABILIZED"
    AWAITING_CONFIRMATION = "AWAITING_CONFIRMATION"
    DONE = "DONE"


@dataclass(frozen=True)
class PollingPolicy:
    interval: float = 0.5  # seconds between samples
    attempts: int = 30  # samples per round

    @classmethod
    def from_millis(cls, interval_ms: int, attempts: int) -> "PollingPolicy":
        return cls(interval=interval_ms / 1000.0, attempts=attempts)


@dataclass
class CorrectionCycle:
    """Mutable bookkeeping for one batch on its way through the state machine."""

    batch: str
    state: OracleState = OracleState.IDLE
    previous_output: Optional[str] = None
    rounds: int = 0
    result: Optional[str] = None
    history: List[OracleState] = field(default_factory=list)


class CorrectionClient:
    def __init__(
        self,
        oracle: CorrectionOracle,
        policy: Optional[PollingPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.oracle = oracle
        self.policy = policy or PollingPolicy()
        self._sleep = sleep
        self.round_trips = 0
        self._handlers: Dict[OracleState, Callable[[CorrectionCycle], OracleState]] = {
            OracleState.IDLE: self._submit,
            OracleState.SUBMITTED: self._begin_polling,
            OracleState.POLLING: self._poll,
            OracleState.RETRYING: self._retry,
            OracleState.STABILIZED: self._await_confirmation,
            OracleState.AWAITING_CONFIRMATION: self._collect,
        }

    def correct(self, batch: str) -> str:
        """Drive one batch to DONE and return the accepted output text."""
        cycle = CorrectionCycle(batch=batch)
        while cycle.state is not OracleState.DONE:
            self.advance(cycle)
        return cycle.result or ""

    def advance(self, cycle: CorrectionCycle) -> OracleState:
        handler = self._handlers[cycle.state]
        cycle.state = handler(cycle)
        cycle.history.append(cycle.state)
        return cycle.state

    def _write_input(self, text: str) -> None:
        self.oracle.reset_input()
        self.oracle.replace_input(text)

    def _submit(self, cycle: CorrectionCycle) -> OracleState:
        if not cycle.batch.strip():
            cycle.result = ""
            return OracleState.DONE
        cycle.previous_output = self.oracle.read_output()
        self._write_input(cycle.batch)
        self.round_trips += 1
        LOGGER.info("batch_submitted", chars=len(cycle.batch))
        return OracleState.SUBMITTED

    def _begin_polling(self, cycle: CorrectionCycle) -> OracleState:
        cycle.rounds += 1
        return OracleState.POLLING

    def _poll(self, cycle: CorrectionCycle) -> OracleState:
        attempts = self.policy.attempts
        for attempt in range(attempts):
            LOGGER.debug("waiting_for_change", attempt=attempt + 1, attempts=attempts)
            self._sleep(self.policy.interval)
            current = self.oracle.read_output()
            if current != cycle.previous_output:
                return OracleState.STABILIZED
            cycle.previous_output = current
        return OracleState.RETRYING

    def _retry(self, cycle: CorrectionCycle) -> OracleState:
        LOGGER.warning("retrying_batch", round=cycle.rounds, chars=len(cycle.batch))
        self._write_input(cycle.batch)
        return OracleState.SUBMITTED

    def _await_confirmation(self, cycle: CorrectionCycle) -> OracleState:
        LOGGER.info("awaiting_confirmation")
        self.oracle.await_confirmation()
        return OracleState.AWAITING_CONFIRMATION

    def _collect(self, cycle: CorrectionCycle) -> OracleState:
        cycle.result = self.oracle.read_output()
        LOGGER.info("batch_corrected", chars=len(cycle.result))
        return OracleState.DONE
