"""Lifecycle of the chromedriver/geckodriver child process."""
from __future__ import annotations

import socket
import subprocess
import time
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

from texcorrect.core.logging_setup import get_logger
from texcorrect.exceptions import OracleSessionError

LOGGER = get_logger(__name__)


class DriverProcess:
    """
    Spawns the WebDriver executable and guarantees it is stopped again.

    Used as a context manager around the whole run. Without a binary the
    process is assumed to be managed elsewhere and nothing is spawned.
    """

    def __init__(
        self,
        binary: Optional[Path],
        url: str,
        startup_timeout: float = 10.0,
        stop_timeout: float = 5.0,
    ):
        self.binary = binary
        self.url = url
        self.startup_timeout = startup_timeout
        self.stop_timeout = stop_timeout
        self._process: Optional[subprocess.Popen] = None

    @property
    def port(self) -> int:
        parsed = urlparse(self.url)
        return parsed.port or 4444

    @property
    def host(self) -> str:
        return urlparse(self.url).hostname or "localhost"

    def command(self) -> List[str]:
        return [str(self.binary), f"--port={self.port}"]

    def start(self) -> None:
        if self.binary is None:
            LOGGER.info("driver_external", url=self.url)
            return

        LOGGER.info("driver_starting", binary=str(self.binary), port=self.port)
        try:
            self._process = subprocess.Popen(
                self.command(),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as exc:
            raise OracleSessionError(f"Cannot start driver {self.binary}: {exc}") from exc

        try:
            self._wait_until_listening()
        except OracleSessionError:
            self.stop()
            raise
        LOGGER.info("driver_started", pid=self._process.pid)

    def _wait_until_listening(self) -> None:
        deadline = time.monotonic() + self.startup_timeout
        while time.monotonic() < deadline:
            if self._process is not None and self._process.poll() is not None:
                raise OracleSessionError(
                    f"Driver exited during startup with code {self._process.returncode}"
                )
            try:
                with socket.create_connection((self.host, self.port), timeout=0.5):
                    return
            except OSError:
                time.sleep(0.2)
        raise OracleSessionError(
            f"Driver did not listen on {self.host}:{self.port} within {self.startup_timeout}s"
        )

    def stop(self) -> None:
        process = self._process
        if process is None:
            return
        self._process = None
        if process.poll() is None:
            process.terminate()
            try:
                process.wait(timeout=self.stop_timeout)
            except subprocess.TimeoutExpired:
                LOGGER.warning("driver_kill", pid=process.pid)
                process.kill()
                process.wait()
        LOGGER.info("driver_stopped", pid=process.pid)

    def __enter__(self) -> "DriverProcess":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
