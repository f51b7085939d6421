"""
Browser-driven correction service (DeepL Write by default).

Implements the ``CorrectionOracle`` capabilities on top of a remote WebDriver
session: text goes in through the clipboard, the output surface is read as
rendered text, and acceptance waits for Ctrl+<confirm_key> inside the page.
"""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

import pyperclip
from pyperclip import PyperclipException
from selenium import webdriver
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.common.by import By
from selenium.webdriver.common.keys import Keys
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait
from urllib3.exceptions import HTTPError as TransportError

from texcorrect.config.runtime import DriverConfig, OracleConfig
from texcorrect.core.logging_setup import get_logger
from texcorrect.exceptions import OracleSessionError

LOGGER = get_logger(__name__)

SCRIPT_TIMEOUT_S = 60 * 60 * 24
CLICK_WAIT_S = 10
CLICK_PAUSE_S = 0.5
PASTE_PAUSE_S = 0.1

CONFIRMATION_SCRIPT = """
const key = arguments[0];
const done = arguments[arguments.length - 1];
const handler = (event) => {
    if (event.key !== key || !event.ctrlKey) {
        return;
    }
    window.removeEventListener("keydown", handler);
    done();
};
window.addEventListener("keydown", handler);
"""


def _remote_driver(driver_cfg: DriverConfig) -> WebDriver:
    if driver_cfg.browser == "firefox":
        options = webdriver.FirefoxOptions()
    else:
        options = webdriver.ChromeOptions()
    return webdriver.Remote(command_executor=driver_cfg.endpoint, options=options)


class WebDriverOracle:
    def __init__(
        self,
        oracle_cfg: OracleConfig,
        driver_cfg: DriverConfig,
        driver_factory: Callable[[DriverConfig], WebDriver] = _remote_driver,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.oracle_cfg = oracle_cfg
        self.driver_cfg = driver_cfg
        self._driver_factory = driver_factory
        self._sleep = sleep
        self._driver: Optional[WebDriver] = None

    @property
    def driver(self) -> WebDriver:
        if self._driver is None:
            raise OracleSessionError("Session not prepared")
        return self._driver

    # --- Session ---

    def prepare_session(self) -> "WebDriverOracle":
        """Open the service page and select the configured mode options."""
        LOGGER.info("browser_opening", browser=self.driver_cfg.browser, url=self.driver_cfg.endpoint)
        try:
            self._driver = self._driver_factory(self.driver_cfg)
            self._driver.get(self.oracle_cfg.service_url)
            self._driver.set_script_timeout(SCRIPT_TIMEOUT_S)
            for selector in self.oracle_cfg.mode_selectors:
                self._press(selector)
        except WebDriverException as exc:
            self.close_session()
            raise OracleSessionError(f"Cannot prepare session: {exc.msg or exc}") from exc
        except (TransportError, OSError) as exc:
            # nothing listening at the driver URL
            self.close_session()
            raise OracleSessionError(f"Cannot reach driver at {self.driver_cfg.endpoint}: {exc}") from exc
        LOGGER.info("session_prepared", service=self.oracle_cfg.service_url)
        return self

    def close_session(self) -> None:
        driver, self._driver = self._driver, None
        if driver is None:
            return
        try:
            driver.quit()
        except WebDriverException as exc:
            LOGGER.warning("session_close_failed", error=str(exc))

    def __enter__(self) -> "WebDriverOracle":
        return self.prepare_session()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close_session()

    def _press(self, selector: str) -> None:
        button = WebDriverWait(self.driver, CLICK_WAIT_S).until(
            EC.element_to_be_clickable((By.CSS_SELECTOR, selector))
        )
        button.click()
        self._sleep(CLICK_PAUSE_S)

    # --- Surfaces ---

    @contextmanager
    def _surface(self, action: str) -> Iterator[None]:
        try:
            yield
        except WebDriverException as exc:
            raise OracleSessionError(f"{action} failed: {exc.msg or exc}") from exc

    def _find(self, selector: str) -> WebElement:
        with self._surface(f"Lookup of {selector}"):
            return self.driver.find_element(By.CSS_SELECTOR, selector)

    def _input(self) -> WebElement:
        return self._find(self.oracle_cfg.input_selector)

    def reset_input(self) -> None:
        surface = self._input()
        with self._surface("Clearing input"):
            surface.send_keys(Keys.CONTROL, "a")
            surface.send_keys(Keys.DELETE)

    def replace_input(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except PyperclipException as exc:
            raise OracleSessionError(f"Clipboard unavailable: {exc}") from exc
        surface = self._input()
        with self._surface("Pasting input"):
            surface.send_keys(Keys.CONTROL, "a")
            self._sleep(PASTE_PAUSE_S)
            surface.send_keys(Keys.CONTROL, "v")

    def read_output(self) -> str:
        surface = self._find(self.oracle_cfg.output_selector)
        # the element goes stale when the page re-renders the result
        with self._surface("Reading output"):
            return surface.text

    def await_confirmation(self) -> None:
        with self._surface("Confirmation wait"):
            self.driver.execute_async_script(CONFIRMATION_SCRIPT, self.oracle_cfg.confirm_key)
