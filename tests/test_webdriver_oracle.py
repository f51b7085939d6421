from unittest.mock import MagicMock, PropertyMock, call, patch

import pytest
from selenium.common.exceptions import StaleElementReferenceException, WebDriverException
from selenium.webdriver.common.by import By
from selenium.webdriver.common.keys import Keys
from urllib3.exceptions import MaxRetryError

from texcorrect.config.runtime import DriverConfig, OracleConfig
from texcorrect.core.client import CorrectionOracle
from texcorrect.drivers.webdriver import CONFIRMATION_SCRIPT, SCRIPT_TIMEOUT_S, WebDriverOracle
from texcorrect.exceptions import OracleSessionError


@pytest.fixture
def driver():
    mock_driver = MagicMock()
    element = mock_driver.find_element.return_value
    element.is_displayed.return_value = True
    element.is_enabled.return_value = True
    element.text = "corrected output"
    return mock_driver


@pytest.fixture
def oracle(driver):
    cfg = OracleConfig(mode_selectors=["#style", "#option"], confirm_key="b")
    return WebDriverOracle(cfg, DriverConfig(), driver_factory=lambda _: driver, sleep=lambda _: None)


def test_implements_oracle_protocol(oracle):
    assert isinstance(oracle, CorrectionOracle)


def test_prepare_session_opens_service_and_selects_modes(oracle, driver):
    with oracle:
        driver.get.assert_called_once_with("https://www.deepl.com/write")
        driver.set_script_timeout.assert_called_once_with(SCRIPT_TIMEOUT_S)
        clicked = [c.args for c in driver.find_element.call_args_list]
        assert (By.CSS_SELECTOR, "#style") in clicked
        assert (By.CSS_SELECTOR, "#option") in clicked
        assert driver.find_element.return_value.click.call_count == 2
    driver.quit.assert_called_once()


def test_navigation_failure_raises_and_closes(driver):
    driver.get.side_effect = WebDriverException("no route")
    oracle = WebDriverOracle(OracleConfig(), DriverConfig(), driver_factory=lambda _: driver)

    with pytest.raises(OracleSessionError):
        oracle.prepare_session()
    driver.quit.assert_called_once()


def test_surfaces_require_session():
    oracle = WebDriverOracle(OracleConfig(), DriverConfig(), driver_factory=MagicMock())
    with pytest.raises(OracleSessionError):
        oracle.read_output()


@patch("texcorrect.drivers.webdriver.pyperclip")
def test_replace_input_pastes_from_clipboard(mock_clip, oracle, driver):
    oracle.prepare_session()
    surface = driver.find_element.return_value
    surface.send_keys.reset_mock()

    oracle.replace_input("Some text.")

    mock_clip.copy.assert_called_once_with("Some text.")
    assert surface.send_keys.call_args_list == [
        call(Keys.CONTROL, "a"),
        call(Keys.CONTROL, "v"),
    ]


def test_reset_input_selects_and_deletes(oracle, driver):
    oracle.prepare_session()
    surface = driver.find_element.return_value
    surface.send_keys.reset_mock()

    oracle.reset_input()

    assert surface.send_keys.call_args_list == [call(Keys.CONTROL, "a"), call(Keys.DELETE)]


def test_read_output_returns_element_text(oracle):
    oracle.prepare_session()
    assert oracle.read_output() == "corrected output"


def test_await_confirmation_injects_key_listener(oracle, driver):
    oracle.prepare_session()
    oracle.await_confirmation()
    driver.execute_async_script.assert_called_once_with(CONFIRMATION_SCRIPT, "b")


def test_missing_element_raises_session_error(oracle, driver):
    oracle.prepare_session()
    driver.find_element.side_effect = WebDriverException("gone")
    with pytest.raises(OracleSessionError):
        oracle.read_output()


@pytest.mark.parametrize(
    "error",
    [MaxRetryError(None, "/session", reason=None), ConnectionRefusedError(111, "Connection refused")],
)
def test_unreachable_driver_raises_session_error(error):
    def factory(_):
        raise error

    oracle = WebDriverOracle(OracleConfig(), DriverConfig(browser="firefox"), driver_factory=factory)
    with pytest.raises(OracleSessionError, match="localhost:4444"):
        oracle.prepare_session()


def test_send_keys_failure_raises_session_error(oracle, driver):
    driver.find_element.return_value.send_keys.side_effect = WebDriverException("element not interactable")
    with oracle:
        with pytest.raises(OracleSessionError):
            oracle.reset_input()
        with patch("texcorrect.drivers.webdriver.pyperclip"):
            with pytest.raises(OracleSessionError):
                oracle.replace_input("text")


def test_stale_output_element_raises_session_error(oracle, driver):
    with oracle:
        stale = MagicMock()
        type(stale).text = PropertyMock(side_effect=StaleElementReferenceException("stale element"))
        driver.find_element.return_value = stale
        with pytest.raises(OracleSessionError):
            oracle.read_output()
