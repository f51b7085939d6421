"""Browser and driver-process collaborators for the correction service."""

from .process import DriverProcess
from .webdriver import WebDriverOracle

__all__ = ["DriverProcess", "WebDriverOracle"]
