import pytest
from _pytest.config import Config
from _pytest.config.argparsing import Parser
from _pytest.nodes import Item


def pytest_addoption(parser: Parser) -> None:
    parser.addoption(
        "--functional", action="store_true",
        help="run tests talking to the real GitHub api (marker @functional)")


def pytest_configure(config: Config) -> None:
    config.addinivalue_line(
        "markers", "functional: test needs network access to GitHub")


def pytest_runtest_setup(item: Item) -> None:
    if "functional" in item.keywords and not item.config.getoption("--functional"):
        pytest.skip("need --functional option to run this test")
