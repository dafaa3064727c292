import pytest

from envstack.cli._logging import reset_logging_for_tests


@pytest.fixture(autouse=True)
def _reset_cli_logging():
    yield
    reset_logging_for_tests()
