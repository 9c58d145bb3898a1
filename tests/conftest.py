import logging

import pytest

from config import ConfigurationManager
from giro_scanner.utils.logger import LOGGER_NAMESPACE

FULL_LINE = "H  #79927398713  #  100  00 8 >  90001193#41#"


@pytest.fixture(autouse=True)
def _isolate_config_and_logging():
    """Fresh configuration singleton and default logging for every test."""
    ConfigurationManager.reset()
    yield
    ConfigurationManager.reset()

    root = logging.getLogger(LOGGER_NAMESPACE)
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    root.propagate = True


@pytest.fixture
def full_line():
    return FULL_LINE


@pytest.fixture
def fragments_file(tmp_path):
    """Write fragments, one per line, and return the file path."""
    def _write(*fragments):
        path = tmp_path / "fragments.txt"
        path.write_text("\n".join(fragments) + "\n", encoding="utf-8")
        return path
    return _write
