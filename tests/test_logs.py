import logging
from logging.handlers import RotatingFileHandler

from carnie_dashboard.logs import setup_logging


def test_creates_directory_and_writes(tmp_path):
    path = tmp_path / "state" / "dashboard.log"
    handler = setup_logging(str(path), "INFO")

    logging.getLogger("carnie_dashboard.data").info("loaded %d issues", 3)
    handler.flush()

    assert isinstance(handler, RotatingFileHandler)
    assert "[INFO] [carnie_dashboard.data] loaded 3 issues" in path.read_text(encoding="utf-8")


def test_second_call_reuses_handler(tmp_path):
    first = setup_logging(str(tmp_path / "a.log"))
    second = setup_logging(str(tmp_path / "b.log"))

    assert first is second
    assert not (tmp_path / "b.log").exists()


def test_level_filters_records(tmp_path):
    path = tmp_path / "dashboard.log"
    handler = setup_logging(str(path), "WARNING")

    logging.getLogger("carnie_dashboard.navigator").debug("applied snapshot")
    handler.flush()

    assert "applied snapshot" not in path.read_text(encoding="utf-8")


def test_empty_path_disables_file_logging():
    assert setup_logging("", "DEBUG") is None
