import logging

from khadmaty_api.app.core.logging_config import setup_logging


def test_setup_logging_writes_to_log_file(tmp_path, monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    logfile = tmp_path / "khadmaty.log"

    setup_logging("debug", str(logfile))
    assert root.level == logging.DEBUG
    added = list(root.handlers)
    assert len(added) == 2

    setup_logging("info", None)
    assert root.handlers == added
    assert root.level == logging.DEBUG

    logging.getLogger("khadmaty_api.test").info("حجز جديد")
    for handler in added:
        handler.flush()
    assert "[INFO] khadmaty_api.test: حجز جديد" in logfile.read_text(encoding="utf-8")
    for handler in added:
        handler.close()
