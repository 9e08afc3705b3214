import logging
import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    # Keep every test away from the real platform data/config directories
    data = tmp_path / "user_data"
    config = tmp_path / "user_config"
    monkeypatch.setenv("PLAYERHUB_DATA_DIR", str(data))
    monkeypatch.setenv("PLAYERHUB_CONFIG_DIR", str(config))
    monkeypatch.delenv("PLAYERHUB_FORMAT", raising=False)
    monkeypatch.delenv("PLAYERHUB_LOG_LEVEL", raising=False)
    return {"data": data, "config": config}


@pytest.fixture(autouse=True)
def restore_root_logger():
    # configure_logging attaches handlers to the root logger; drop them after each test
    from playerhub import logging_config

    root = logging.getLogger()
    level = root.level
    yield
    for handler in logging_config._installed:
        root.removeHandler(handler)
        handler.close()
    logging_config._installed.clear()
    root.setLevel(level)
