import json
import logging
import logging.handlers

import pytest

from utils import load_config, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_load_config_fills_missing_sections(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"simulation_parameters": {"seed": 3}}))
    config = load_config(str(path))
    assert config["simulation_parameters"] == {"seed": 3}
    assert config["run_control"] == {}
    assert config["logging"] == {}


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.json"))


def test_load_config_malformed_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(json.JSONDecodeError):
        load_config(str(path))


def test_setup_logging_adds_console_and_rotating_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "run.log"
    setup_logging({"logging": {"level": "debug", "log_file": str(log_file)}})

    root = restore_root_logger
    assert root.level == logging.DEBUG
    assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)
    assert log_file.exists()
    assert "Logging system initialized." in log_file.read_text()


def test_setup_logging_without_file(restore_root_logger):
    setup_logging({"logging": {"level": "WARNING", "log_file": None}})

    root = restore_root_logger
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
    assert not isinstance(root.handlers[0], logging.FileHandler)


def test_shipped_config_is_valid():
    from pathlib import Path
    from settings import SimulationConfig

    config = load_config(str(Path(__file__).resolve().parents[1] / "config.json"))
    settings = SimulationConfig.from_dict(config["simulation_parameters"])
    assert settings.particle_count == 400


def test_setup_logging_applies_format_and_rotation(tmp_path, restore_root_logger):
    log_file = tmp_path / "run.log"
    setup_logging({"logging": {"format": "%(levelname)s|%(message)s", "log_file": str(log_file)}})

    file_handlers = [
        h for h in restore_root_logger.handlers
        if isinstance(h, logging.handlers.RotatingFileHandler)
    ]
    assert len(file_handlers) == 1
    assert file_handlers[0].maxBytes == 1024 * 1024
    assert file_handlers[0].backupCount == 5
    assert "INFO|Logging system initialized." in log_file.read_text()
