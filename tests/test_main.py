# -*- coding: utf-8 -*-
"""命令行参数与日志配置测试"""

import logging
from pathlib import Path

import pytest

from logging_config import setup_logging
from main import apply_args, parse_args


def test_parse_args_and_apply(cpu_config):
    args = parse_args(["img.png", "--top-k", "3", "--weights", "none", "--device", "cpu"])
    assert args.image == Path("img.png")
    cpu_config.weights = "IMAGENET1K_V1"

    config = apply_args(cpu_config, args)
    assert config is cpu_config
    assert config.top_k == 3
    assert config.weights is None
    assert config.device == "cpu"


def test_parse_args_defaults_leave_config(cpu_config):
    args = parse_args([])
    assert args.image is None
    config = apply_args(cpu_config, args)
    assert config.top_k == 5
    assert config.log_level == "INFO"


def test_log_options(cpu_config, tmp_path):
    log_path = str(tmp_path / "app.log")
    config = apply_args(cpu_config, parse_args(["--log-level", "DEBUG", "--log-file", log_path]))
    assert config.log_level == "DEBUG"
    assert config.log_file == log_path


@pytest.mark.parametrize("value", ["0", "-1", "abc"])
def test_top_k_must_be_positive_int(value):
    with pytest.raises(SystemExit):
        parse_args(["--top-k", value])


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_with_file(tmp_path, restore_root_logger):
    log_path = tmp_path / "x.log"
    setup_logging("DEBUG", str(log_path))
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert any(isinstance(h, logging.FileHandler) for h in root.handlers)

    logging.getLogger("tests").debug("hello log")
    for handler in root.handlers:
        handler.flush()
    assert "hello log" in log_path.read_text(encoding="utf-8")


def test_setup_logging_unknown_level_falls_back_to_info(restore_root_logger):
    setup_logging("NOPE")
    root = logging.getLogger()
    assert root.level == logging.INFO
    assert not any(isinstance(h, logging.FileHandler) for h in root.handlers)
