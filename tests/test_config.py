# -*- coding: utf-8 -*-
"""配置与环境变量覆盖测试"""

import pytest

import config as config_module
from config import Config, get_config


def test_defaults(cpu_config):
    assert cpu_config.device == "cpu"
    assert cpu_config.top_k == 5
    assert cpu_config.crop_to_square is True


def test_device_auto_detected(monkeypatch):
    monkeypatch.delenv("IMGREC_DEVICE", raising=False)
    cfg = Config()
    assert cfg.device in ("mps", "cuda", "cpu")


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("IMGREC_DEVICE", "cpu")
    monkeypatch.setenv("IMGREC_TOP_K", "3")
    monkeypatch.setenv("IMGREC_CROP_TO_SQUARE", "false")
    monkeypatch.setenv("IMGREC_WEIGHTS", "none")
    cfg = Config()
    assert cfg.device == "cpu"
    assert cfg.top_k == 3
    assert cfg.crop_to_square is False
    assert cfg.weights is None


def test_get_config_is_singleton(monkeypatch):
    monkeypatch.setattr(config_module, "_config_instance", None)
    assert get_config() is get_config()


def test_top_k_below_one_rejected(monkeypatch):
    monkeypatch.delenv("IMGREC_TOP_K", raising=False)
    with pytest.raises(ValueError):
        Config(device="cpu", top_k=0)


def test_env_top_k_below_one_rejected(monkeypatch):
    monkeypatch.setenv("IMGREC_TOP_K", "-2")
    with pytest.raises(ValueError):
        Config(device="cpu")
