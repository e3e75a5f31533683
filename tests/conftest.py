# -*- coding: utf-8 -*-
"""
测试公共夹具：无界面 Qt 平台、QApplication、CPU 配置与假网络。
"""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import numpy as np
import pytest
from PIL import Image
from PySide6.QtWidgets import QApplication

from config import Config
from models import CommandBuffer


class FakeNet:
    """代替 Inception3Net：只记录编码的纹理，提交后才产生标签。"""

    def __init__(self, label: str = "tabby: 87.50%\ntiger cat: 10.00%"):
        self.label = label
        self.forward_calls = 0
        self.seen_textures = []
        self._last_buffer = None
        self._ran = False

    def forward(self, command_buffer: CommandBuffer, source_texture) -> None:
        if source_texture is None:
            raise ValueError("未加载输入纹理。")
        self.forward_calls += 1
        self._ran = False
        self._last_buffer = command_buffer
        command_buffer.encode(self._run, source_texture)

    def _run(self, source_texture) -> None:
        self.seen_textures.append(source_texture)
        self._ran = True

    def get_label(self) -> str:
        if not self._ran or self._last_buffer.status.name != "COMPLETED":
            raise RuntimeError("尚未完成推理，无法读取预测结果。")
        return self.label


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def cpu_config(monkeypatch):
    for key in list(os.environ):
        if key.startswith("IMGREC_"):
            monkeypatch.delenv(key)
    return Config(device="cpu", weights=None, top_k=5)


@pytest.fixture
def fake_net():
    return FakeNet()


@pytest.fixture
def rgb_image():
    # 左半红、右半蓝的 40x20 图片，便于检查裁剪
    arr = np.zeros((20, 40, 3), dtype=np.uint8)
    arr[:, :20, 0] = 255
    arr[:, 20:, 2] = 255
    return Image.fromarray(arr)


@pytest.fixture
def image_file(tmp_path, rgb_image):
    path = tmp_path / "sample.png"
    rgb_image.save(path)
    return path
