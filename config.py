# -*- coding: utf-8 -*-
"""
应用配置。
集中保存设备、网络权重、Top-K、日志等可调参数；
所有字段均可通过 IMGREC_ 前缀的环境变量覆盖（如 IMGREC_DEVICE=cpu）。
"""

import os
from dataclasses import dataclass, fields
from typing import Optional

from models.compute import detect_device

ENV_PREFIX = "IMGREC_"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    """
    全局配置。
    - device：计算设备 "mps" / "cuda" / "cpu"，默认自动检测
    - weights：torchvision 权重名，"none" 表示不加载预训练权重
    - top_k：预测结果显示的条数
    """

    device: str = ""
    weights: Optional[str] = "IMAGENET1K_V1"
    top_k: int = 5
    # 与拍照/相册「允许编辑」一致：选图后裁成居中正方形
    crop_to_square: bool = True
    log_level: str = "INFO"
    log_file: Optional[str] = None
    window_width: int = 480
    window_height: int = 800

    def __post_init__(self):
        self._apply_env_overrides()
        if not self.device:
            self.device = detect_device()
        if self.weights is not None and self.weights.lower() in ("", "none"):
            self.weights = None
        if self.top_k < 1:
            raise ValueError(f"top_k 必须大于等于 1，实际为 {self.top_k}")

    def _apply_env_overrides(self) -> None:
        """读取 IMGREC_<字段名大写> 环境变量并按字段类型转换后覆盖。"""
        converters = {
            "device": str,
            "weights": str,
            "top_k": int,
            "crop_to_square": _parse_bool,
            "log_level": str,
            "log_file": str,
            "window_width": int,
            "window_height": int,
        }
        for f in fields(self):
            env_value = os.environ.get(f"{ENV_PREFIX}{f.name.upper()}")
            if env_value is not None:
                setattr(self, f.name, converters[f.name](env_value))


_config_instance: Optional[Config] = None


def get_config() -> Config:
    """返回全局单例 Config，首次调用时创建。"""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance
