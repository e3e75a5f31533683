# -*- coding: utf-8 -*-
"""
Model 层：应用核心数据与领域对象。
- AppState：全局应用状态（显示图片、输入纹理、预测标签）
- ComputeDevice / CommandQueue / CommandBuffer：计算设备与一次性提交的命令缓冲区
- TextureLoader / SourceTexture：图片解码并上传为设备张量
- Inception3Net：Inception v3 分类网络
"""

from .app_state import AppState
from .compute import CommandBuffer, CommandBufferStatus, CommandQueue, ComputeDevice, detect_device
from .inception3_net import Inception3Net, Prediction
from .source_texture import SourceTexture, TextureLoader, TextureLoadError, crop_center_square, load_rgb_image

__all__ = [
    "AppState",
    "CommandBuffer",
    "CommandBufferStatus",
    "CommandQueue",
    "ComputeDevice",
    "detect_device",
    "Inception3Net",
    "Prediction",
    "SourceTexture",
    "TextureLoader",
    "TextureLoadError",
    "crop_center_square",
    "load_rgb_image",
]
