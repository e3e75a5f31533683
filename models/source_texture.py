# -*- coding: utf-8 -*-
"""
输入纹理封装（Model）。
负责把用户选择的图片（路径、PIL 图像或 NumPy 数组）解码为 RGB，
再上传为计算设备上的张量，不包含 UI 逻辑。
"""

from pathlib import Path
from typing import Union

import numpy as np
import torch
from PIL import Image, ImageOps

from models.compute import ComputeDevice

ImageSource = Union[str, Path, Image.Image, np.ndarray]


class TextureLoadError(Exception):
    """图片无法解码为纹理。"""


def load_rgb_image(source: ImageSource) -> Image.Image:
    """
    将各种图片来源统一解码为 RGB 的 PIL 图像。
    - 路径：用 Pillow 打开并完整解码，按 EXIF 方向标签转正
    - NumPy：支持 (H, W) 灰度、(H, W, 3) RGB、(H, W, 4) RGBA，dtype 为 uint8
    - PIL 图像：任意模式转换为 RGB
    """
    try:
        if isinstance(source, (str, Path)):
            with Image.open(source) as img:
                # 手机照片常带 EXIF 方向标签，需先转正再显示与识别
                image = ImageOps.exif_transpose(img).convert("RGB")
        elif isinstance(source, np.ndarray):
            if source.dtype != np.uint8:
                raise ValueError(f"不支持的数组类型 {source.dtype}，需要 uint8。")
            if source.ndim not in (2, 3):
                raise ValueError(f"不支持的数组维度 {source.shape}。")
            if source.ndim == 3 and source.shape[2] not in (3, 4):
                raise ValueError(f"不支持的通道数 {source.shape[2]}。")
            image = Image.fromarray(np.ascontiguousarray(source)).convert("RGB")
        elif isinstance(source, Image.Image):
            image = source.convert("RGB")
        else:
            raise TextureLoadError(f"不支持的图片来源类型：{type(source).__name__}")
    except (OSError, ValueError, Image.DecompressionBombError, MemoryError) as e:
        raise TextureLoadError(f"无法解码图片：{e}") from e

    if image.width == 0 or image.height == 0:
        raise TextureLoadError("图片尺寸为空。")
    return image


def crop_center_square(image: Image.Image) -> Image.Image:
    """按短边居中裁剪为正方形。"""
    width, height = image.size
    side = min(width, height)
    left = (width - side) // 2
    top = (height - side) // 2
    return image.crop((left, top, left + side, top + side))


class SourceTexture:
    """
    设备上的输入纹理。
    - tensor 维度为 (3, H, W)，float32，取值 [0, 1]
    """

    def __init__(self, tensor: torch.Tensor):
        if tensor.ndim != 3 or tensor.shape[0] != 3:
            raise ValueError(f"纹理张量应为 (3, H, W)，实际为 {tuple(tensor.shape)}")
        self.tensor = tensor

    @property
    def height(self) -> int:
        return int(self.tensor.shape[1])

    @property
    def width(self) -> int:
        return int(self.tensor.shape[2])

    @property
    def device(self) -> torch.device:
        return self.tensor.device

    def __repr__(self) -> str:
        return f"SourceTexture({self.width}x{self.height}, device={self.device})"


class TextureLoader:
    """把图片上传为 SourceTexture，每次调用生成一个新纹理。"""

    def __init__(self, device: ComputeDevice):
        self.device = device

    def new_texture(self, source: ImageSource) -> SourceTexture:
        image = load_rgb_image(source)
        # (H, W, 3) uint8 -> (3, H, W)，先以 uint8 上传再转 float
        array = np.array(image, dtype=np.uint8)
        tensor = torch.from_numpy(array).permute(2, 0, 1).contiguous()
        tensor = tensor.to(self.device.torch_device).float().div_(255.0)
        return SourceTexture(tensor)
