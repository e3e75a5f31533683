# -*- coding: utf-8 -*-
"""
Inception v3 分类网络（Model）。
基于 torchvision 的 Inception v3（ImageNet 预训练），
把缩放、归一化、前向推理与 softmax 编码进 CommandBuffer，提交后读取 Top-K 标签。
"""

import logging
from typing import List, NamedTuple, Optional

import torch
import torch.nn.functional as F
from torchvision.models import Inception_V3_Weights, inception_v3

from models.compute import CommandBuffer, CommandBufferStatus, CommandQueue
from models.source_texture import SourceTexture

logger = logging.getLogger(__name__)

# ImageNet 归一化参数，与预训练权重一致
IMAGENET_MEAN = (0.485, 0.456, 0.406)
IMAGENET_STD = (0.229, 0.224, 0.225)


class Prediction(NamedTuple):
    label: str
    probability: float


def imagenet_categories() -> List[str]:
    """ImageNet-1k 的 1000 个类别名，来自 torchvision 权重元数据（无需下载）。"""
    return list(Inception_V3_Weights.IMAGENET1K_V1.meta["categories"])


class Inception3Net:
    """
    Inception v3 网络。
    - weights 为 torchvision 权重名（如 "IMAGENET1K_V1"），None 时构建未训练网络
    - forward 只负责编码，真正执行发生在 CommandBuffer.commit
    - get_label 只有在最近一次缓冲区 COMPLETED 后才可调用
    """

    INPUT_SIZE = 299

    def __init__(
        self,
        command_queue: CommandQueue,
        weights: Optional[str] = "IMAGENET1K_V1",
        top_k: int = 5,
    ):
        self._device = command_queue.device.torch_device
        if top_k < 1:
            raise ValueError(f"top_k 必须大于等于 1，实际为 {top_k}")
        self._top_k = top_k
        self._categories = imagenet_categories()

        if weights is not None:
            logger.info("加载 Inception v3 权重：%s（设备 %s）", weights, self._device)
            # 预训练权重自带 transform_input，输入按 ImageNet 归一化即可
            model = inception_v3(weights=Inception_V3_Weights[weights])
        else:
            logger.info("构建未加载权重的 Inception v3（设备 %s）", self._device)
            model = inception_v3(
                weights=None,
                aux_logits=False,
                init_weights=False,
                num_classes=len(self._categories),
            )
        self._model = model.to(self._device).eval()

        self._mean = torch.tensor(IMAGENET_MEAN, device=self._device).view(1, 3, 1, 1)
        self._std = torch.tensor(IMAGENET_STD, device=self._device).view(1, 3, 1, 1)
        self._probabilities: Optional[torch.Tensor] = None
        self._last_buffer: Optional[CommandBuffer] = None
        logger.info("Inception v3 就绪。")

    @property
    def categories(self) -> List[str]:
        return self._categories

    def forward(self, command_buffer: CommandBuffer, source_texture: Optional[SourceTexture]) -> None:
        """把一次完整推理编码进 command_buffer，输入为 source_texture。"""
        if source_texture is None:
            raise ValueError("未加载输入纹理。")
        self._probabilities = None
        self._last_buffer = command_buffer
        command_buffer.encode(self._encode_layers, source_texture.tensor)

    def _encode_layers(self, texture: torch.Tensor) -> None:
        x = texture.to(self._device).unsqueeze(0)
        # MPS 不支持抗锯齿插值
        x = F.interpolate(
            x,
            size=(self.INPUT_SIZE, self.INPUT_SIZE),
            mode="bilinear",
            align_corners=False,
            antialias=self._device.type != "mps",
        )
        x = (x - self._mean) / self._std
        logits = self._model(x)
        self._probabilities = F.softmax(logits, dim=1)[0]

    def top_predictions(self, k: Optional[int] = None) -> List[Prediction]:
        """按概率降序返回 Top-K 预测。"""
        if (
            self._probabilities is None
            or self._last_buffer is None
            or self._last_buffer.status is not CommandBufferStatus.COMPLETED
        ):
            raise RuntimeError("尚未完成推理，无法读取预测结果。")
        if k is None:
            k = self._top_k
        if k < 1:
            raise ValueError(f"k 必须大于等于 1，实际为 {k}")
        k = min(k, self._probabilities.numel())
        probs, indices = torch.topk(self._probabilities, k)
        return [
            Prediction(self._categories[int(i)], float(p))
            for p, i in zip(probs.cpu().tolist(), indices.cpu().tolist())
        ]

    def get_label(self) -> str:
        """Top-K 预测文本，每行一条：「类别: 百分比」。"""
        return "\n".join(f"{p.label}: {p.probability * 100:.2f}%" for p in self.top_predictions())
