# -*- coding: utf-8 -*-
"""
计算设备封装（Model）。
- ComputeDevice：包装 torch 设备，提供可用性检查与同步
- CommandQueue / CommandBuffer：把一次推理的各步骤编码进缓冲区，
  提交后在 CPU 端阻塞等待设备完成
"""

import enum
import logging
from typing import Any, Callable, List, Tuple

import torch

logger = logging.getLogger(__name__)


def detect_device() -> str:
    """自动检测最佳计算设备：Apple Silicon 上为 "mps"，NVIDIA GPU 为 "cuda"，否则 "cpu"。"""
    if torch.backends.mps.is_available():
        return "mps"
    if torch.cuda.is_available():
        return "cuda"
    return "cpu"


class CommandBufferStatus(enum.Enum):
    NOT_ENQUEUED = "not_enqueued"
    COMMITTED = "committed"
    COMPLETED = "completed"
    ERROR = "error"


class ComputeDevice:
    """torch 设备封装，name 形如 "cpu"、"cuda:0"、"mps"。"""

    def __init__(self, name: str):
        self.name = name

    @property
    def torch_device(self) -> torch.device:
        return torch.device(self.name)

    def is_supported(self) -> bool:
        """当前机器是否存在该设备。无法解析的设备名视为不支持。"""
        try:
            device = torch.device(self.name)
        except RuntimeError:
            return False
        if device.type == "cpu":
            return True
        if device.type == "cuda":
            if not torch.cuda.is_available():
                return False
            return device.index is None or device.index < torch.cuda.device_count()
        if device.type == "mps":
            return torch.backends.mps.is_available()
        return False

    def synchronize(self) -> None:
        """阻塞直到设备上已排队的计算全部完成（CPU 上无需等待）。"""
        device = self.torch_device
        if device.type == "cuda":
            torch.cuda.synchronize(device)
        elif device.type == "mps":
            torch.mps.synchronize()

    def make_command_queue(self) -> "CommandQueue":
        return CommandQueue(self)

    def __repr__(self) -> str:
        return f"ComputeDevice({self.name!r})"


class CommandQueue:
    """命令队列：为每次推理创建新的 CommandBuffer。"""

    def __init__(self, device: ComputeDevice):
        self.device = device

    def make_command_buffer(self) -> "CommandBuffer":
        return CommandBuffer(self.device)


class CommandBuffer:
    """
    单次提交的命令缓冲区。
    - encode：提交前追加命令
    - commit：按顺序在 inference_mode 下执行全部命令，只能提交一次
    - wait_until_completed：同步设备，状态变为 COMPLETED
    """

    def __init__(self, device: ComputeDevice):
        self.device = device
        self._commands: List[Tuple[Callable[..., Any], tuple]] = []
        self._status = CommandBufferStatus.NOT_ENQUEUED

    @property
    def status(self) -> CommandBufferStatus:
        return self._status

    def encode(self, fn: Callable[..., Any], *args: Any) -> None:
        if self._status is not CommandBufferStatus.NOT_ENQUEUED:
            raise RuntimeError("命令缓冲区已提交，不能继续编码。")
        self._commands.append((fn, args))

    def commit(self) -> None:
        if self._status is not CommandBufferStatus.NOT_ENQUEUED:
            raise RuntimeError("命令缓冲区只能提交一次。")
        self._status = CommandBufferStatus.COMMITTED
        logger.debug("提交命令缓冲区：%d 条命令，设备 %s", len(self._commands), self.device.name)
        try:
            with torch.inference_mode():
                for fn, args in self._commands:
                    fn(*args)
        except Exception:
            self._status = CommandBufferStatus.ERROR
            raise

    def wait_until_completed(self) -> None:
        if self._status is CommandBufferStatus.NOT_ENQUEUED:
            raise RuntimeError("命令缓冲区尚未提交。")
        if self._status is CommandBufferStatus.COMMITTED:
            self.device.synchronize()
            self._status = CommandBufferStatus.COMPLETED
