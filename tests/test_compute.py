# -*- coding: utf-8 -*-
"""计算设备与命令缓冲区测试"""

import pytest
import torch

from models import CommandBufferStatus, ComputeDevice, detect_device


def test_detect_device_returns_known_name():
    assert detect_device() in ("mps", "cuda", "cpu")


def test_cpu_is_supported():
    assert ComputeDevice("cpu").is_supported()


def test_unknown_device_not_supported():
    assert not ComputeDevice("not-a-device").is_supported()


def test_cuda_support_matches_torch():
    assert ComputeDevice("cuda").is_supported() == torch.cuda.is_available()


def test_commands_run_in_order_on_commit():
    queue = ComputeDevice("cpu").make_command_queue()
    buffer = queue.make_command_buffer()
    calls = []
    buffer.encode(calls.append, "first")
    buffer.encode(calls.append, "second")
    assert calls == []
    assert buffer.status is CommandBufferStatus.NOT_ENQUEUED

    buffer.commit()
    assert calls == ["first", "second"]
    assert buffer.status is CommandBufferStatus.COMMITTED

    buffer.wait_until_completed()
    assert buffer.status is CommandBufferStatus.COMPLETED


def test_commands_run_without_grad():
    buffer = ComputeDevice("cpu").make_command_queue().make_command_buffer()
    seen = []
    buffer.encode(lambda: seen.append(torch.is_grad_enabled()))
    buffer.commit()
    assert seen == [False]


def test_commit_twice_raises():
    buffer = ComputeDevice("cpu").make_command_queue().make_command_buffer()
    buffer.commit()
    with pytest.raises(RuntimeError):
        buffer.commit()


def test_encode_after_commit_raises():
    buffer = ComputeDevice("cpu").make_command_queue().make_command_buffer()
    buffer.commit()
    with pytest.raises(RuntimeError):
        buffer.encode(print)


def test_wait_before_commit_raises():
    buffer = ComputeDevice("cpu").make_command_queue().make_command_buffer()
    with pytest.raises(RuntimeError):
        buffer.wait_until_completed()


def test_failing_command_sets_error_status():
    buffer = ComputeDevice("cpu").make_command_queue().make_command_buffer()

    def boom():
        raise RuntimeError("kernel failed")

    buffer.encode(boom)
    with pytest.raises(RuntimeError, match="kernel failed"):
        buffer.commit()
    assert buffer.status is CommandBufferStatus.ERROR
    # 出错的缓冲区等待后仍保持 ERROR
    buffer.wait_until_completed()
    assert buffer.status is CommandBufferStatus.ERROR
