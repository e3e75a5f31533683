# -*- coding: utf-8 -*-
"""
Inception v3 网络测试
使用未加载权重的网络（不下载），只检查编码、执行顺序与标签格式。
"""

import pytest
import torch

from models import ComputeDevice, Inception3Net, Prediction, TextureLoader


@pytest.fixture(scope="module")
def queue():
    return ComputeDevice("cpu").make_command_queue()


@pytest.fixture(scope="module")
def net(queue):
    torch.manual_seed(0)
    return Inception3Net(queue, weights=None, top_k=5)


@pytest.fixture
def texture(rgb_image):
    return TextureLoader(ComputeDevice("cpu")).new_texture(rgb_image)


def test_has_imagenet_categories(net):
    assert len(net.categories) == 1000
    assert net.INPUT_SIZE == 299


def test_forward_only_encodes(net, queue, texture):
    buffer = queue.make_command_buffer()
    net.forward(buffer, texture)
    with pytest.raises(RuntimeError):
        net.get_label()


def test_label_after_completed_pass(net, queue, texture):
    buffer = queue.make_command_buffer()
    net.forward(buffer, texture)
    buffer.commit()
    buffer.wait_until_completed()

    predictions = net.top_predictions()
    assert len(predictions) == 5
    assert all(isinstance(p, Prediction) for p in predictions)
    probs = [p.probability for p in predictions]
    assert probs == sorted(probs, reverse=True)
    assert all(0.0 <= p <= 1.0 for p in probs)
    assert all(p.label in net.categories for p in predictions)

    lines = net.get_label().splitlines()
    assert len(lines) == 5
    assert lines[0].startswith(predictions[0].label + ": ")
    assert lines[0].endswith("%")


def test_top_predictions_custom_k(net, queue, texture):
    buffer = queue.make_command_buffer()
    net.forward(buffer, texture)
    buffer.commit()
    buffer.wait_until_completed()
    assert len(net.top_predictions(k=2)) == 2


def test_committed_but_not_waited_has_no_label(net, queue, texture):
    buffer = queue.make_command_buffer()
    net.forward(buffer, texture)
    buffer.commit()
    with pytest.raises(RuntimeError):
        net.get_label()


def test_new_forward_discards_previous_result(net, queue, texture):
    done = queue.make_command_buffer()
    net.forward(done, texture)
    done.commit()
    done.wait_until_completed()
    net.get_label()

    net.forward(queue.make_command_buffer(), texture)
    with pytest.raises(RuntimeError):
        net.get_label()


def test_forward_without_texture_raises(net, queue):
    with pytest.raises(ValueError):
        net.forward(queue.make_command_buffer(), None)


def test_same_input_gives_same_label(net, queue, texture):
    labels = []
    for _ in range(2):
        buffer = queue.make_command_buffer()
        net.forward(buffer, texture)
        buffer.commit()
        buffer.wait_until_completed()
        labels.append(net.get_label())
    assert labels[0] == labels[1]


def test_top_k_must_be_positive(queue):
    with pytest.raises(ValueError):
        Inception3Net(queue, weights=None, top_k=0)


def test_explicit_k_zero_rejected(net, queue, texture):
    buffer = queue.make_command_buffer()
    net.forward(buffer, texture)
    buffer.commit()
    buffer.wait_until_completed()
    with pytest.raises(ValueError):
        net.top_predictions(k=0)
    assert len(net.top_predictions(k=1)) == 1
