# -*- coding: utf-8 -*-
"""
主界面 ViewModel（MVVM）。
负责：计算设备与网络初始化、选图并生成输入纹理、运行网络、重置界面状态。
View 通过信号接收刷新通知，通过方法获取展示数据与执行命令。
"""

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image
from PySide6.QtCore import QObject, Signal
from PySide6.QtGui import QImage

from config import Config, get_config
from models import (
    AppState,
    CommandQueue,
    ComputeDevice,
    Inception3Net,
    TextureLoader,
    TextureLoadError,
    crop_center_square,
    load_rgb_image,
)

logger = logging.getLogger(__name__)

INFO_TEXT = (
    "ImageRecognition：\n"
    "使用 Inception v3 网络进行图像识别\n\n"
    "本示例演示如何在本机设备上用卷积神经网络进行推理识别图片内容。"
    "网络为在 ImageNet 数据集上离线训练好的 Inception v3，"
    "推理时将各层编码并提交到计算设备，使用预训练的权重与偏置给出识别结果。\n\n"
    "点击「选择图片」拍照或从相册选图，再点击「运行网络」查看 Top-5 预测。"
)


class MainViewModel(QObject):
    """
    主界面 ViewModel。
    - 持有 AppState、计算设备、命令队列、纹理加载器与网络
    - 发出信号：image_changed, prediction_changed, info_visibility_changed, network_ready, status_message
    """

    INFO_TEXT = INFO_TEXT

    # 显示图片变化（选图或重置）
    image_changed = Signal()
    # 预测文本变化（推理完成、选新图或重置）
    prediction_changed = Signal()
    # 说明文字显示/隐藏
    info_visibility_changed = Signal()
    # 网络是否加载成功
    network_ready = Signal(bool)
    # 状态栏文案
    status_message = Signal(str)

    def __init__(self, config: Optional[Config] = None, parent=None):
        super().__init__(parent)
        self._config = config or get_config()
        self._app_state = AppState()
        self._device: Optional[ComputeDevice] = None
        self._command_queue: Optional[CommandQueue] = None
        self._texture_loader: Optional[TextureLoader] = None
        self._net: Optional[Inception3Net] = None

    @property
    def app_state(self) -> AppState:
        """全局应用状态，只读。"""
        return self._app_state

    @property
    def config(self) -> Config:
        return self._config

    @property
    def has_image(self) -> bool:
        return self._app_state.display_image is not None

    @property
    def network_loaded(self) -> bool:
        return self._net is not None

    @property
    def info_visible(self) -> bool:
        return self._app_state.info_visible

    # ---------- 命令：初始化 ----------

    def setup(self, net=None) -> bool:
        """
        创建计算设备、命令队列、纹理加载器，并加载网络。
        设备不受支持或权重加载失败时网络保持未加载，返回 False。
        net 不为 None 时直接使用传入的网络对象。
        """
        device = ComputeDevice(self._config.device)
        if not device.is_supported():
            logger.error("当前机器不支持计算设备 %s", device.name)
            self.status_message.emit(f"当前机器不支持计算设备：{device.name}")
            self.network_ready.emit(False)
            return False

        self._device = device
        self._command_queue = device.make_command_queue()
        self._texture_loader = TextureLoader(device)

        if net is None:
            self.status_message.emit("正在加载 Inception v3 网络…")
            try:
                net = Inception3Net(
                    self._command_queue,
                    weights=self._config.weights,
                    top_k=self._config.top_k,
                )
            except (OSError, RuntimeError, KeyError, ValueError) as e:
                logger.exception("加载网络失败")
                self.status_message.emit(f"加载网络失败：{e}")
                self.network_ready.emit(False)
                return False
        self._net = net

        logger.info("网络已就绪，设备 %s", device.name)
        self.status_message.emit(f"网络已就绪（设备：{device.name}）")
        self.network_ready.emit(True)
        return True

    # ---------- 命令：选图 ----------

    def select_image(self, source: Union[str, Path, Image.Image, np.ndarray, QImage], origin: Optional[str] = None) -> bool:
        """
        用户选好图片后调用：解码、按需裁成正方形、生成新的输入纹理。
        成功时整体替换显示图片与纹理，清空旧预测并隐藏说明文字；
        解码失败时保持原有状态不变，发出 status_message 并返回 False。
        """
        if self._texture_loader is None:
            self.status_message.emit("计算设备未初始化，无法加载图片。")
            return False
        if origin is None and isinstance(source, (str, Path)):
            origin = str(source)

        try:
            if isinstance(source, QImage):
                source = self._qimage_to_array(source)
            image = load_rgb_image(source)
            if self._config.crop_to_square:
                image = crop_center_square(image)
            texture = self._texture_loader.new_texture(image)
        except TextureLoadError as e:
            logger.error("加载图片失败：%s", e)
            self.status_message.emit(f"加载图片失败：{e}")
            return False

        self._app_state.display_image = image
        self._app_state.source_texture = texture
        self._app_state.image_origin = origin
        self._app_state.predicted_label = None
        self._app_state.info_visible = False
        logger.info("已加载图片 %s，纹理 %s", origin or "-", texture)

        self.status_message.emit(f"已加载图片：{origin or '-'}（{image.width}×{image.height}）")
        self.image_changed.emit()
        self.prediction_changed.emit()
        self.info_visibility_changed.emit()
        return True

    @staticmethod
    def _qimage_to_array(qimg: QImage) -> np.ndarray:
        """QImage（如相机拍照结果）转为 (H, W, 3) uint8 数组。"""
        if qimg.isNull():
            raise TextureLoadError("相机返回的图片为空。")
        rgb = qimg.convertToFormat(QImage.Format_RGB888)
        w, h = rgb.width(), rgb.height()
        # 每行可能有对齐填充，按 bytesPerLine 取再裁掉
        buf = np.frombuffer(rgb.constBits(), dtype=np.uint8, count=rgb.sizeInBytes())
        arr = buf.reshape(h, rgb.bytesPerLine())[:, : w * 3].reshape(h, w, 3)
        return arr.copy()

    # ---------- 命令：运行网络 ----------

    def run_network(self) -> Optional[str]:
        """
        对当前纹理执行一次推理：创建命令缓冲区、编码网络、提交并阻塞等待完成，
        完成后读取 Top-K 标签并发出 prediction_changed。无图片时不做任何事。
        """
        if not self.has_image:
            return None
        if self._net is None or self._command_queue is None:
            self.status_message.emit("网络未加载，无法运行。")
            return None

        command_buffer = self._command_queue.make_command_buffer()
        try:
            self._net.forward(command_buffer, self._app_state.source_texture)
            command_buffer.commit()
            command_buffer.wait_until_completed()
            label = self._net.get_label()
        except (RuntimeError, ValueError) as e:
            logger.exception("推理失败")
            self.status_message.emit(f"推理失败：{e}")
            return None

        self._app_state.predicted_label = label
        logger.info("推理完成：%s", label.splitlines()[0] if label else "-")
        self.status_message.emit("推理完成")
        self.prediction_changed.emit()
        return label

    # ---------- 命令：重置 ----------

    def reset(self) -> None:
        """清空预测、图片与纹理，重新显示说明文字。"""
        self._app_state.predicted_label = None
        self._app_state.display_image = None
        self._app_state.source_texture = None
        self._app_state.image_origin = None
        self._app_state.info_visible = True
        self.status_message.emit("已重置")
        self.image_changed.emit()
        self.prediction_changed.emit()
        self.info_visibility_changed.emit()

    # ---------- 供 View 获取展示数据 ----------

    def get_predicted_label(self) -> str:
        """当前预测文本，没有时返回空字符串。"""
        return self._app_state.predicted_label or ""

    def get_display_image(self) -> Optional[QImage]:
        """当前显示图片的 RGB888 QImage，无图片时返回 None。"""
        image = self._app_state.display_image
        if image is None:
            return None
        arr = np.ascontiguousarray(np.asarray(image.convert("RGB"), dtype=np.uint8))
        h, w, _ = arr.shape
        # copy() 使 QImage 拥有自己的像素数据，不依赖 arr 的生命周期
        return QImage(arr.data, w, h, 3 * w, QImage.Format_RGB888).copy()
