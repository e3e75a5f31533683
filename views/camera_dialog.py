# -*- coding: utf-8 -*-
"""
拍照对话框（View）。
使用 Qt Multimedia 预览默认摄像头，点击「拍照」后返回拍到的 QImage。
"""

import logging
from typing import Optional

from PySide6.QtGui import QImage
from PySide6.QtMultimedia import QCamera, QImageCapture, QMediaCaptureSession, QMediaDevices
from PySide6.QtMultimediaWidgets import QVideoWidget
from PySide6.QtWidgets import QDialog, QHBoxLayout, QMessageBox, QPushButton, QVBoxLayout, QWidget

logger = logging.getLogger(__name__)


class CameraDialog(QDialog):
    """单次拍照对话框，拍照成功后 accept，结果见 captured_image。"""

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setWindowTitle("相机")
        self.resize(640, 520)
        self._captured: Optional[QImage] = None

        self._camera = QCamera(QMediaDevices.defaultVideoInput())
        self._image_capture = QImageCapture()
        self._session = QMediaCaptureSession()
        self._session.setCamera(self._camera)
        self._session.setImageCapture(self._image_capture)

        layout = QVBoxLayout(self)
        self._preview = QVideoWidget()
        self._session.setVideoOutput(self._preview)
        layout.addWidget(self._preview, 1)

        buttons = QHBoxLayout()
        self._capture_button = QPushButton("拍照")
        self._capture_button.setMinimumHeight(40)
        self._capture_button.clicked.connect(self._on_capture)
        cancel_button = QPushButton("取消")
        cancel_button.setMinimumHeight(40)
        cancel_button.clicked.connect(self.reject)
        buttons.addWidget(self._capture_button)
        buttons.addWidget(cancel_button)
        layout.addLayout(buttons)

        self._image_capture.imageCaptured.connect(self._on_image_captured)
        self._image_capture.errorOccurred.connect(self._on_capture_error)
        self._camera.errorOccurred.connect(self._on_camera_error)
        self._camera.start()

    @property
    def captured_image(self) -> Optional[QImage]:
        return self._captured

    @staticmethod
    def has_camera() -> bool:
        return bool(QMediaDevices.videoInputs())

    @classmethod
    def capture(cls, parent: Optional[QWidget] = None) -> Optional[QImage]:
        """弹出对话框拍一张照片；没有摄像头或用户取消时返回 None。"""
        if not cls.has_camera():
            QMessageBox.warning(parent, "提示", "未检测到可用的摄像头。")
            return None
        dialog = cls(parent)
        accepted = dialog.exec() == QDialog.Accepted
        return dialog.captured_image if accepted else None

    def _on_capture(self) -> None:
        if not self._image_capture.isReadyForCapture():
            return
        self._capture_button.setEnabled(False)
        self._image_capture.capture()

    def _on_image_captured(self, request_id: int, image: QImage) -> None:
        logger.info("拍照完成 #%d：%dx%d", request_id, image.width(), image.height())
        self._captured = image
        self.accept()

    def _on_capture_error(self, request_id: int, error, message: str) -> None:
        logger.error("拍照失败 #%d：%s", request_id, message)
        self._capture_button.setEnabled(True)
        QMessageBox.critical(self, "错误", f"拍照失败：{message}")

    def _on_camera_error(self, error, message: str) -> None:
        logger.error("摄像头错误：%s", message)
        QMessageBox.critical(self, "错误", f"摄像头错误：{message}")
        self.reject()

    def done(self, result: int) -> None:
        self._camera.stop()
        super().done(result)
