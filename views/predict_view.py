# -*- coding: utf-8 -*-
"""
图片预览视图（View）。
正方形区域，按「填满并裁剪」方式显示当前图片，未选图时在上面显示说明文字；
数据均由 ViewModel 提供。
"""

from typing import TYPE_CHECKING, Optional

from PySide6.QtCore import QRect, Qt
from PySide6.QtGui import QPixmap, QResizeEvent
from PySide6.QtWidgets import QFrame, QGridLayout, QLabel, QSizePolicy

if TYPE_CHECKING:
    from viewmodels.main_view_model import MainViewModel


class PredictView(QFrame):
    """
    显示待识别图片的正方形视图。
    - 高度始终等于宽度
    - 图片等比放大至铺满后居中裁剪
    - 说明文字叠加在图片区域上，由 ViewModel 控制显示/隐藏
    """

    def __init__(self, view_model: "MainViewModel", parent=None):
        super().__init__(parent)
        self.setObjectName("PredictView")
        self.setFrameShape(QFrame.Box)
        self._view_model = view_model
        self._pixmap: Optional[QPixmap] = None

        policy = QSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)
        policy.setHeightForWidth(True)
        self.setSizePolicy(policy)

        # 图片与说明文字放在同一格内叠加
        layout = QGridLayout(self)
        layout.setContentsMargins(1, 1, 1, 1)

        self._image_label = QLabel()
        self._image_label.setAlignment(Qt.AlignCenter)
        self._image_label.setSizePolicy(QSizePolicy.Ignored, QSizePolicy.Ignored)
        layout.addWidget(self._image_label, 0, 0)

        self._info_label = QLabel(view_model.INFO_TEXT)
        self._info_label.setObjectName("InfoTextLabel")
        self._info_label.setWordWrap(True)
        self._info_label.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        self._info_label.setSizePolicy(QSizePolicy.Ignored, QSizePolicy.Ignored)
        self._info_label.setContentsMargins(8, 8, 8, 8)
        layout.addWidget(self._info_label, 0, 0)

    @property
    def info_label(self) -> QLabel:
        return self._info_label

    @property
    def has_pixmap(self) -> bool:
        return self._pixmap is not None

    def hasHeightForWidth(self) -> bool:
        return True

    def heightForWidth(self, width: int) -> int:
        return width

    def refresh_image(self) -> None:
        """图片变化时由 MainWindow 调用：从 ViewModel 取 QImage 并重绘。"""
        qimg = self._view_model.get_display_image()
        self._pixmap = QPixmap.fromImage(qimg) if qimg is not None else None
        self._render()

    def refresh_info(self) -> None:
        """说明文字显示状态变化时由 MainWindow 调用。"""
        self._info_label.setVisible(self._view_model.info_visible)

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        self._render()

    def _render(self) -> None:
        if self._pixmap is None or self._pixmap.isNull():
            self._image_label.clear()
            return
        target = self._image_label.size()
        if target.width() <= 0 or target.height() <= 0:
            return
        scaled = self._pixmap.scaled(target, Qt.KeepAspectRatioByExpanding, Qt.SmoothTransformation)
        # 居中裁掉超出部分
        x = (scaled.width() - target.width()) // 2
        y = (scaled.height() - target.height()) // 2
        self._image_label.setPixmap(scaled.copy(QRect(x, y, target.width(), target.height())))
