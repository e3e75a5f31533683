# -*- coding: utf-8 -*-
"""
主窗口（View）。
仅负责布局、菜单、按钮与 ViewModel 的绑定；
选图、推理与状态均由 ViewModel 提供。
"""

from pathlib import Path
from typing import TYPE_CHECKING

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QFont
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QHBoxLayout,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSizePolicy,
    QStatusBar,
    QTextEdit,
    QToolBar,
    QVBoxLayout,
    QWidget,
)

from views.camera_dialog import CameraDialog
from views.predict_view import PredictView

if TYPE_CHECKING:
    from viewmodels.main_view_model import MainViewModel


# 白底黑细边框的简洁主题
STYLESHEET = """
QMainWindow, QWidget { background-color: #FFFFFF; color: #000000; }
QToolBar { background-color: #FFFFFF; border: none; }
QToolButton { color: #007AFF; padding: 6px; }
QToolButton:hover { background-color: #F0F0F5; }
QFrame#PredictView { border: 1px solid #000000; }
QLabel#InfoTextLabel { color: #A0A0A0; font-weight: bold; background: transparent; }
QPushButton {
    background-color: #FFFFFF; color: #000000; border: 1px solid #000000; font-weight: bold;
}
QPushButton:hover { background-color: #F0F0F5; }
QPushButton:disabled { color: #A0A0A0; border-color: #A0A0A0; }
QTextEdit { border: 1px solid #000000; }
"""

IMAGE_FILTER = "图片 (*.png *.jpg *.jpeg *.bmp *.gif *.webp *.tif *.tiff);;所有文件 (*.*)"


class MainWindow(QMainWindow):
    """
    主窗口 View。
    - 上方正方形图片预览，下方「运行网络」「选择图片」两个按钮，最下方预测文本
    - 工具栏「重置」清空图片与结果
    """

    def __init__(self, view_model: "MainViewModel", parent=None):
        super().__init__(parent)
        self._view_model = view_model
        self.setWindowTitle("ImageRecognition")
        config = view_model.config
        self.resize(config.window_width, config.window_height)
        self.setStyleSheet(STYLESHEET)

        self._create_menu()
        self._create_toolbar()

        central = QWidget(self)
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(8)

        self._predict_view = PredictView(self._view_model)
        layout.addWidget(self._predict_view)

        button_row = QHBoxLayout()
        button_row.setSpacing(8)
        self._run_button = QPushButton("运行网络")
        self._run_button.setFixedHeight(50)
        self._run_button.clicked.connect(self._on_run)
        self._choose_button = QPushButton("选择图片")
        self._choose_button.setFixedHeight(50)
        self._choose_button.clicked.connect(self._on_choose)
        button_row.addWidget(self._run_button, 1)
        button_row.addWidget(self._choose_button, 1)
        layout.addLayout(button_row)

        self._predict_text = QTextEdit()
        self._predict_text.setReadOnly(True)
        font = QFont(self._predict_text.font())
        font.setPointSize(font.pointSize() + 1)
        self._predict_text.setFont(font)
        layout.addWidget(self._predict_text, 1)

        status = QStatusBar()
        self.setStatusBar(status)
        self.statusBar().showMessage("就绪")

        # 绑定 ViewModel 信号
        self._view_model.image_changed.connect(self._on_image_changed)
        self._view_model.prediction_changed.connect(self._on_prediction_changed)
        self._view_model.info_visibility_changed.connect(self._predict_view.refresh_info)
        self._view_model.network_ready.connect(self._on_network_ready)
        self._view_model.status_message.connect(self.statusBar().showMessage)

        self._on_image_changed()
        self._predict_view.refresh_info()

    @property
    def predict_view(self) -> PredictView:
        return self._predict_view

    @property
    def predict_text(self) -> QTextEdit:
        return self._predict_text

    @property
    def run_button(self) -> QPushButton:
        return self._run_button

    @property
    def reset_action(self) -> QAction:
        return self._reset_action

    def _create_menu(self) -> None:
        """构建顶部菜单栏。"""
        menu_bar = self.menuBar()
        file_menu = menu_bar.addMenu("文件")
        open_action = QAction("从相册打开…", self)
        open_action.triggered.connect(self._open_photo_library)
        file_menu.addAction(open_action)
        camera_action = QAction("拍照…", self)
        camera_action.triggered.connect(self._open_camera)
        file_menu.addAction(camera_action)
        file_menu.addSeparator()
        exit_action = QAction("退出", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        help_menu = menu_bar.addMenu("帮助")
        about_action = QAction("关于", self)
        about_action.triggered.connect(self._show_about)
        help_menu.addAction(about_action)

    def _create_toolbar(self) -> None:
        """顶部工具栏，右侧为「重置」。"""
        toolbar = QToolBar()
        toolbar.setMovable(False)
        spacer = QWidget()
        spacer.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)
        toolbar.addWidget(spacer)
        self._reset_action = QAction("重置", self)
        self._reset_action.triggered.connect(self._view_model.reset)
        toolbar.addAction(self._reset_action)
        self.addToolBar(Qt.TopToolBarArea, toolbar)

    # ---------- 按钮与菜单槽 ----------

    def _on_run(self) -> None:
        """「运行网络」：有图片时同步执行一次推理，期间显示等待光标。"""
        if not self._view_model.has_image:
            return
        if not self._view_model.network_loaded:
            QMessageBox.warning(self, "提示", "网络未加载，请查看状态栏或控制台。")
            return
        QApplication.setOverrideCursor(Qt.WaitCursor)
        try:
            label = self._view_model.run_network()
        finally:
            QApplication.restoreOverrideCursor()
        if label is None:
            QMessageBox.critical(self, "错误", "推理失败，请查看状态栏或控制台。")

    def _on_choose(self) -> None:
        """「选择图片」：弹出相机 / 相册 / 取消选择框。"""
        box = QMessageBox(self)
        box.setWindowTitle("选择图片")
        box.setText("选择图片")
        camera_button = box.addButton("相机", QMessageBox.ActionRole)
        library_button = box.addButton("相册", QMessageBox.ActionRole)
        box.addButton("取消", QMessageBox.RejectRole)
        box.exec()
        clicked = box.clickedButton()
        if clicked is camera_button:
            self._open_camera()
        elif clicked is library_button:
            self._open_photo_library()

    def _open_camera(self) -> None:
        image = CameraDialog.capture(self)
        if image is None:
            return
        if not self._view_model.select_image(image, origin="相机"):
            QMessageBox.critical(self, "错误", "加载照片失败，请查看状态栏或控制台。")

    def _open_photo_library(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(self, "选择图片", "", IMAGE_FILTER)
        if not file_path:
            return
        self.open_image(Path(file_path))

    def open_image(self, path: Path) -> bool:
        """加载本地图片（相册或启动参数），失败时弹出错误框。"""
        if not self._view_model.select_image(path):
            QMessageBox.critical(self, "错误", "加载图片失败，请查看状态栏或控制台。")
            return False
        return True

    def _show_about(self) -> None:
        QMessageBox.information(
            self, "关于",
            "ImageRecognition\n\n使用 Inception v3 在本机设备上识别图片内容。\n采用 MVVM 架构。",
        )

    # ---------- ViewModel 信号槽 ----------

    def _on_image_changed(self) -> None:
        self._predict_view.refresh_image()
        self._run_button.setEnabled(self._view_model.has_image)

    def _on_prediction_changed(self) -> None:
        self._predict_text.setPlainText(self._view_model.get_predicted_label())

    def _on_network_ready(self, ready: bool) -> None:
        if not ready:
            self._run_button.setToolTip("网络未加载")
