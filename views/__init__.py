# -*- coding: utf-8 -*-
"""
View 层：纯 UI 展示与用户输入，通过 ViewModel 获取数据与执行命令。
- PredictView：正方形图片预览与说明文字
- CameraDialog：摄像头拍照
- MainWindow：主窗口布局、菜单、按钮，与 ViewModel 绑定
"""

from .predict_view import PredictView
from .camera_dialog import CameraDialog
from .main_window import MainWindow

__all__ = ["PredictView", "CameraDialog", "MainWindow"]
