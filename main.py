# -*- coding: utf-8 -*-
"""
程序入口。
解析命令行参数、初始化日志，创建 ViewModel 与主窗口并加载网络。
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from config import Config, get_config
from logging_config import setup_logging
from viewmodels import MainViewModel
from views import MainWindow

logger = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"必须大于等于 1：{value}")
    return number


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="使用 Inception v3 识别图片内容")
    parser.add_argument("image", nargs="?", type=Path, help="启动后直接加载的图片")
    parser.add_argument("--device", help="计算设备：mps / cuda / cpu（默认自动检测）")
    parser.add_argument("--weights", help='torchvision 权重名，"none" 表示不加载预训练权重')
    parser.add_argument("--top-k", type=positive_int, help="显示的预测条数")
    parser.add_argument("--log-level", help="日志级别，如 DEBUG / INFO")
    parser.add_argument("--log-file", help="日志文件路径")
    return parser.parse_args(argv)


def apply_args(config: Config, args: argparse.Namespace) -> Config:
    """命令行参数覆盖配置（优先级高于环境变量）。"""
    if args.device:
        config.device = args.device
    if args.weights:
        config.weights = None if args.weights.lower() == "none" else args.weights
    if args.top_k:
        config.top_k = args.top_k
    if args.log_level:
        config.log_level = args.log_level
    if args.log_file:
        config.log_file = args.log_file
    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = apply_args(get_config(), args)

    setup_logging(config.log_level, config.log_file)
    logger.info("启动 ImageRecognition，配置：%s", config)

    app = QApplication(sys.argv[:1])
    view_model = MainViewModel(config)
    window = MainWindow(view_model)
    window.show()
    view_model.setup()
    if args.image is not None:
        window.open_image(args.image)
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
