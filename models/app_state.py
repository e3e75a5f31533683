# -*- coding: utf-8 -*-
"""
全局应用状态（Model）。
供 ViewModel 读写，View 通过 ViewModel 间接访问。
"""

from dataclasses import dataclass
from typing import Optional

from PIL import Image

from models.source_texture import SourceTexture


@dataclass
class AppState:
    """
    全局应用状态。
    - display_image / source_texture：当前显示的图片与其设备纹理，每次选图整体替换
    - predicted_label：只在一次推理完成后才被赋值
    - info_visible：图片区域上的说明文字是否显示
    """

    display_image: Optional[Image.Image] = None
    # 同一时刻只保留一个纹理，新选图时直接替换
    source_texture: Optional[SourceTexture] = None
    predicted_label: Optional[str] = None
    info_visible: bool = True
    # 图片来源，文件路径或 "相机"
    image_origin: Optional[str] = None
