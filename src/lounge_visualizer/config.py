#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
ビジュアライザーの設定値と定数
"""

import re
from dataclasses import dataclass
from enum import Enum

from lounge_visualizer.errors import UnsupportedStyle

# --- 解析の定数 ---
FFT_SIZE = 2048
SMOOTHING_TIME_CONSTANT = 0.6
MIN_DECIBELS = -100.0
MAX_DECIBELS = -30.0

# --- 描画の定数 ---
FRAME_INTERVAL = 16     # ミリ秒（約60FPS）
CLOCK_INTERVAL = 1000   # ミリ秒
GRADIENT_HEIGHT = 300


class VisualizerStyle(Enum):
    """
    描画スタイル（現在はloungeのみ）
    """
    LOUNGE = "lounge"


@dataclass(frozen=True)
class VisualizerConfig:
    """
    ビジュアライザーの設定（生成後は変更しない）
    """
    style: VisualizerStyle = VisualizerStyle.LOUNGE
    bar_width: float = 2
    bar_height: float = 2
    bar_spacing: float = 5
    bar_color: str = "#ffffff"
    shadow_blur: float = 10
    shadow_color: str = "#ffffff"
    font: tuple = ("12px", "Helvetica")

    def __post_init__(self):
        # 文字列で指定されたスタイルを列挙型に変換
        if not isinstance(self.style, VisualizerStyle):
            try:
                style = VisualizerStyle(self.style)
            except ValueError:
                raise UnsupportedStyle(self.style) from None
            object.__setattr__(self, "style", style)

        if self.bar_width <= 0:
            raise ValueError(f"bar_widthは正の値である必要があります: {self.bar_width}")
        if self.bar_height < 0:
            raise ValueError(f"bar_heightは0以上である必要があります: {self.bar_height}")
        if self.bar_spacing <= 0:
            raise ValueError(f"bar_spacingは正の値である必要があります: {self.bar_spacing}")
        if self.shadow_blur < 0:
            raise ValueError(f"shadow_blurは0以上である必要があります: {self.shadow_blur}")

        font = tuple(self.font)
        if len(font) != 2:
            raise ValueError(f"fontは(サイズ, フォント名)の組で指定してください: {self.font!r}")
        font_pixel_size(font)
        object.__setattr__(self, "font", font)

    @property
    def font_css(self):
        """
        フォント指定を"12px Helvetica"の形式で返す
        """
        return " ".join(self.font)


def font_pixel_size(font):
    """
    フォント指定からピクセルサイズを取得

    Parameters
    ----------
    font : tuple
        (サイズ, フォント名)の組。サイズは"12px"のような文字列または数値

    Returns
    -------
    int
        ピクセルサイズ
    """
    size = font[0]
    if isinstance(size, (int, float)):
        return int(size)
    match = re.match(r"\s*(\d+)", str(size))
    if match is None:
        raise ValueError(f"フォントサイズを解釈できません: {size!r}")
    return int(match.group(1))
