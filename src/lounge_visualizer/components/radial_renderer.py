#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
周波数データを円形のバーとして描画するモジュール
"""

import abc
import math
from collections import namedtuple

import numpy as np

from lounge_visualizer.config import VisualizerStyle, font_pixel_size
from lounge_visualizer.errors import UnsupportedStyle

BarLayout = namedtuple("BarLayout", ["max_bar_num", "sliced_percent", "bar_num", "freq_jump"])

TEXT_CORRECTION = 10
TIME_OFFSET = 40


class RadialSpectrumRenderer(abc.ABC):
    """
    描画スタイルごとのレンダラーの基底クラス
    フレーム間で状態を持たず、設定は読み取りのみ行う
    """

    style = None

    @abc.abstractmethod
    def render(self, snapshot, config, surface):
        """
        1フレーム分のスペクトラムを描画

        Parameters
        ----------
        snapshot : ndarray
            周波数ごとの振幅（0〜255）
        config : VisualizerConfig
            ビジュアライザーの設定
        surface : ImageSurface
            描画先
        """

    def render_text(self, surface, config, title, author):
        """
        タイトルとアーティスト名を中央に描画
        """
        cx = surface.width / 2
        cy = surface.height / 2
        family = config.font[1]

        surface.set_text_baseline('top')
        surface.fill_text(f"by {author}", cx + TEXT_CORRECTION, cy)
        surface.set_font((f"{font_pixel_size(config.font) + 8}px", family))
        surface.set_text_baseline('bottom')
        surface.fill_text(title, cx + TEXT_CORRECTION, cy)
        surface.set_font(config.font)

    def render_time(self, surface, minutes, seconds):
        """
        経過時間を"MM:SS"の形式で描画
        """
        surface.fill_text(f"{minutes}:{seconds}",
                          surface.width / 2 + TEXT_CORRECTION,
                          surface.height / 2 + TIME_OFFSET)


class LoungeRenderer(RadialSpectrumRenderer):
    """
    loungeスタイル: 円周の3/4にバーを並べる
    """

    style = VisualizerStyle.LOUNGE
    radius = 140

    def layout(self, length, config):
        """
        バーの本数と周波数データの間引き幅を計算

        Parameters
        ----------
        length : int
            周波数データの長さ
        config : VisualizerConfig
            ビジュアライザーの設定

        Returns
        -------
        BarLayout
            (最大本数, 省略する本数, 描画する本数, 間引き幅)
        """
        max_bar_num = math.floor(self.radius * 3 * math.pi / (config.bar_width + config.bar_spacing))
        sliced_percent = math.floor(max_bar_num * 25 / 100)
        bar_num = max_bar_num - sliced_percent
        freq_jump = length // max_bar_num if max_bar_num > 0 else 0
        return BarLayout(max_bar_num, sliced_percent, bar_num, freq_jump)

    def render(self, snapshot, config, surface):
        cx = surface.width / 2
        cy = surface.height / 2
        bar_layout = self.layout(len(snapshot), config)
        if bar_layout.bar_num <= 0:
            return

        indices = np.arange(bar_layout.bar_num) * bar_layout.freq_jump
        amplitudes = np.asarray(snapshot)[indices].astype(float)

        # 隙間の位置を固定するための回転オフセット
        beta = math.radians(3 * 45 - config.bar_width)

        for i, amplitude in enumerate(amplitudes):
            alpha = i * 2 * math.pi / bar_layout.max_bar_num
            y = self.radius - (amplitude / 12 - config.bar_height)
            h = amplitude / 6 + config.bar_height

            surface.save()
            surface.translate(cx + config.bar_spacing, cy + config.bar_spacing)
            surface.rotate(alpha - beta)
            surface.fill_rect(0, y, config.bar_width, h)
            surface.restore()


RENDERERS = {
    VisualizerStyle.LOUNGE: LoungeRenderer(),
}


def renderer_for(style):
    """
    スタイルに対応するレンダラーを取得

    Parameters
    ----------
    style : VisualizerStyle or str
        描画スタイル

    Returns
    -------
    RadialSpectrumRenderer
        対応するレンダラー
    """
    try:
        return RENDERERS[VisualizerStyle(style)]
    except (ValueError, KeyError):
        raise UnsupportedStyle(style) from None
