#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
描画先のキャンバスを担当するモジュール
QImageに描画し、ウィンドウに転送する
"""

import math
import re

import pyqtgraph as pg
from PyQt5 import QtCore, QtWidgets
from PyQt5.QtGui import (
    QBrush,
    QColor,
    QFont,
    QFontMetricsF,
    QImage,
    QKeySequence,
    QLinearGradient,
    QPainter,
    QPen,
)
from PyQt5.QtWidgets import QGraphicsDropShadowEffect, QShortcut

from lounge_visualizer.config import font_pixel_size

_RGB_PATTERN = re.compile(r"rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+)\s*)?\)")


def parse_color(value):
    """
    CSS形式の色指定をQColorに変換

    Parameters
    ----------
    value : str or QColor
        "#2962ff"、"rgba(0,0,0,1)"、"white"など

    Returns
    -------
    QColor
        変換後の色
    """
    if isinstance(value, QColor):
        return QColor(value)

    text = str(value).strip()
    match = _RGB_PATTERN.fullmatch(text)
    if match:
        r, g, b, a = match.groups()
        alpha = 255 if a is None else int(round(float(a) * 255))
        return QColor(int(float(r)), int(float(g)), int(float(b)), alpha)
    if text.startswith('#'):
        return pg.mkColor(text)

    color = QColor(text)
    if not color.isValid():
        raise ValueError(f"色を解釈できません: {value!r}")
    return color


def make_font(font):
    """
    (サイズ, フォント名)の組からQFontを生成
    """
    qfont = QFont(font[1])
    qfont.setPixelSize(font_pixel_size(font))
    return qfont


class ImageSurface:
    """
    QImageを描画先とするキャンバス
    フレームごとにbegin()/end()で囲んで描画する
    """

    def __init__(self, width=1000, height=1000):
        """
        初期化メソッド

        Parameters
        ----------
        width : int, optional
            キャンバスの幅
        height : int, optional
            キャンバスの高さ
        """
        self.image = QImage(width, height, QImage.Format_ARGB32_Premultiplied)
        self.image.fill(QtCore.Qt.transparent)
        self.painter = None

        # 描画スタイル（begin()のたびに適用する）
        self.fill_brush = QBrush(QColor(255, 255, 255))
        self.font = make_font(("12px", "Helvetica"))
        self.text_align = 'start'
        self.text_baseline = 'alphabetic'
        self.shadow_blur = 0
        self.shadow_color = QColor(0, 0, 0, 0)

    @property
    def width(self):
        return self.image.width()

    @property
    def height(self):
        return self.image.height()

    def resize(self, width, height):
        """
        キャンバスの大きさを変更（描画中は変更しない）
        """
        if self.painter is not None or (width == self.width and height == self.height):
            return
        self.image = QImage(max(1, width), max(1, height), QImage.Format_ARGB32_Premultiplied)
        self.image.fill(QtCore.Qt.transparent)

    def begin(self):
        self.painter = QPainter(self.image)
        self.painter.setRenderHint(QPainter.Antialiasing)
        self.painter.setPen(QtCore.Qt.NoPen)
        self.painter.setBrush(self.fill_brush)
        self.painter.setFont(self.font)

    def end(self):
        if self.painter is not None:
            self.painter.end()
            self.painter = None

    def clear(self, width, height):
        self.painter.setCompositionMode(QPainter.CompositionMode_Clear)
        self.painter.fillRect(QtCore.QRectF(0, 0, width, height), QtCore.Qt.transparent)
        self.painter.setCompositionMode(QPainter.CompositionMode_SourceOver)

    def save(self):
        self.painter.save()

    def restore(self):
        self.painter.restore()

    def translate(self, x, y):
        self.painter.translate(x, y)

    def rotate(self, radians):
        # QPainterは度数法で回転する
        self.painter.rotate(math.degrees(radians))

    def fill_rect(self, x, y, w, h):
        self.painter.fillRect(QtCore.QRectF(x, y, w, h), self.fill_brush)

    def fill_text(self, text, x, y):
        """
        テキストを描画（text_align, text_baselineに従って位置を調整）
        """
        metrics = QFontMetricsF(self.font)
        text_width = metrics.horizontalAdvance(text)
        if self.text_align == 'center':
            x -= text_width / 2
        elif self.text_align in ('right', 'end'):
            x -= text_width

        if self.text_baseline == 'top':
            y += metrics.ascent()
        elif self.text_baseline == 'bottom':
            y -= metrics.descent()
        elif self.text_baseline == 'middle':
            y += (metrics.ascent() - metrics.descent()) / 2

        self.painter.save()
        self.painter.setPen(QPen(self.fill_brush, 1))
        self.painter.setFont(self.font)
        self.painter.drawText(QtCore.QPointF(x, y), text)
        self.painter.restore()

    def set_fill_gradient(self, x0, y0, x1, y1, stops):
        """
        塗りつぶしに線形グラデーションを設定

        Parameters
        ----------
        x0, y0, x1, y1 : float
            グラデーションの始点と終点
        stops : list of tuple
            (位置, 色)のリスト
        """
        gradient = QLinearGradient(x0, y0, x1, y1)
        for position, color in stops:
            gradient.setColorAt(position, parse_color(color))
        self.fill_brush = QBrush(gradient)
        if self.painter is not None:
            self.painter.setBrush(self.fill_brush)

    def set_shadow(self, blur, color):
        self.shadow_blur = blur
        self.shadow_color = parse_color(color)

    def set_font(self, font):
        self.font = make_font(font)
        if self.painter is not None:
            self.painter.setFont(self.font)

    def set_text_align(self, align):
        self.text_align = align

    def set_text_baseline(self, baseline):
        self.text_baseline = baseline


class _ImageView(QtWidgets.QWidget):
    """
    キャンバスの画像だけを描画するウィジェット（背景は透明）
    """

    def __init__(self, surface, parent=None):
        super().__init__(parent)
        self.surface = surface

    def resizeEvent(self, event):
        self.surface.resize(event.size().width(), event.size().height())
        super().resizeEvent(event)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.drawImage(0, 0, self.surface.image)
        painter.end()


class LoungeCanvas(QtWidgets.QWidget):
    """
    ImageSurfaceの内容を表示するウィンドウ
    """

    def __init__(self, surface, background=(5, 5, 15), parent=None):
        """
        初期化メソッド

        Parameters
        ----------
        surface : ImageSurface
            表示するキャンバス
        background : tuple, optional
            背景色 (R, G, B)
        """
        super().__init__(parent)
        self.surface = surface
        self.shortcuts = []
        self.setWindowTitle("ラウンジビジュアライザー")
        self.resize(surface.width, surface.height)

        # 背景色
        palette = self.palette()
        palette.setColor(self.backgroundRole(), QColor(*background))
        self.setPalette(palette)
        self.setAutoFillBackground(True)

        # 画像表示用のウィジェット
        self.view = _ImageView(surface, self)
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.view)

        self.apply_glow()

    def bind_key(self, key, callback):
        """
        キーボードショートカットを登録

        Parameters
        ----------
        key : str
            キー（例: "Space"）
        callback : callable
            押されたときに呼ぶ関数
        """
        shortcut = QShortcut(QKeySequence(key), self)
        shortcut.activated.connect(callback)
        self.shortcuts.append(shortcut)
        return shortcut

    def refresh(self):
        """
        最新のフレームを表示
        """
        self.apply_glow()
        self.view.update()

    def apply_glow(self):
        """
        キャンバスの影の設定をグロー効果に反映する
        blurが0ならグロー効果を外す
        """
        glow = self.view.graphicsEffect()
        if self.surface.shadow_blur <= 0:
            if glow is not None:
                self.view.setGraphicsEffect(None)
            return

        if glow is None:
            glow = QGraphicsDropShadowEffect(self.view)
            glow.setOffset(0, 0)
            self.view.setGraphicsEffect(glow)
        glow.setBlurRadius(self.surface.shadow_blur)
        glow.setColor(self.surface.shadow_color)
