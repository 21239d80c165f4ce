#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
再生経過時間の計測を担当するモジュール
"""


class PlaybackClock:
    """
    再生中のみ1秒ごとに進む経過時間カウンター
    """

    def __init__(self, is_playing):
        """
        初期化メソッド

        Parameters
        ----------
        is_playing : callable
            再生中かどうかを返す関数
        """
        self.is_playing = is_playing
        self.elapsed = 0
        self.minutes = '00'
        self.seconds = '00'

    @property
    def duration(self):
        """経過時間（ミリ秒）"""
        return self.elapsed * 1000

    @property
    def text(self):
        return f"{self.minutes}:{self.seconds}"

    def reset(self):
        """
        経過時間を0に戻す
        """
        self.elapsed = 0
        self._update_display()

    def tick(self):
        """
        1秒進める（再生中以外は何もしない）
        """
        if not self.is_playing():
            return
        self.elapsed += 1
        self._update_display()

    def _update_display(self):
        minutes, seconds = divmod(self.elapsed, 60)
        self.minutes = f"{minutes:02d}"
        self.seconds = f"{seconds:02d}"
