#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
ビジュアライザー本体
再生状態の管理と描画ループ・経過時間タイマーの制御を担当する
"""

from enum import Enum

from PyQt5 import QtCore

from lounge_visualizer.components.radial_renderer import renderer_for
from lounge_visualizer.config import CLOCK_INTERVAL, FRAME_INTERVAL, GRADIENT_HEIGHT
from lounge_visualizer.errors import SetupFailure
from lounge_visualizer.playback_clock import PlaybackClock


class PlaybackState(Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"


class AnimationHandle:
    """
    描画ループと経過時間タイマーのハンドル
    start()が返し、stop()に渡して停止する
    """

    def __init__(self, frame_timer, clock_timer):
        self.frame_timer = frame_timer
        self.clock_timer = clock_timer

    @property
    def active(self):
        return self.frame_timer.isActive()


class VisualizationEngine(QtCore.QObject):
    """
    再生状態を管理し、フレームごとにスペクトラムを描画するクラス

    状態の変更はすべてGUIスレッド上で行う。オーディオスレッドからの
    通知はシグナル経由でGUIスレッドに届く
    """

    source_ended = QtCore.pyqtSignal()
    notice_raised = QtCore.pyqtSignal(object)

    def __init__(self, config, source, surface, renderer=None, timer_factory=QtCore.QTimer,
                 frame_interval=FRAME_INTERVAL, overlays=(), parent=None):
        """
        初期化メソッド

        Parameters
        ----------
        config : VisualizerConfig
            ビジュアライザーの設定
        source : AudioProcessor
            周波数データの取得元（再生制御も兼ねる）
        surface : ImageSurface
            描画先
        renderer : RadialSpectrumRenderer, optional
            レンダラー（指定がない場合はconfig.styleから選択）
        timer_factory : callable, optional
            タイマーの生成関数
        frame_interval : int, optional
            描画ループの間隔（ミリ秒）
        overlays : sequence of callable, optional
            バーの後に描画する関数（surfaceを引数に取る）
        """
        super().__init__(parent)
        self.config = config
        self.source = source
        self.surface = surface
        self.renderer = renderer or renderer_for(config.style)
        self.timer_factory = timer_factory
        self.frame_interval = frame_interval
        self.overlays = list(overlays)

        self.state = PlaybackState.IDLE
        self.clock = PlaybackClock(lambda: self.state is PlaybackState.PLAYING)
        self.handle = None
        self.ready = False
        self.setup_error = None

        # フレーム描画後に呼ぶ関数（ウィンドウの再描画など）
        self.on_frame = None

        self.source_ended.connect(self.on_source_ended)
        self.notice_raised.connect(self.on_notice)

    @property
    def is_playing(self):
        return self.state is PlaybackState.PLAYING

    def setup(self):
        """
        オーディオの接続とキャンバスのスタイル設定を行う

        Raises
        ------
        SetupFailure
            オーディオキャプチャを開始できない場合
        """
        try:
            self.source.connect()
        except SetupFailure as e:
            print(f"オーディオの初期化に失敗しました: {e}")
            self.setup_error = e
            raise

        # オーディオスレッドからの通知はシグナルに変換する
        self.source.on_ended = self.source_ended.emit
        self.source.on_notice = self.notice_raised.emit

        self.set_canvas_styles()
        self.ready = True
        self.setup_error = None
        return self

    def set_canvas_styles(self):
        """
        設定に従ってキャンバスの塗り・影・フォントを設定
        """
        self.surface.set_fill_gradient(0, 0, 0, GRADIENT_HEIGHT, [(1, self.config.bar_color)])
        self.surface.set_shadow(self.config.shadow_blur, self.config.shadow_color)
        self.surface.set_font(self.config.font)
        self.surface.set_text_align('center')

    def start(self):
        """
        再生を開始

        Returns
        -------
        AnimationHandle
            描画ループと経過時間タイマーのハンドル
        """
        if self.setup_error is not None:
            raise self.setup_error
        if not self.ready:
            raise SetupFailure("setup()が完了していません")

        self.state = PlaybackState.PLAYING

        # 一時停止からの再開はループもタイマーもそのまま
        if self.source.suspended and self.handle is not None:
            self.source.resume()
            return self.handle
        if self.source.suspended:
            self.source.resume()

        if self.handle is None:
            self.handle = AnimationHandle(self._create_timer(self.render_frame),
                                          self._create_timer(self.clock.tick))

        self.clock.reset()
        self.handle.clock_timer.stop()
        self.handle.clock_timer.start(CLOCK_INTERVAL)
        if not self.handle.frame_timer.isActive():
            self.handle.frame_timer.start(self.frame_interval)
        return self.handle

    def pause(self):
        """
        再生を一時停止（描画ループとタイマーは止めない）
        """
        if self.state is not PlaybackState.PLAYING:
            return
        self.source.suspend()
        self.state = PlaybackState.PAUSED

    def toggle(self):
        """
        再生中なら一時停止、それ以外なら再生
        """
        if self.is_playing:
            self.pause()
        else:
            self.start()

    def stop(self, handle):
        """
        描画ループと経過時間タイマーを停止

        Parameters
        ----------
        handle : AnimationHandle
            start()が返したハンドル
        """
        if handle is None or handle is not self.handle:
            raise ValueError("このビジュアライザーのハンドルではありません")
        handle.frame_timer.stop()
        handle.clock_timer.stop()
        self.handle = None
        if self.source.suspended:
            self.source.resume()
        self.clock.reset()
        self.state = PlaybackState.IDLE

    def on_source_ended(self):
        """
        入力ストリーム終了時の処理
        タイマーを止めて状態を初期化し、次のstart()に備えて再接続する
        """
        if self.handle is not None:
            self.handle.clock_timer.stop()
        self.source.disconnect()
        self.clock.reset()
        self.state = PlaybackState.IDLE

        try:
            self.source.reconnect()
        except SetupFailure as e:
            print(f"オーディオの再接続に失敗しました: {e}")
            self.setup_error = e

    def on_notice(self, notice):
        """
        オーディオストリームのエラー通知（再生状態は変えない）
        """
        print(f"オーディオデータのデコードでエラーが発生しました -- {notice}")

    def render_frame(self):
        """
        1フレーム分の描画
        """
        snapshot = self.source.get_snapshot()

        self.surface.begin()
        try:
            self.surface.clear(self.surface.width, self.surface.height)
            self.renderer.render(snapshot, self.config, self.surface)
            for overlay in self.overlays:
                overlay(self.surface)
        finally:
            self.surface.end()

        if self.on_frame is not None:
            self.on_frame()

    def render_text(self, title, author):
        """
        タイトルとアーティスト名を描画するオーバーレイを生成
        """
        return lambda surface: self.renderer.render_text(surface, self.config, title, author)

    def render_time(self):
        """
        経過時間を描画するオーバーレイを生成
        """
        return lambda surface: self.renderer.render_time(surface, self.clock.minutes, self.clock.seconds)

    def _create_timer(self, callback):
        timer = self.timer_factory()
        timer.timeout.connect(callback)
        return timer
