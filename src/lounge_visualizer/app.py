#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
ラウンジスタイルのオーディオビジュアライザー
マイクなどの入力音声をキャプチャして円形のバーで可視化します
"""

import argparse
import signal
import sys

import pyqtgraph as pg

from lounge_visualizer.audio_processor import AudioProcessor
from lounge_visualizer.components.canvas import ImageSurface, LoungeCanvas
from lounge_visualizer.config import FFT_SIZE, VisualizerConfig
from lounge_visualizer.errors import SetupFailure, UnsupportedStyle
from lounge_visualizer.visualizer import VisualizationEngine


def build_parser():
    """
    コマンドライン引数の定義
    """
    defaults = VisualizerConfig()
    parser = argparse.ArgumentParser(description="入力音声の周波数スペクトラムを円形に表示します")
    parser.add_argument("--device", type=int, help="使用するオーディオデバイスID（省略時は自動検出）")
    parser.add_argument("--list-devices", action="store_true", help="オーディオデバイスの一覧を表示して終了")
    parser.add_argument("--fft-size", type=int, default=FFT_SIZE, help="FFTウィンドウサイズ")
    parser.add_argument("--style", default=defaults.style.value, help="描画スタイル")
    parser.add_argument("--bar-width", type=float, default=defaults.bar_width, help="バーの幅")
    parser.add_argument("--bar-height", type=float, default=defaults.bar_height, help="バーの基本の長さ")
    parser.add_argument("--bar-spacing", type=float, default=defaults.bar_spacing, help="バーの間隔")
    parser.add_argument("--bar-color", default=defaults.bar_color, help="バーの色")
    parser.add_argument("--shadow-blur", type=float, default=defaults.shadow_blur, help="グローの大きさ")
    parser.add_argument("--shadow-color", default=defaults.shadow_color, help="グローの色")
    parser.add_argument("--font", nargs=2, metavar=("SIZE", "FAMILY"), default=list(defaults.font),
                        help="テキストのフォント（例: 12px Helvetica）")
    parser.add_argument("--width", type=int, default=1000, help="ウィンドウの幅")
    parser.add_argument("--height", type=int, default=1000, help="ウィンドウの高さ")
    parser.add_argument("--title", help="中央に表示するタイトル")
    parser.add_argument("--author", default="", help="中央に表示するアーティスト名")
    parser.add_argument("--show-time", action="store_true", help="経過時間を表示する")
    parser.add_argument("--no-autoplay", action="store_true", help="起動時に再生を開始しない（スペースキーで開始）")
    return parser


def install_interrupt_handler(app):
    """
    Ctrl+Cでイベントループを終了させる
    （Qtのイベントループ中はKeyboardInterruptが届かないため）
    """
    signal.signal(signal.SIGINT, lambda *_: app.quit())


def config_from_args(args):
    return VisualizerConfig(
        style=args.style,
        bar_width=args.bar_width,
        bar_height=args.bar_height,
        bar_spacing=args.bar_spacing,
        bar_color=args.bar_color,
        shadow_blur=args.shadow_blur,
        shadow_color=args.shadow_color,
        font=tuple(args.font),
    )


def main(argv=None):
    """
    メイン関数
    アプリケーションのエントリーポイント
    """
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
    except (UnsupportedStyle, ValueError) as e:
        sys.exit(f"設定が正しくありません: {e}")

    processor = AudioProcessor(device=args.device, window_size=args.fft_size)
    if args.list_devices:
        processor.list_audio_devices()
        return

    app = pg.mkQApp("Lounge Visualizer")
    surface = ImageSurface(args.width, args.height)
    engine = VisualizationEngine(config, processor, surface)

    try:
        engine.setup()
    except SetupFailure:
        sys.exit(1)

    if args.title:
        engine.overlays.append(engine.render_text(args.title, args.author))
    if args.show_time:
        engine.overlays.append(engine.render_time())

    canvas = LoungeCanvas(surface)
    engine.on_frame = canvas.refresh
    canvas.bind_key("Space", engine.toggle)
    canvas.bind_key("Esc", canvas.close)
    canvas.show()

    install_interrupt_handler(app)
    try:
        if not args.no_autoplay:
            engine.start()
        app.exec_()
        print("\nアプリケーションを停止しました")
    finally:
        # キャプチャを停止
        if engine.handle is not None:
            engine.stop(engine.handle)
        processor.disconnect()


if __name__ == "__main__":
    main()
