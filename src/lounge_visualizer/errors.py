#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
ビジュアライザーで使用する例外クラス
"""


class VisualizerError(Exception):
    """
    ビジュアライザー関連の例外の基底クラス
    """


class SetupFailure(VisualizerError):
    """
    オーディオ・描画環境の初期化に失敗した場合の例外
    再試行はせず、エンジンは再生状態にならない
    """


class UnsupportedStyle(VisualizerError, ValueError):
    """
    描画スタイルが登録されていない場合の例外
    """

    def __init__(self, style):
        super().__init__(f"未対応のスタイルです: {style!r}")
        self.style = style


class TransientDecodeNotice(VisualizerError):
    """
    オーディオストリームから通知された一時的なエラー
    送出はせず、報告のみ行う（再生状態は変化しない）
    """
