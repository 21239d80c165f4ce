#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
オーディオデータのキャプチャと処理を担当するモジュール
"""

import queue

import numpy as np
import sounddevice as sd

from lounge_visualizer.analyser import SpectrumAnalyser
from lounge_visualizer.config import FFT_SIZE, SMOOTHING_TIME_CONSTANT
from lounge_visualizer.errors import SetupFailure, TransientDecodeNotice


class AudioProcessor:
    """
    オーディオデータのキャプチャとスペクトラム解析を行うクラス
    ビジュアライザーに対して周波数データの取得と再生制御を提供する
    """

    def __init__(self, device=None, window_size=FFT_SIZE, sample_rate=44100, channels=2,
                 smoothing_time_constant=SMOOTHING_TIME_CONSTANT):
        """
        初期化メソッド

        Parameters
        ----------
        device : int or str, optional
            使用するオーディオデバイスのID または 名前
        window_size : int, optional
            FFTウィンドウサイズ
        sample_rate : int, optional
            サンプリングレート
        channels : int, optional
            チャンネル数
        smoothing_time_constant : float, optional
            スペクトラムの平滑化係数
        """
        self.window_size = window_size
        self.sample_rate = sample_rate
        self.channels = channels
        self.device = device
        self.q = queue.Queue()
        self.stream = None
        self.running = False
        self.suspended = False
        self.analyser = SpectrumAnalyser(window_size, smoothing_time_constant)

        # ストリーム終了・エラー通知のコールバック（ビジュアライザーが設定する）
        self.on_ended = None
        self.on_notice = None
        self._closing = False

    def audio_callback(self, indata, frames, time, status):
        """
        オーディオコールバック関数

        Parameters
        ----------
        indata : ndarray
            入力オーディオデータ
        frames : int
            フレーム数
        time : CData
            タイムスタンプ
        status : CallbackFlags
            ステータスフラグ
        """
        if status:
            self._notify(TransientDecodeNotice(str(status)))
        # 一時停止中はデータを捨てる（スペクトラムは直前の状態のまま）
        if self.suspended:
            return
        # モノラルに変換してキューに追加
        if self.channels > 1:
            self.q.put(np.mean(indata, axis=1))
        else:
            self.q.put(indata[:, 0].copy())

    def finished_callback(self):
        """
        ストリーム終了時のコールバック関数
        """
        if self._closing:
            return
        self.running = False
        if self.on_ended is not None:
            self.on_ended()

    def _notify(self, notice):
        if self.on_notice is not None:
            self.on_notice(notice)
        else:
            print(f"ステータス: {notice}")

    def find_loopback_device(self):
        """
        ループバックデバイスを検索する

        Returns
        -------
        int or None
            ループバックデバイスのID、見つからない場合はNone
        """
        devices = sd.query_devices()

        # 1. 'Loopback'という名前が含まれるデバイスを優先的に探す
        for i, device in enumerate(devices):
            if 'loopback' in device['name'].lower() and device['max_input_channels'] > 0:
                print(f"ループバックデバイスを検出しました: {device['name']}")
                return i

        # 2. 'ループバック'という名前が含まれるデバイスを探す（日本語環境向け）
        for i, device in enumerate(devices):
            if 'ループバック' in device['name'] and device['max_input_channels'] > 0:
                print(f"ループバックデバイスを検出しました: {device['name']}")
                return i

        # 3. 入力チャンネルを持つデバイスを探す（最終手段）
        for i, device in enumerate(devices):
            if device['max_input_channels'] > 0:
                print(f"入力デバイスを検出しました: {device['name']}")
                return i

        return None

    def list_audio_devices(self):
        """
        利用可能なオーディオデバイスを一覧表示

        Returns
        -------
        list
            デバイス情報のリスト
        """
        devices = sd.query_devices()
        print("利用可能なオーディオデバイス:")
        for i, device in enumerate(devices):
            print(f"{i}: {device['name']} (入力チャンネル: {device['max_input_channels']}, 出力チャンネル: {device['max_output_channels']})")
        return devices

    def connect(self, device_id=None):
        """
        オーディオキャプチャを開始

        Parameters
        ----------
        device_id : int, optional
            使用するデバイスID（指定がない場合は自動検出）

        Raises
        ------
        SetupFailure
            デバイスが見つからない、またはストリームを開けない場合
        """
        if self.running:
            print("すでにキャプチャ中です")
            return

        try:
            # デバイスが指定されている場合はそれを使用、なければ自動検出
            if device_id is not None:
                self.device = device_id
            elif self.device is None:
                self.device = self.find_loopback_device()

            if self.device is None:
                print("適切なオーディオキャプチャデバイスが見つかりませんでした。デバイス一覧:")
                self.list_audio_devices()
                raise SetupFailure("オーディオキャプチャデバイスが見つかりません")

            device_info = sd.query_devices(self.device)
            print(f"使用するデバイス: {device_info['name']}")

            # デバイスのサンプルレートを使用
            if 'default_samplerate' in device_info:
                self.sample_rate = int(device_info['default_samplerate'])
            self.channels = max(1, min(self.channels, device_info['max_input_channels']))

            # ストリームを開始
            self._closing = False
            self.stream = sd.InputStream(
                device=self.device,
                channels=self.channels,
                samplerate=self.sample_rate,
                callback=self.audio_callback,
                finished_callback=self.finished_callback,
                blocksize=self.window_size,
                latency='low',
                dtype='float32'
            )
            self.stream.start()
        except (sd.PortAudioError, ValueError) as e:
            raise SetupFailure(f"オーディオキャプチャの開始に失敗しました: {e}") from e

        self.running = True
        self.suspended = False
        print(f"オーディオキャプチャを開始しました（サンプルレート: {self.sample_rate}Hz）")

    def suspend(self):
        """
        キャプチャを一時停止（ストリームは開いたまま）
        """
        self.suspended = True

    def resume(self):
        """
        一時停止したキャプチャを再開
        """
        self.suspended = False

    def disconnect(self):
        """
        オーディオキャプチャを停止
        """
        self._closing = True
        if self.stream is not None:
            self.stream.stop()
            self.stream.close()
            self.stream = None
            print("オーディオキャプチャを停止しました")
        self.running = False
        self.suspended = False

        # 残っているデータを破棄
        while True:
            try:
                self.q.get_nowait()
            except queue.Empty:
                break

    def reconnect(self):
        """
        同じデバイスで新しいストリームを開き直す
        """
        self.disconnect()
        self.connect(self.device)

    def get_snapshot(self):
        """
        最新の周波数データを取得（待機はしない）

        Returns
        -------
        ndarray
            周波数ごとの振幅（uint8、長さはwindow_sizeの半分）
        """
        received = False
        while True:
            try:
                data = self.q.get_nowait()
            except queue.Empty:
                break
            self.analyser.push(data)
            received = True

        # 新しいデータがない場合は前回の結果をそのまま返す
        if received:
            return self.analyser.analyse()
        return self.analyser.get_byte_frequency_data()
