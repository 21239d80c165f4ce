#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
周波数スペクトラムの解析を担当するモジュール
ブラウザのAnalyserNodeと同じ手順で0〜255のバイト値に変換する
"""

import numpy as np
from scipy.fft import rfft

from lounge_visualizer.config import (
    FFT_SIZE,
    MAX_DECIBELS,
    MIN_DECIBELS,
    SMOOTHING_TIME_CONSTANT,
)


class SpectrumAnalyser:
    """
    直近のオーディオデータから周波数ごとの振幅を計算するクラス
    """

    def __init__(self, fft_size=FFT_SIZE, smoothing_time_constant=SMOOTHING_TIME_CONSTANT,
                 min_decibels=MIN_DECIBELS, max_decibels=MAX_DECIBELS):
        """
        初期化メソッド

        Parameters
        ----------
        fft_size : int, optional
            FFTウィンドウサイズ（32〜32768の2のべき乗）
        smoothing_time_constant : float, optional
            前回の結果との平滑化係数（0〜1）
        min_decibels : float, optional
            0に対応するデシベル値
        max_decibels : float, optional
            255に対応するデシベル値
        """
        if fft_size < 32 or fft_size > 32768 or fft_size & (fft_size - 1):
            raise ValueError(f"fft_sizeは32〜32768の2のべき乗である必要があります: {fft_size}")
        if not 0.0 <= smoothing_time_constant <= 1.0:
            raise ValueError(f"smoothing_time_constantは0〜1の範囲である必要があります: {smoothing_time_constant}")
        if min_decibels >= max_decibels:
            raise ValueError("min_decibelsはmax_decibelsより小さい必要があります")

        self.fft_size = fft_size
        self.smoothing_time_constant = smoothing_time_constant
        self.min_decibels = min_decibels
        self.max_decibels = max_decibels

        # 時間領域のリングバッファと窓関数
        self.time_data = np.zeros(fft_size, dtype=np.float32)
        self.window = np.blackman(fft_size)

        # 平滑化済みの振幅と出力バッファ（毎フレーム上書きする）
        self.smoothed = np.zeros(self.frequency_bin_count)
        self.frequency_data = np.zeros(self.frequency_bin_count, dtype=np.uint8)

    @property
    def frequency_bin_count(self):
        return self.fft_size // 2

    def push(self, samples):
        """
        新しいオーディオデータをバッファに追加

        Parameters
        ----------
        samples : ndarray
            モノラルのオーディオデータ
        """
        samples = np.asarray(samples, dtype=np.float32).ravel()
        count = len(samples)
        if count == 0:
            return
        if count >= self.fft_size:
            self.time_data[:] = samples[-self.fft_size:]
        else:
            self.time_data[:-count] = self.time_data[count:]
            self.time_data[-count:] = samples

    def analyse(self):
        """
        バッファの内容からバイト値のスペクトラムを計算

        Returns
        -------
        ndarray
            周波数ごとの振幅（uint8、長さはfft_sizeの半分）
        """
        spectrum = rfft(self.time_data * self.window)[:self.frequency_bin_count]
        magnitude = np.abs(spectrum) / self.fft_size

        # 前回の結果と平滑化
        tau = self.smoothing_time_constant
        self.smoothed = tau * self.smoothed + (1 - tau) * magnitude

        # デシベルに変換して0〜255に割り当てる
        spectrum_db = 20 * np.log10(np.maximum(self.smoothed, 1e-20))
        scale = 255.0 / (self.max_decibels - self.min_decibels)
        scaled = np.floor((spectrum_db - self.min_decibels) * scale)
        np.copyto(self.frequency_data, np.clip(scaled, 0, 255).astype(np.uint8))
        return self.frequency_data

    def get_byte_frequency_data(self):
        """
        直近に計算したスペクトラムを返す（再計算はしない）
        """
        return self.frequency_data
