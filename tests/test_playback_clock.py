"""Tests for the PlaybackClock."""

import pytest

from lounge_visualizer.playback_clock import PlaybackClock


class Flag:
    def __init__(self, value=True):
        self.value = value

    def __call__(self):
        return self.value


class TestPlaybackClock:
    def test_initial_display(self):
        clock = PlaybackClock(Flag())
        assert (clock.minutes, clock.seconds) == ("00", "00")
        assert clock.duration == 0

    @pytest.mark.parametrize("ticks, expected", [
        (1, ("00", "01")),
        (9, ("00", "09")),
        (59, ("00", "59")),
        (60, ("01", "00")),
        (65, ("01", "05")),
        (3599, ("59", "59")),
        (6000, ("100", "00")),
    ])
    def test_ticks_count_whole_seconds(self, ticks, expected):
        """N ticks while playing display N elapsed seconds."""
        clock = PlaybackClock(Flag())
        clock.reset()
        for _ in range(ticks):
            clock.tick()
        assert (clock.minutes, clock.seconds) == expected
        assert clock.duration == ticks * 1000

    def test_tick_is_noop_when_not_playing(self):
        flag = Flag()
        clock = PlaybackClock(flag)
        for _ in range(7):
            clock.tick()

        flag.value = False
        for _ in range(30):
            clock.tick()

        assert clock.text == "00:07"
        assert clock.duration == 7000

    def test_reset_returns_to_zero(self):
        clock = PlaybackClock(Flag())
        for _ in range(125):
            clock.tick()
        assert clock.text == "02:05"

        clock.reset()
        assert clock.text == "00:00"
        assert clock.elapsed == 0
