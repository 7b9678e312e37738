from unittest import mock

import pytest

from sanoemu.master_clock import MasterClock


@pytest.fixture
def clock():
    return MasterClock()


def test_fresh_clock_is_zeroed(clock):
    assert clock.main_cpu_cycles == 0
    assert clock.graphics_cpu_cycles == 0
    assert clock.sound_cpu_cycles == 0
    assert clock.master_cycles == 0
    assert clock.frame_count == 0
    assert clock.current_scanline == 0
    assert clock.current_pixel == 0


def test_frame_target_is_exactly_one_frame_of_main_cycles(clock):
    clock.add_main_cpu_cycles(MasterClock.MAIN_CPU_FREQ // MasterClock.FRAME_RATE - 1)
    assert clock.should_run_main_cpu()
    clock.add_main_cpu_cycles(1)
    assert not clock.should_run_main_cpu()


def test_graphics_cycles_set_scanline_and_pixel(clock):
    clock.add_graphics_cpu_cycles(MasterClock.PIXELS_PER_SCANLINE * 3 + 5)
    assert clock.current_scanline == 3
    assert clock.current_pixel == 5
    assert clock.master_cycles == clock.graphics_cpu_cycles


def test_scanline_callback_fires_on_change(clock):
    seen = []
    clock.on_scanline = seen.append
    clock.add_graphics_cpu_cycles(MasterClock.PIXELS_PER_SCANLINE - 1)
    assert seen == []
    clock.add_graphics_cpu_cycles(1)
    assert seen == [1]


def test_vblank_fires_when_crossing_visible_area(clock):
    vblanks = []
    clock.on_vblank = lambda: vblanks.append(True)
    clock.add_graphics_cpu_cycles(MasterClock.PIXELS_PER_SCANLINE * (MasterClock.SCANLINES_PER_FRAME - 1))
    assert vblanks == []
    assert not clock.is_vblank()
    clock.add_graphics_cpu_cycles(MasterClock.PIXELS_PER_SCANLINE)
    assert vblanks == [True]
    assert clock.is_vblank()


def test_hblank_starts_at_pixel_720(clock):
    clock.add_graphics_cpu_cycles(719)
    assert not clock.is_hblank()
    clock.add_graphics_cpu_cycles(1)
    assert clock.is_hblank()


def test_one_second_of_graphics_cycles_yields_sample_rate_samples(clock):
    samples = []
    clock.on_audio_sample = lambda: samples.append(1)
    clock.add_graphics_cpu_cycles(MasterClock.GRAPHICS_CPU_FREQ)
    assert len(samples) == MasterClock.AUDIO_SAMPLE_RATE
    assert clock.audio_sample_count == MasterClock.AUDIO_SAMPLE_RATE
    assert clock.audio_samples_this_frame == MasterClock.AUDIO_SAMPLE_RATE


def test_main_cycles_do_not_drive_master_clock(clock):
    samples = []
    clock.on_audio_sample = lambda: samples.append(1)
    clock.add_main_cpu_cycles(MasterClock.MAIN_CPU_FREQ)
    assert clock.main_cpu_cycles == MasterClock.MAIN_CPU_FREQ
    assert clock.master_cycles == 0
    assert samples == []


def test_sound_cycles_accumulate_without_moving_video(clock):
    clock.add_sound_cpu_cycles(MasterClock.PIXELS_PER_SCANLINE * 4)
    assert clock.sound_cpu_cycles == MasterClock.PIXELS_PER_SCANLINE * 4
    assert clock.current_scanline == 0


def test_check_callbacks_does_not_refire_caught_up_events(clock):
    clock.add_graphics_cpu_cycles(MasterClock.PIXELS_PER_SCANLINE * 2)
    events = []
    clock.on_scanline = events.append
    clock.on_audio_sample = lambda: events.append("audio")
    clock.check_callbacks()
    assert events == []
    assert clock.current_scanline == 2


def test_advance_scanline_wraps_and_counts_frame(clock):
    lines = []
    vblanks = []
    clock.on_scanline = lines.append
    clock.on_vblank = lambda: vblanks.append(True)
    for _ in range(MasterClock.TOTAL_SCANLINES):
        clock.advance_scanline()
    assert clock.current_scanline == 0
    assert clock.current_pixel == 0
    assert clock.frame_count == 1
    assert len(lines) == MasterClock.TOTAL_SCANLINES
    assert lines[-1] == 0
    assert vblanks == [True]


def test_frame_targets_gate_cpus(clock):
    assert clock.should_run_main_cpu()
    assert clock.should_run_graphics_cpu()
    assert clock.should_run_sound_cpu()

    clock.add_main_cpu_cycles(MasterClock.CYCLES_PER_FRAME_MAIN)
    clock.add_graphics_cpu_cycles(MasterClock.CYCLES_PER_FRAME_GRAPHICS)
    clock.add_sound_cpu_cycles(MasterClock.CYCLES_PER_FRAME_SOUND)
    assert not clock.should_run_main_cpu()
    assert not clock.should_run_graphics_cpu()
    assert not clock.should_run_sound_cpu()

    clock.run_frame()
    assert clock.should_run_main_cpu()
    assert clock.should_run_graphics_cpu()
    assert clock.should_run_sound_cpu()
    assert clock.frame_count == 1
    assert clock.audio_samples_this_frame == 0


def test_reset_clears_counters_but_keeps_callbacks(clock):
    lines = []
    clock.on_scanline = lines.append
    clock.add_graphics_cpu_cycles(MasterClock.PIXELS_PER_SCANLINE * 2)
    clock.add_main_cpu_cycles(MasterClock.CYCLES_PER_FRAME_MAIN)
    clock.run_frame()
    clock.reset()
    assert clock.graphics_cpu_cycles == 0
    assert clock.main_cpu_cycles == 0
    assert clock.frame_count == 0
    assert clock.current_scanline == 0
    assert clock.should_run_main_cpu()
    clock.add_graphics_cpu_cycles(MasterClock.PIXELS_PER_SCANLINE)
    assert lines == [2, 1]


def test_emulation_speed_real_time():
    with mock.patch("time.monotonic_ns", return_value=0):
        clock = MasterClock()
    clock.add_graphics_cpu_cycles(MasterClock.GRAPHICS_CPU_FREQ)
    with mock.patch("time.monotonic_ns", return_value=1_000_000_000):
        assert clock.emulation_speed() == pytest.approx(1.0)
    with mock.patch("time.monotonic_ns", return_value=2_000_000_000):
        assert clock.emulation_speed() == pytest.approx(0.5)


def test_emulation_speed_with_no_elapsed_time_is_one():
    with mock.patch("time.monotonic_ns", return_value=5_000_000):
        clock = MasterClock()
        assert clock.emulation_speed() == 1.0