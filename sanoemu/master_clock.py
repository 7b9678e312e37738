"""Cycle bookkeeping that keeps the three CPUs, video and audio in step."""

from __future__ import annotations

import time
from typing import Callable, ClassVar

ScanlineCallback = Callable[[int], None]
EventCallback = Callable[[], None]


def _now_us() -> int:
    return time.monotonic_ns() // 1000


class MasterClock:
    """Tracks per-CPU cycles and derives scanline, pixel and audio timing.

    The graphics CPU runs at the pixel clock and acts as the master clock:
    one graphics cycle is one pixel.
    """

    MAIN_CPU_FREQ: ClassVar[int] = 7_159_000
    GRAPHICS_CPU_FREQ: ClassVar[int] = 13_500_000
    SOUND_CPU_FREQ: ClassVar[int] = 4_773_000

    PIXEL_CLOCK: ClassVar[int] = 13_500_000
    FRAME_RATE: ClassVar[int] = 60
    SCANLINES_PER_FRAME: ClassVar[int] = 240
    TOTAL_SCANLINES: ClassVar[int] = 262
    PIXELS_PER_SCANLINE: ClassVar[int] = 858
    HBLANK_START_PIXEL: ClassVar[int] = 720

    AUDIO_SAMPLE_RATE: ClassVar[int] = 32_000

    CYCLES_PER_FRAME_MAIN: ClassVar[int] = MAIN_CPU_FREQ // FRAME_RATE
    CYCLES_PER_FRAME_GRAPHICS: ClassVar[int] = GRAPHICS_CPU_FREQ // FRAME_RATE
    CYCLES_PER_FRAME_SOUND: ClassVar[int] = SOUND_CPU_FREQ // FRAME_RATE
    CYCLES_PER_SCANLINE_GRAPHICS: ClassVar[int] = GRAPHICS_CPU_FREQ // (FRAME_RATE * TOTAL_SCANLINES)
    AUDIO_SAMPLES_PER_FRAME: ClassVar[int] = AUDIO_SAMPLE_RATE // FRAME_RATE

    def __init__(self) -> None:
        self.on_scanline: ScanlineCallback | None = None
        self.on_vblank: EventCallback | None = None
        self.on_audio_sample: EventCallback | None = None
        self.reset()

    def reset(self) -> None:
        """Zero every counter and restart performance tracking; callbacks are kept."""
        self._main_cycles = 0
        self._graphics_cycles = 0
        self._sound_cycles = 0
        self._master_cycles = 0
        self._frame_count = 0
        self._scanline = 0
        self._pixel = 0
        self._audio_sample_counter = 0
        self._audio_samples_this_frame = 0

        self._target_main = self.CYCLES_PER_FRAME_MAIN
        self._target_graphics = self.CYCLES_PER_FRAME_GRAPHICS
        self._target_sound = self.CYCLES_PER_FRAME_SOUND

        self._real_time_start = _now_us()
        self._emulated_time_start = 0

    # Counters -------------------------------------------------------------

    @property
    def main_cpu_cycles(self) -> int:
        return self._main_cycles

    @property
    def graphics_cpu_cycles(self) -> int:
        return self._graphics_cycles

    @property
    def sound_cpu_cycles(self) -> int:
        return self._sound_cycles

    @property
    def master_cycles(self) -> int:
        return self._master_cycles

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def current_scanline(self) -> int:
        return self._scanline

    @property
    def current_pixel(self) -> int:
        return self._pixel

    @property
    def audio_sample_count(self) -> int:
        return self._audio_sample_counter

    @property
    def audio_samples_this_frame(self) -> int:
        return self._audio_samples_this_frame

    # Cycle tracking ---------------------------------------------------------

    def add_main_cpu_cycles(self, cycles: int) -> None:
        self._main_cycles += cycles
        # The master count follows the graphics CPU, not the main CPU.
        self._master_cycles = self._graphics_cycles
        self._update_video_timing()
        self._update_audio_timing()

    def add_graphics_cpu_cycles(self, cycles: int) -> None:
        self._graphics_cycles += cycles
        self._master_cycles = self._graphics_cycles
        self._update_video_timing()
        self._update_audio_timing()

    def add_sound_cpu_cycles(self, cycles: int) -> None:
        self._sound_cycles += cycles
        self._update_audio_timing()

    # Video timing -----------------------------------------------------------

    def _update_video_timing(self) -> None:
        cycles_this_frame = self._graphics_cycles % (self.GRAPHICS_CPU_FREQ // self.FRAME_RATE)
        old_scanline = self._scanline
        self._scanline, self._pixel = divmod(cycles_this_frame, self.PIXELS_PER_SCANLINE)

        if self._scanline != old_scanline and self.on_scanline is not None:
            self.on_scanline(self._scanline)

        if (old_scanline < self.SCANLINES_PER_FRAME <= self._scanline
                and self.on_vblank is not None):
            self.on_vblank()

    def advance_scanline(self) -> None:
        """Step to the next scanline, wrapping and counting a frame at the end."""
        self._scanline += 1
        self._pixel = 0
        if self._scanline >= self.TOTAL_SCANLINES:
            self._scanline = 0
            self._frame_count += 1

        if self.on_scanline is not None:
            self.on_scanline(self._scanline)

        if self._scanline == self.SCANLINES_PER_FRAME and self.on_vblank is not None:
            self.on_vblank()

    def is_vblank(self) -> bool:
        return self._scanline >= self.SCANLINES_PER_FRAME

    def is_hblank(self) -> bool:
        return self._pixel >= self.HBLANK_START_PIXEL

    # Audio timing -----------------------------------------------------------

    def _update_audio_timing(self) -> None:
        expected = (self._master_cycles * self.AUDIO_SAMPLE_RATE) // self.GRAPHICS_CPU_FREQ
        while self._audio_sample_counter < expected:
            if self.on_audio_sample is not None:
                self.on_audio_sample()
            self._audio_sample_counter += 1
            self._audio_samples_this_frame += 1

    def check_callbacks(self) -> None:
        """Re-evaluate video and audio timing, firing any pending events."""
        self._update_video_timing()
        self._update_audio_timing()

    # Frame synchronisation --------------------------------------------------

    def run_frame(self) -> None:
        """Set the cycle targets for the next frame and count the frame."""
        self._target_main = self._main_cycles + self.CYCLES_PER_FRAME_MAIN
        self._target_graphics = self._graphics_cycles + self.CYCLES_PER_FRAME_GRAPHICS
        self._target_sound = self._sound_cycles + self.CYCLES_PER_FRAME_SOUND
        self._audio_samples_this_frame = 0
        self._frame_count += 1

    def should_run_main_cpu(self) -> bool:
        return self._main_cycles < self._target_main

    def should_run_graphics_cpu(self) -> bool:
        return self._graphics_cycles < self._target_graphics

    def should_run_sound_cpu(self) -> bool:
        return self._sound_cycles < self._target_sound

    # Performance ------------------------------------------------------------

    def emulation_speed(self) -> float:
        """Emulated time over real time since reset; 1.0 means real time."""
        real_elapsed = _now_us() - self._real_time_start
        if real_elapsed == 0:
            return 1.0
        emulated_time = (self._graphics_cycles * 1_000_000) // self.GRAPHICS_CPU_FREQ
        emulated_elapsed = emulated_time - self._emulated_time_start
        return emulated_elapsed / real_elapsed