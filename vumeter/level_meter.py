"""Stereo needle meter: two sprung needles driven from live audio levels.

Two threads meet here:

  producer  sample_audio() reads audio blocks, converts the per-channel
            peak into a drive force and calls LevelMeter.set_force().
  consumer  LevelMeter.run() wakes every update period, advances both
            needles by the wall-clock time since the previous tick and
            draws them.

Forces and deflections live in one DriveState behind one lock, so a tick
always integrates a force pair that was written together.  The lock is never
held while reading audio or drawing.
"""

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from levels import force_from_amplitude, peak_amplitude
from meter_canvas import Canvas, Colour
from meter_face import draw_meter, draw_needle
from oscillator import DampedOscillator

# Needle physics: lightly underdamped (critical would be ~0.141).
MASS = 0.005
SPRING = 1.0
DAMPING = 0.08

WARMUP_SECONDS = 1.0


@dataclass
class DriveState:
    left_force: float = 0.0
    right_force: float = 0.0
    left_deflection: float = 0.0
    right_deflection: float = 0.0
    last_update: float | None = None


class LevelMeter:
    """Stereo VU meter whose needles move like a real voice-coil meter."""

    def __init__(self, width: int, background: Colour, foreground: Colour,
                 peak: Colour, hz: int,
                 clock: Callable[[], float] = time.monotonic):
        """
        Args:
            width:      Window width in pixels; each channel gets half.
            background: Face colour (the top of the face is a darker shade).
            foreground: Needle, bezel and ruler colour.
            peak:       Colour of the ruler's end segment.
            hz:         Target update frequency.
            clock:      Monotonic time source in seconds.
        """
        self.width = width
        self.background = background
        self.foreground = foreground
        self.peak = peak
        self.update_millis = math.floor(1000 / hz + 0.5)
        self._clock = clock

        self._left = DampedOscillator(MASS, SPRING, DAMPING)
        self._right = DampedOscillator(MASS, SPRING, DAMPING)
        self._state = DriveState()
        self._lock = threading.Lock()
        self._stop_evt = threading.Event()
        self._face_canvas = None

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.width // 4

    @property
    def stopped(self) -> bool:
        return self._stop_evt.is_set()

    def set_force(self, left: float, right: float):
        """Set the drive force on each needle.  Called by the producer."""
        with self._lock:
            self._state.left_force = left
            self._state.right_force = right

    def forces(self) -> tuple[float, float]:
        with self._lock:
            return self._state.left_force, self._state.right_force

    def deflections(self) -> tuple[float, float]:
        with self._lock:
            return self._state.left_deflection, self._state.right_deflection

    def _elapsed_millis(self, now: float) -> int:
        # Whole milliseconds; the fractional remainder carries into the next tick.
        last = self._state.last_update
        if last is None:
            self._state.last_update = now
            return 0
        millis = int((now - last) * 1000)
        if millis > 0:
            self._state.last_update = last + millis / 1000
        return millis

    def advance(self) -> tuple[float, float]:
        """Advance both needles to the current time and return the deflections."""
        now = self._clock()
        with self._lock:
            dt = self._elapsed_millis(now)
            s = self._state
            s.left_deflection = self._left.integrate_bounded(s.left_force, 0.0, 1.0, dt)
            s.right_deflection = self._right.integrate_bounded(s.right_force, 0.0, 1.0, dt)
            return s.left_deflection, s.right_deflection

    def advance_and_render(self, canvas: Canvas):
        left, right = self.advance()
        self.draw(canvas, left, right)

    def draw(self, canvas: Canvas, left: float, right: float):
        half = self.width // 2
        if self._face_canvas is not canvas:
            for origin in (0, half):
                draw_meter(canvas, half, self.background, self.foreground, self.peak, origin)
            canvas.save_background()
            self._face_canvas = canvas
        else:
            canvas.restore_background()
        for origin, deflection in ((0, left), (half, right)):
            draw_needle(canvas, half, self.foreground, deflection, origin)
        canvas.present()

    def run(self, canvas: Canvas):
        """Update and draw at the configured rate until stop() is called."""
        with self._lock:
            self._state.last_update = self._clock()
        period = self.update_millis / 1000
        while not self._stop_evt.is_set():
            if self._stop_evt.wait(timeout=period):
                break
            self.advance_and_render(canvas)

    def stop(self):
        """Ask run() to return after its current iteration."""
        self._stop_evt.set()


def sample_audio(meter: LevelMeter, read: Callable[[], bytes],
                 warmup: float = WARMUP_SECONDS):
    """Feed the meter from a blocking audio source until it is stopped.

    Both needles are first swung to full scale for ``warmup`` seconds.

    If ``read`` raises, the meter is stopped and the error propagates.

    Args:
        meter: The meter to drive.
        read:  Returns the next block of big-endian 16-bit stereo frames.
        warmup: Length of the start-up needle sweep in seconds.
    """
    try:
        if warmup > 0:
            meter.set_force(1.0, 1.0)
            time.sleep(warmup)
        while not meter.stopped:
            buffer = read()
            meter.set_force(force_from_amplitude(peak_amplitude(buffer, 0)),
                            force_from_amplitude(peak_amplitude(buffer, 1)))
    finally:
        meter.stop()
