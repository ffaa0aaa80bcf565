"""Meter face layout and drawing.

Everything is laid out as a fraction of one channel's width ``w`` (half the
window).  Divisions truncate like integer pixel arithmetic, so the layout is
identical for a given width whatever canvas draws it.

    +--------------------------------------+
    |  ##|''''|''''|''''|''''|''''|@@      |   ruler at (w/16, w/8)
    |                                      |
    |          needle pivot below          |
    |             [  bezel  ]              |   bezel at (5w/16, 3w/8)
    +--------------------------------------+
"""

import math

from meter_canvas import Canvas, Colour, darker

RULER_SEGMENTS = 7
SUB_TICKS = 6               # sub-divisions per segment (five inner ticks)
MIN_SUB_TICK_SEGMENT = 12   # px; narrower segments get no sub-ticks


def needle_angle(deflection: float) -> float:
    """Needle angle in radians: -45 degrees at 0, +45 degrees at 1."""
    return deflection * math.pi / 2 - math.pi / 4


def needle_line(width: int, deflection: float) -> tuple[int, int, int, int]:
    """Return (x1, y1, x2, y2) of the needle for a face ``width`` wide.

    (x1, y1) is the needle tip, (x2, y2) where it disappears under the bezel.
    """
    angle = needle_angle(deflection)
    half = width // 2
    length = width * 8 // 16
    x1 = int(half + length * math.sin(angle))
    y1 = int(width * 9 // 16 - length * math.cos(angle))
    x2 = int(half + width * 3 // 16 * math.tan(angle))
    y2 = width * 3 // 8
    return x1, y1, x2, y2


def bezel_rect(width: int) -> tuple[int, int, int, int]:
    return width * 5 // 16, width * 3 // 8, width * 6 // 16, width // 16


def ruler_rect(width: int) -> tuple[int, int, int, int]:
    return width // 16, width // 8, width * 14 // 16, width // 16


def ruler_ticks(width: int) -> list[tuple[int, int, int, int]]:
    """Tick lines of the ruler's inner segments, as (x1, y1, x2, y2).

    For each of the five inner segments: the top edge, the big tick at its
    left boundary and, if the segment is wide enough, five sub-ticks.
    """
    x, y, w, h = ruler_rect(width)
    segment = w // RULER_SEGMENTS
    lines = []
    if segment <= 0:
        return lines
    for n in range(x + segment, x + segment * (RULER_SEGMENTS - 1), segment):
        lines.append((n, y, n + segment, y))
        lines.append((n, y, n, y + h - 1))
        if segment >= MIN_SUB_TICK_SEGMENT:
            for v in range(1, SUB_TICKS):
                sx = n + segment * v // SUB_TICKS
                lines.append((sx, y, sx, y + h // 2))
    return lines


def _offset(rect, dx):
    x, y, w, h = rect
    return x + dx, y, w, h


def draw_ruler(canvas: Canvas, width: int, foreground: Colour, peak: Colour,
               origin: int = 0):
    x, y, w, h = ruler_rect(width)
    segment = w // RULER_SEGMENTS
    canvas.fill_rect(origin + x, y, segment, h, foreground)
    for x1, y1, x2, y2 in ruler_ticks(width):
        canvas.draw_line(origin + x1, y1, origin + x2, y2, foreground)
    canvas.fill_rect(origin + x + segment * (RULER_SEGMENTS - 1), y, segment, h, peak)


def draw_meter(canvas: Canvas, width: int, background: Colour,
               foreground: Colour, peak: Colour, origin: int = 0):
    """Draw one static meter face (no needle) with its left edge at ``origin``."""
    canvas.fill_gradient(origin, 0, width, width // 2,
                         darker(darker(background)), background)
    canvas.draw_rect(*_offset(bezel_rect(width), origin), foreground)
    draw_ruler(canvas, width, foreground, peak, origin)


def draw_needle(canvas: Canvas, width: int, colour: Colour, deflection: float,
                origin: int = 0):
    x1, y1, x2, y2 = needle_line(width, deflection)
    canvas.draw_line(origin + x1, y1, origin + x2, y2, colour)
