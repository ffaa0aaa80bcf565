"""Drawing surface for the meter face.

The meter only ever needs four primitives, a saved background for the
static faces and a "frame done" call, so the rest of the code talks to a
small Canvas protocol.  PygameCanvas implements
it on a pygame Surface, optionally backed by the display window.
"""

from typing import Callable, Protocol

import pygame

Colour = tuple[int, int, int]

DARKER_FACTOR = 0.7


class Canvas(Protocol):
    def fill_rect(self, x: int, y: int, w: int, h: int, colour: Colour) -> None: ...

    def draw_rect(self, x: int, y: int, w: int, h: int, colour: Colour) -> None: ...

    def draw_line(self, x1: int, y1: int, x2: int, y2: int, colour: Colour) -> None: ...

    def fill_gradient(self, x: int, y: int, w: int, h: int,
                      top: Colour, bottom: Colour) -> None: ...

    def save_background(self) -> None: ...

    def restore_background(self) -> None: ...

    def present(self) -> None: ...


def darker(colour: Colour) -> Colour:
    """Scale each component by 0.7, truncating."""
    return tuple(max(int(c * DARKER_FACTOR), 0) for c in colour)


def parse_colour(text: str) -> Colour:
    """Parse ``"r,g,b"``, ``"#rrggbb"`` or a pygame colour name."""
    if "," in text:
        parts = [int(p) for p in text.split(",")]
        if len(parts) != 3 or any(not 0 <= p <= 255 for p in parts):
            raise ValueError(f"expected r,g,b with components 0-255: {text!r}")
        return tuple(parts)
    c = pygame.Color(text)
    return (c.r, c.g, c.b)


def _tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


class PygameCanvas:
    """Canvas on a pygame Surface.

    Rectangle outlines cover ``w + 1`` by ``h + 1`` pixels and lines include
    both end points.
    """

    def __init__(self, surface: pygame.Surface,
                 on_close: Callable[[], None] | None = None,
                 display: bool = False):
        self._surface = surface
        self._on_close = on_close
        self._display = display
        self._background: pygame.Surface | None = None

    @classmethod
    def open_window(cls, size: tuple[int, int], caption: str,
                    on_close: Callable[[], None] | None = None) -> "PygameCanvas":
        """Create the display window and a canvas drawing into it."""
        pygame.display.init()
        pygame.display.set_caption(caption)
        screen = pygame.display.set_mode(size)
        return cls(screen, on_close=on_close, display=True)

    def fill_rect(self, x, y, w, h, colour):
        if w > 0 and h > 0:
            self._surface.fill(colour, pygame.Rect(x, y, w, h))

    def draw_rect(self, x, y, w, h, colour):
        pygame.draw.rect(self._surface, colour, pygame.Rect(x, y, w + 1, h + 1), 1)

    def draw_line(self, x1, y1, x2, y2, colour):
        pygame.draw.line(self._surface, colour, (x1, y1), (x2, y2))

    def fill_gradient(self, x, y, w, h, top, bottom):
        if w <= 0 or h <= 0:
            return
        r1, g1, b1 = top
        r2, g2, b2 = bottom
        for row in range(h):
            colour = (r1 + _tdiv((r2 - r1) * row, h),
                      g1 + _tdiv((g2 - g1) * row, h),
                      b1 + _tdiv((b2 - b1) * row, h))
            self._surface.fill(colour, pygame.Rect(x, y + row, w, 1))

    def save_background(self):
        """Remember the current picture; restore_background() puts it back."""
        self._background = self._surface.copy()

    def restore_background(self):
        if self._background is not None:
            self._surface.blit(self._background, (0, 0))

    def present(self):
        if not self._display:
            return
        pygame.display.flip()
        for event in pygame.event.get():
            closing = (event.type == pygame.QUIT or
                       (event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE))
            if closing and self._on_close is not None:
                self._on_close()
