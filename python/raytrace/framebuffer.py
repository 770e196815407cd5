"""HDR frame buffer."""
from typing import Iterator, List, Sequence, Tuple

from .tonemap import DEFAULT_GAMMA, ToneMapOperator, to_display
from .vecmath import BLACK, Color, mul

LDRFrame = List[List[Tuple[int, int, int]]]

# Rec. 601 luma weights.
LUMA_WEIGHTS = (0.299, 0.587, 0.114)


class FrameBuffer:
    """
    width x height grid of linear HDR colors, stored row-major.

    The integrator writes each cell once; tone mapping reads it.
    """

    def __init__(self, width: int, height: int, fill: Color = BLACK):
        if width < 1 or height < 1:
            raise ValueError(f"frame size must be at least 1x1, got {width}x{height}")
        self.width = width
        self.height = height
        self._pixels: List[List[Color]] = [[fill] * width for _ in range(height)]

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Color]]) -> "FrameBuffer":
        if not rows or not rows[0]:
            raise ValueError("cannot build a frame buffer from empty rows")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise ValueError("all rows must have the same width")
        fb = cls(width, len(rows))
        fb._pixels = [list(row) for row in rows]
        return fb

    def get(self, x: int, y: int) -> Color:
        return self._pixels[y][x]

    def set(self, x: int, y: int, color: Color) -> None:
        self._pixels[y][x] = color

    def set_row(self, y: int, colors: Sequence[Color]) -> None:
        if len(colors) != self.width:
            raise ValueError(f"row {y} has {len(colors)} pixels, expected {self.width}")
        self._pixels[y] = list(colors)

    def rows(self) -> Iterator[List[Color]]:
        return iter(self._pixels)

    def clear(self, color: Color = BLACK) -> None:
        for row in self._pixels:
            row[:] = [color] * self.width

    def average_luminance(self) -> float:
        wr, wg, wb = LUMA_WEIGHTS
        total = 0.0
        for row in self._pixels:
            for r, g, b in row:
                total += wr * r + wg * g + wb * b
        return total / (self.width * self.height)

    def scaled(self, factor: float) -> "FrameBuffer":
        """Copy of this buffer with every pixel multiplied by factor."""
        return FrameBuffer.from_rows([[mul(c, factor) for c in row] for row in self._pixels])

    def to_ldr(self, operator: ToneMapOperator = ToneMapOperator.ACES_FILMIC,
               exposure_value: float = 1.0, gamma: float = DEFAULT_GAMMA) -> LDRFrame:
        """Row-major grid of (R, G, B) bytes."""
        return [[to_display(c, operator, exposure_value, gamma) for c in row]
                for row in self._pixels]

    def __repr__(self):
        return f"FrameBuffer({self.width}x{self.height})"
