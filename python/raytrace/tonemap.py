"""
Tone reproduction: HDR radiance to displayable LDR pixels.

Every operator works per channel and is stateless, so frames can be mapped
independently and in any order.
"""
import math
from enum import Enum
from typing import Tuple

from .errors import RenderConfigError
from .vecmath import Color, clamp01

DEFAULT_GAMMA = 2.2

# Filmic curve constants (Narkowicz fit of the ACES reference transform).
ACES_A = 2.51
ACES_B = 0.03
ACES_C = 2.43
ACES_D = 0.59
ACES_E = 0.14

# Largest float below 1.0; asymptotic operators never reach full white.
BELOW_ONE = math.nextafter(1.0, 0.0)


class ToneMapOperator(str, Enum):
    REINHARD = "reinhard"
    ACES_FILMIC = "aces_filmic"
    EXPOSURE = "exposure"

    @classmethod
    def parse(cls, value) -> "ToneMapOperator":
        """Accept an operator or a case-insensitive name ("ACESFilmic", "aces-filmic", ...)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace("-", "_").replace(" ", "_")
            key = {"acesfilmic": "aces_filmic", "aces": "aces_filmic"}.get(key, key)
            for op in cls:
                if op.value == key:
                    return op
        names = ", ".join(op.value for op in cls)
        raise RenderConfigError(f"unknown tone-mapping operator {value!r} (expected one of {names})")


def reinhard(x: float) -> float:
    return min(x / (1.0 + x), BELOW_ONE)

def aces_filmic(x: float) -> float:
    return clamp01((x * (ACES_A * x + ACES_B)) / (x * (ACES_C * x + ACES_D) + ACES_E))

def exposure(x: float, exposure_value: float = 1.0) -> float:
    return min(-math.expm1(-exposure_value * x), BELOW_ONE)


def tone_map_color(c: Color, operator: ToneMapOperator = ToneMapOperator.ACES_FILMIC,
                   exposure_value: float = 1.0) -> Color:
    """Map one HDR color into [0, 1]^3. Negative inputs are treated as 0."""
    r, g, b = (max(0.0, c[0]), max(0.0, c[1]), max(0.0, c[2]))
    if operator is ToneMapOperator.REINHARD:
        return (reinhard(r), reinhard(g), reinhard(b))
    if operator is ToneMapOperator.ACES_FILMIC:
        return (aces_filmic(r), aces_filmic(g), aces_filmic(b))
    if operator is ToneMapOperator.EXPOSURE:
        return (exposure(r, exposure_value), exposure(g, exposure_value), exposure(b, exposure_value))
    raise RenderConfigError(f"unsupported tone-mapping operator {operator!r}")


def gamma_correct(c: Color, gamma: float = DEFAULT_GAMMA) -> Color:
    """Gamma correction."""
    inv_gamma = 1.0 / gamma
    return (pow(clamp01(c[0]), inv_gamma), pow(clamp01(c[1]), inv_gamma), pow(clamp01(c[2]), inv_gamma))


def quantize(c: Color) -> Tuple[int, int, int]:
    """Convert to 0-255."""
    return (int(clamp01(c[0]) * 255), int(clamp01(c[1]) * 255), int(clamp01(c[2]) * 255))


def to_display(c: Color, operator: ToneMapOperator = ToneMapOperator.ACES_FILMIC,
               exposure_value: float = 1.0, gamma: float = DEFAULT_GAMMA) -> Tuple[int, int, int]:
    """Tone map, gamma correct and quantize a single pixel."""
    return quantize(gamma_correct(tone_map_color(c, operator, exposure_value), gamma))
