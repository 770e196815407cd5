"""Render job configuration."""
import math
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Union

from .errors import RenderConfigError
from .tonemap import DEFAULT_GAMMA, ToneMapOperator
from .vecmath import BLACK, Color, Vec3, as_vec3, is_finite, lerp

# Logging defaults, overridable from the environment.
LOG_LEVEL = os.getenv("RAYTRACE_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("RAYTRACE_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def _color(value, name: str) -> Color:
    try:
        c = as_vec3(value, name)
    except ValueError as exc:
        raise RenderConfigError(str(exc)) from exc
    if not is_finite(c) or min(c) < 0.0:
        raise RenderConfigError(f"{name} must be finite and non-negative, got {c}")
    return c


@dataclass(frozen=True)
class SkyGradient:
    """Background blended from horizon to zenith by the ray's vertical component."""
    horizon: Color = (0.1, 0.12, 0.15)
    zenith: Color = (0.3, 0.4, 0.5)

    def __post_init__(self):
        object.__setattr__(self, "horizon", _color(self.horizon, "sky horizon"))
        object.__setattr__(self, "zenith", _color(self.zenith, "sky zenith"))

    def color(self, direction: Vec3) -> Color:
        t = 0.5 * (direction[1] + 1.0)
        return lerp(self.horizon, self.zenith, t)


Background = Union[Color, SkyGradient]


def background_color(background: Background, direction: Vec3) -> Color:
    if isinstance(background, SkyGradient):
        return background.color(direction)
    return background


def _positive_int(value, name: str, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise RenderConfigError(f"{name} must be an integer >= {minimum}, got {value!r}")
    return value


def _positive_float(value, name: str, allow_zero: bool = False) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise RenderConfigError(f"{name} must be a finite number, got {value!r}")
    if value < 0.0 or (value == 0.0 and not allow_zero):
        raise RenderConfigError(f"{name} must be {'>=' if allow_zero else '>'} 0, got {value!r}")
    return float(value)


@dataclass(frozen=True)
class RenderConfig:
    """
    Settings for one render job. Validated on construction so a bad job is
    refused before any pixel is traced.

    Attributes:
        width, height: Image resolution in pixels
        max_depth: Recursion limit; 0 renders black wherever a ray is traced
        samples_per_pixel: Camera rays averaged per pixel
        shadow_samples: Shadow rays per light per shading point
        tone_map: Operator used by to_ldr()
        exposure: Exposure constant (only used by the exposure operator)
        gamma: Display gamma
        background: Constant color or SkyGradient seen by escaping rays
        min_weight: Paths whose throughput drops below this stop early
        lights_visible: Rays reaching a light before any primitive return its radiance
        fps: Frame rate used to turn a frame index into animation time
        seed: Base seed for every random decision in the render
        workers: Worker processes per frame (1 renders inline)
    """
    width: int = 320
    height: int = 180
    max_depth: int = 5
    samples_per_pixel: int = 1
    shadow_samples: int = 1
    tone_map: ToneMapOperator = ToneMapOperator.ACES_FILMIC
    exposure: float = 1.0
    gamma: float = DEFAULT_GAMMA
    background: Background = BLACK
    min_weight: float = 1e-3
    lights_visible: bool = True
    fps: float = 24.0
    seed: int = 0
    workers: Optional[int] = 1

    def __post_init__(self):
        _positive_int(self.width, "width", 1)
        _positive_int(self.height, "height", 1)
        _positive_int(self.max_depth, "max_depth", 0)
        _positive_int(self.samples_per_pixel, "samples_per_pixel", 1)
        _positive_int(self.shadow_samples, "shadow_samples", 1)
        object.__setattr__(self, "tone_map", ToneMapOperator.parse(self.tone_map))
        object.__setattr__(self, "exposure", _positive_float(self.exposure, "exposure"))
        object.__setattr__(self, "gamma", _positive_float(self.gamma, "gamma"))
        object.__setattr__(self, "min_weight",
                           _positive_float(self.min_weight, "min_weight", allow_zero=True))
        object.__setattr__(self, "fps", _positive_float(self.fps, "fps"))
        if not isinstance(self.background, SkyGradient):
            object.__setattr__(self, "background", _color(self.background, "background"))
        if not isinstance(self.lights_visible, bool):
            raise RenderConfigError(f"lights_visible must be a bool, got {self.lights_visible!r}")
        if isinstance(self.seed, bool) or not isinstance(self.seed, int):
            raise RenderConfigError(f"seed must be an integer, got {self.seed!r}")
        if self.workers is None:
            object.__setattr__(self, "workers", os.cpu_count() or 1)
        else:
            _positive_int(self.workers, "workers", 1)

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def frame_time(self, frame_index: int) -> float:
        return frame_index / self.fps

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RenderConfig":
        """Build from the "render" section of a scene document."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise RenderConfigError(f"unknown render settings: {', '.join(unknown)}")
        kwargs = dict(data)
        bg = kwargs.get("background")
        if isinstance(bg, dict):
            try:
                kwargs["background"] = SkyGradient(**bg)
            except TypeError as exc:
                raise RenderConfigError(f"invalid sky gradient: {exc}") from exc
        return cls(**kwargs)
