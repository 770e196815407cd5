"""
Spherical area lights.

A SphereLight emits uniform radiance (color * intensity). Sampling points
inside its volume and averaging shadow-ray visibility over several samples
produces soft shadows; radius 0 degenerates to a point light.
"""
import math
from dataclasses import dataclass
from typing import NamedTuple, Optional

from .errors import SceneConfigError
from .geometry import Ray
from .sampling import Sampler
from .vecmath import WHITE, Color, Vec3, as_vec3, dot, is_finite, length, mul, sub


class Illumination(NamedTuple):
    direction: Vec3  # unit vector from the shaded point toward the light sample
    distance: float
    radiance: Color


@dataclass(frozen=True)
class SphereLight:
    center: Vec3
    radius: float = 0.0
    color: Color = WHITE
    intensity: float = 1.0

    def __post_init__(self):
        try:
            center = as_vec3(self.center, "light center")
            color = as_vec3(self.color, "light color")
        except ValueError as exc:
            raise SceneConfigError(str(exc)) from exc
        if not is_finite(center):
            raise SceneConfigError(f"light center must be finite, got {center}")
        if not is_finite(color) or min(color) < 0.0:
            raise SceneConfigError(f"light color must be finite and non-negative, got {color}")
        if not (isinstance(self.radius, (int, float)) and math.isfinite(self.radius)
                and self.radius >= 0.0):
            raise SceneConfigError(f"light radius must be >= 0, got {self.radius!r}")
        if not (isinstance(self.intensity, (int, float)) and math.isfinite(self.intensity)
                and self.intensity > 0.0):
            raise SceneConfigError(f"light intensity must be > 0, got {self.intensity!r}")
        object.__setattr__(self, "center", center)
        object.__setattr__(self, "color", color)
        object.__setattr__(self, "radius", float(self.radius))
        object.__setattr__(self, "intensity", float(self.intensity))

    @property
    def radiance(self) -> Color:
        return mul(self.color, self.intensity)

    @property
    def is_point(self) -> bool:
        return self.radius == 0.0

    def surface_area(self) -> float:
        return 4.0 * math.pi * self.radius * self.radius

    def luminous_flux(self) -> float:
        r, g, b = self.radiance
        return (r + g + b) / 3.0 * self.surface_area()

    def sample_point(self, sampler: Sampler) -> Vec3:
        """Uniform point inside the light's ball."""
        return sampler.scaled_ball_point(self.center, self.radius)

    def illuminate(self, hit_point: Vec3, light_point: Optional[Vec3] = None) -> Optional[Illumination]:
        """
        Direction, distance and radiance from hit_point toward a light sample.

        Defaults to the light center. Returns None when hit_point coincides
        with the sample.
        """
        target = self.center if light_point is None else light_point
        to_light = sub(target, hit_point)
        distance = length(to_light)
        if distance < 1e-12:
            return None
        return Illumination(mul(to_light, 1.0 / distance), distance, self.radiance)

    def intersect(self, ray: Ray, t_min: Optional[float] = None,
                  t_max: Optional[float] = None) -> Optional[float]:
        """Distance along ray to the light's surface, or None."""
        if self.radius <= 0.0:
            return None
        lo = ray.t_min if t_min is None else t_min
        hi = ray.t_max if t_max is None else t_max
        oc = sub(ray.origin, self.center)
        a = dot(ray.direction, ray.direction)
        if a == 0.0:
            return None
        half_b = dot(oc, ray.direction)
        c = dot(oc, oc) - self.radius * self.radius
        disc = half_b * half_b - a * c
        if disc < 0.0:
            return None
        sdisc = math.sqrt(disc)
        for t in ((-half_b - sdisc) / a, (-half_b + sdisc) / a):
            if lo <= t <= hi:
                return t
        return None
