"""
Surface materials and the shading contract.

A material is one of three immutable variants (Diffuse, Reflective,
Refractive). scatter() dispatches over the variant and decides the single
outgoing ray of a hit; direct_response() gives the per-light diffuse term.
Materials are shared by reference between all primitives that use them.
"""
import math
from dataclasses import dataclass
from typing import NamedTuple, Optional, Union

from .errors import SceneConfigError
from .geometry import RAY_EPSILON, HitRecord, Ray
from .sampling import Sampler
from .vecmath import (
    BLACK, WHITE, Color, Vec3, add, as_vec3, dot, is_finite, mul, norm, reflect,
    refract,
)


def _checked_color(value, name: str) -> Color:
    try:
        c = as_vec3(value, name)
    except ValueError as exc:
        raise SceneConfigError(str(exc)) from exc
    if not is_finite(c) or min(c) < 0.0:
        raise SceneConfigError(f"{name} must be finite and non-negative, got {c}")
    return c


@dataclass(frozen=True)
class Diffuse:
    """Lambertian surface."""
    albedo: Color

    def __post_init__(self):
        object.__setattr__(self, "albedo", _checked_color(self.albedo, "diffuse albedo"))


@dataclass(frozen=True)
class Reflective:
    """Mirror, optionally blurred by a fuzz radius in [0, 1]."""
    albedo: Color = WHITE
    fuzz: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "albedo", _checked_color(self.albedo, "reflective albedo"))
        if not (isinstance(self.fuzz, (int, float)) and 0.0 <= self.fuzz <= 1.0):
            raise SceneConfigError(f"fuzz must lie in [0, 1], got {self.fuzz!r}")
        object.__setattr__(self, "fuzz", float(self.fuzz))


@dataclass(frozen=True)
class Refractive:
    """
    Dielectric (glass, water).

    tint scales every scatter event (white keeps the attenuation at 1).
    absorption is a per-channel Beer-Lambert coefficient applied to the
    distance a ray travels inside the medium.
    """
    refractive_index: float = 1.5
    tint: Color = WHITE
    absorption: Color = BLACK

    def __post_init__(self):
        ior = self.refractive_index
        if not (isinstance(ior, (int, float)) and math.isfinite(ior) and ior > 0.0):
            raise SceneConfigError(f"refractive index must be > 0, got {ior!r}")
        object.__setattr__(self, "refractive_index", float(ior))
        object.__setattr__(self, "tint", _checked_color(self.tint, "refractive tint"))
        object.__setattr__(self, "absorption",
                           _checked_color(self.absorption, "refractive absorption"))


Material = Union[Diffuse, Reflective, Refractive]
MATERIAL_TYPES = (Diffuse, Reflective, Refractive)


class ScatterResult(NamedTuple):
    attenuation: Color
    ray: Ray
    # Absorption coefficient of the medium the outgoing ray travels through.
    medium: Color = BLACK


def schlick(cosine: float, refractive_index: float) -> float:
    """Schlick's approximation of Fresnel reflectance."""
    r0 = (1.0 - refractive_index) / (1.0 + refractive_index)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * (1.0 - cosine) ** 5


def _offset_ray(point: Vec3, normal: Vec3, direction: Vec3) -> Ray:
    # Nudge the origin to the side of the surface the ray leaves from.
    side = RAY_EPSILON if dot(direction, normal) >= 0.0 else -RAY_EPSILON
    return Ray(add(point, mul(normal, side)), direction, RAY_EPSILON)


def scatter(material: Material, ray: Ray, hit: HitRecord, sampler: Sampler,
            medium: Color = BLACK) -> Optional[ScatterResult]:
    """
    Decide how an incoming ray continues after hitting a surface.

    Returns None when the surface absorbs the ray.
    """
    n = hit.normal
    if isinstance(material, Diffuse):
        direction = sampler.cosine_hemisphere(n)
        return ScatterResult(material.albedo, _offset_ray(hit.point, n, direction), medium)

    if isinstance(material, Reflective):
        direction = reflect(norm(ray.direction), n)
        if material.fuzz > 0.0:
            direction = norm(add(direction, mul(sampler.in_unit_sphere(), material.fuzz)))
        if dot(direction, n) <= 0.0:
            return None
        return ScatterResult(material.albedo, _offset_ray(hit.point, n, direction), medium)

    if isinstance(material, Refractive):
        ior = material.refractive_index
        eta_ratio = 1.0 / ior if hit.front_face else ior
        unit_dir = norm(ray.direction)
        cos_theta = min(-dot(unit_dir, n), 1.0)

        refracted = refract(unit_dir, n, eta_ratio)
        if refracted is None or sampler.random() < schlick(cos_theta, ior):
            direction = reflect(unit_dir, n)
            next_medium = medium
        else:
            direction = norm(refracted)
            next_medium = material.absorption if hit.front_face else BLACK
        return ScatterResult(material.tint, _offset_ray(hit.point, n, direction), next_medium)

    raise TypeError(f"unknown material type: {type(material).__name__}")


def direct_response(material: Material, normal: Vec3, to_light: Vec3) -> Color:
    """Fraction of light arriving from to_light that the surface sends back."""
    if isinstance(material, Diffuse):
        cos_theta = dot(normal, to_light)
        if cos_theta <= 0.0:
            return BLACK
        return mul(material.albedo, cos_theta)
    return BLACK


def beer_lambert(absorption: Color, distance: float) -> Color:
    """Transmittance through distance units of an absorbing medium."""
    if absorption == BLACK:
        return WHITE
    return (
        math.exp(-absorption[0] * distance),
        math.exp(-absorption[1] * distance),
        math.exp(-absorption[2] * distance),
    )
