"""
Geometry primitives: rays, hit records, spheres and triangles.

Each primitive exposes intersect(ray, t_min, t_max) returning a HitRecord
or None. A miss, a ray parallel to a triangle or a root outside the valid
range is an ordinary outcome, never an exception.
"""
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, NamedTuple, Optional, Tuple, Union

from .errors import SceneConfigError
from .vecmath import (
    Vec3, add, as_vec3, cross, dot, is_finite, length, mul, neg, norm, sub,
)

if TYPE_CHECKING:
    from .materials import Material

# Minimum ray parameter used to avoid self-intersection ("shadow acne").
RAY_EPSILON = 1e-4
# Triangle determinant below which the ray is treated as parallel.
PARALLEL_EPSILON = 1e-8
# Smallest accepted triangle area.
AREA_EPSILON = 1e-12


class Ray(NamedTuple):
    """Origin, unit direction and the valid parameter range."""
    origin: Vec3
    direction: Vec3
    t_min: float = RAY_EPSILON
    t_max: float = math.inf

    def at(self, t: float) -> Vec3:
        return add(self.origin, mul(self.direction, t))


def make_ray(origin: Vec3, direction: Vec3, t_min: float = RAY_EPSILON,
             t_max: float = math.inf) -> Ray:
    """Build a ray, normalizing its direction."""
    return Ray(origin, norm(direction), t_min, t_max)


class HitRecord(NamedTuple):
    """
    Result of a successful intersection query.

    normal always faces against the incoming ray; front_face tells whether
    the ray arrived from the outside of the primitive.
    """
    t: float
    point: Vec3
    normal: Vec3
    front_face: bool
    primitive: "Primitive"
    barycentric: Optional[Tuple[float, float, float]] = None

    @property
    def material(self):
        return self.primitive.material


def _face(direction: Vec3, outward: Vec3) -> Tuple[Vec3, bool]:
    front_face = dot(direction, outward) < 0.0
    return (outward if front_face else neg(outward)), front_face


@dataclass(frozen=True, eq=False)
class Sphere:
    center: Vec3
    radius: float
    material: "Material" = field(repr=False)

    def __post_init__(self):
        try:
            center = as_vec3(self.center, "sphere center")
        except ValueError as exc:
            raise SceneConfigError(str(exc)) from exc
        object.__setattr__(self, "center", center)
        if not is_finite(center):
            raise SceneConfigError(f"sphere center must be finite, got {center}")
        if not (isinstance(self.radius, (int, float)) and math.isfinite(self.radius)
                and self.radius > 0.0):
            raise SceneConfigError(f"sphere radius must be > 0, got {self.radius!r}")
        object.__setattr__(self, "radius", float(self.radius))

    def intersect(self, ray: Ray, t_min: Optional[float] = None,
                  t_max: Optional[float] = None) -> Optional[HitRecord]:
        """Solve |O + tD - C|^2 = r^2 and keep the smallest root in range."""
        lo = ray.t_min if t_min is None else t_min
        hi = ray.t_max if t_max is None else t_max
        ro, rd = ray.origin, ray.direction
        oc = sub(ro, self.center)
        a = dot(rd, rd)
        if a == 0.0:
            return None
        half_b = dot(oc, rd)
        c = dot(oc, oc) - self.radius * self.radius
        disc = half_b * half_b - a * c
        if disc < 0.0:
            return None

        sdisc = math.sqrt(disc)
        t = (-half_b - sdisc) / a
        if t < lo or t > hi:
            t = (-half_b + sdisc) / a
            if t < lo or t > hi:
                return None

        point = ray.at(t)
        outward = mul(sub(point, self.center), 1.0 / self.radius)
        normal, front_face = _face(rd, outward)
        return HitRecord(t, point, normal, front_face, self)

    def contains_point(self, point: Vec3) -> bool:
        d = sub(point, self.center)
        return dot(d, d) <= self.radius * self.radius

    def surface_area(self) -> float:
        return 4.0 * math.pi * self.radius * self.radius

    def bounds(self) -> Tuple[Vec3, Vec3]:
        r = self.radius
        c = self.center
        return (c[0] - r, c[1] - r, c[2] - r), (c[0] + r, c[1] + r, c[2] + r)


@dataclass(frozen=True, eq=False)
class Triangle:
    v0: Vec3
    v1: Vec3
    v2: Vec3
    material: "Material" = field(repr=False)

    def __post_init__(self):
        for name in ("v0", "v1", "v2"):
            try:
                v = as_vec3(getattr(self, name), f"triangle vertex {name}")
            except ValueError as exc:
                raise SceneConfigError(str(exc)) from exc
            if not is_finite(v):
                raise SceneConfigError(f"triangle vertex {name} must be finite, got {v}")
            object.__setattr__(self, name, v)
        if self.area() <= AREA_EPSILON:
            raise SceneConfigError(
                f"degenerate triangle (collinear vertices): {self.v0}, {self.v1}, {self.v2}")

    def _edge_cross(self) -> Vec3:
        return cross(sub(self.v1, self.v0), sub(self.v2, self.v0))

    def normal(self) -> Vec3:
        """Unit face normal following the v0 -> v1 -> v2 winding."""
        return norm(self._edge_cross())

    def area(self) -> float:
        return 0.5 * length(self._edge_cross())

    def centroid(self) -> Vec3:
        return mul(add(add(self.v0, self.v1), self.v2), 1.0 / 3.0)

    def bounds(self) -> Tuple[Vec3, Vec3]:
        xs, ys, zs = zip(self.v0, self.v1, self.v2)
        return (min(xs), min(ys), min(zs)), (max(xs), max(ys), max(zs))

    def intersect(self, ray: Ray, t_min: Optional[float] = None,
                  t_max: Optional[float] = None) -> Optional[HitRecord]:
        """Moller-Trumbore ray/triangle intersection."""
        lo = ray.t_min if t_min is None else t_min
        hi = ray.t_max if t_max is None else t_max
        ro, rd = ray.origin, ray.direction
        edge1 = sub(self.v1, self.v0)
        edge2 = sub(self.v2, self.v0)
        pvec = cross(rd, edge2)
        det = dot(edge1, pvec)
        if abs(det) < PARALLEL_EPSILON:
            return None

        inv_det = 1.0 / det
        tvec = sub(ro, self.v0)
        u = dot(tvec, pvec) * inv_det
        if u < 0.0 or u > 1.0:
            return None

        qvec = cross(tvec, edge1)
        v = dot(rd, qvec) * inv_det
        if v < 0.0 or u + v > 1.0:
            return None

        t = dot(edge2, qvec) * inv_det
        if t < lo or t > hi:
            return None

        normal, front_face = _face(rd, self.normal())
        return HitRecord(t, ray.at(t), normal, front_face, self, (1.0 - u - v, u, v))


Primitive = Union[Sphere, Triangle]
PRIMITIVE_TYPES = (Sphere, Triangle)
