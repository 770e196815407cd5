"""
Pinhole camera with optional animation.

The camera is immutable. Animation is described by a constant velocity and
an optional orbit around a pivot, so the pose for any frame time is a pure
function of that time.
"""
import math
from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple

from .errors import SceneConfigError
from .geometry import Ray
from .vecmath import (
    Vec3, ZERO, add, as_vec3, cross, dot, is_finite, length, mul, norm, sub,
)


def rotate_about_axis(v: Vec3, axis: Vec3, angle: float) -> Vec3:
    """Rodrigues rotation of v about a unit axis."""
    c = math.cos(angle)
    s = math.sin(angle)
    return add(add(mul(v, c), mul(cross(axis, v), s)), mul(axis, dot(axis, v) * (1.0 - c)))


class Viewport(NamedTuple):
    """Camera basis pre-scaled by the field of view, for one frame time."""
    origin: Vec3
    horizontal: Vec3
    vertical: Vec3
    forward: Vec3

    def ray(self, u: float, v: float) -> Ray:
        px = 2.0 * u - 1.0
        py = 1.0 - 2.0 * v
        rd = norm(add(add(mul(self.horizontal, px), mul(self.vertical, py)), self.forward))
        return Ray(self.origin, rd)


@dataclass(frozen=True)
class Camera:
    position: Vec3
    direction: Vec3
    up: Vec3 = (0.0, 1.0, 0.0)
    fov_degrees: float = 60.0
    aspect_ratio: float = 16.0 / 9.0
    velocity: Vec3 = ZERO
    orbit_pivot: Optional[Vec3] = None
    orbit_speed: float = 0.0

    def __post_init__(self):
        try:
            for name in ("position", "direction", "up", "velocity"):
                v = as_vec3(getattr(self, name), f"camera {name}")
                if not is_finite(v):
                    raise ValueError(f"camera {name} must be finite, got {v}")
                object.__setattr__(self, name, v)
            if self.orbit_pivot is not None:
                object.__setattr__(self, "orbit_pivot",
                                   as_vec3(self.orbit_pivot, "camera orbit_pivot"))
        except ValueError as exc:
            raise SceneConfigError(str(exc)) from exc
        if length(self.direction) == 0.0:
            raise SceneConfigError("camera direction must be non-zero")
        if length(self.up) == 0.0:
            raise SceneConfigError("camera up vector must be non-zero")
        if not 0.0 < self.fov_degrees < 180.0:
            raise SceneConfigError(f"fov must lie in (0, 180) degrees, got {self.fov_degrees!r}")
        if not self.aspect_ratio > 0.0:
            raise SceneConfigError(f"aspect ratio must be > 0, got {self.aspect_ratio!r}")

    @classmethod
    def looking_at(cls, position: Vec3, look_at: Vec3, **kwargs) -> "Camera":
        return cls(position, sub(as_vec3(look_at), as_vec3(position)), **kwargs)

    @property
    def is_animated(self) -> bool:
        return self.velocity != ZERO or (self.orbit_pivot is not None and self.orbit_speed != 0.0)

    def at_time(self, time: float) -> "Camera":
        """Static camera posed for the given time."""
        if not self.is_animated or time == 0.0:
            return Camera(self.position, self.direction, self.up, self.fov_degrees,
                          self.aspect_ratio)
        position = add(self.position, mul(self.velocity, time))
        direction = self.direction
        if self.orbit_pivot is not None and self.orbit_speed != 0.0:
            axis = norm(self.up)
            angle = self.orbit_speed * time
            position = add(self.orbit_pivot,
                           rotate_about_axis(sub(position, self.orbit_pivot), axis, angle))
            direction = rotate_about_axis(direction, axis, angle)
        return Camera(position, direction, self.up, self.fov_degrees, self.aspect_ratio)

    def basis(self) -> Tuple[Vec3, Vec3, Vec3]:
        """(right, up, forward) orthonormal basis."""
        forward = norm(self.direction)
        world_up = norm(self.up)

        # Right vector = forward x world_up
        right = norm(cross(forward, world_up))

        # If forward is parallel to world_up, use alternative
        if length(right) < 0.1:
            right = (1.0, 0.0, 0.0) if abs(forward[0]) < 0.9 else (0.0, 0.0, 1.0)
            right = norm(sub(right, mul(forward, dot(right, forward))))

        # Up vector = right x forward
        up = norm(cross(right, forward))
        return right, up, forward

    def viewport(self, time: float = 0.0) -> Viewport:
        cam = self.at_time(time) if self.is_animated else self
        right, up, forward = cam.basis()
        scale = math.tan(math.radians(cam.fov_degrees * 0.5))
        return Viewport(cam.position, mul(right, scale * cam.aspect_ratio), mul(up, scale), forward)

    def generate_ray(self, u: float, v: float, time: float = 0.0) -> Ray:
        """
        World-space primary ray through normalized image coordinates.

        u runs left to right and v top to bottom, both over [0, 1].
        """
        return self.viewport(time).ray(u, v)
