"""
Seedable random sampling.

All randomness in a render (pixel jitter, hemisphere directions, fuzz,
light-point jitter, Fresnel choice) is drawn from a Sampler handed down
explicitly, so a render is reproducible from its seed.
"""
import math
import random

from .vecmath import Vec3, add, dot, length, mul, norm


class Sampler:
    """Thin wrapper around random.Random with the distributions a tracer needs."""

    def __init__(self, seed=0):
        self._rng = random.Random(seed)

    @classmethod
    def for_row(cls, seed: int, frame_index: int, row: int) -> "Sampler":
        # String seeds hash through sha512, so this is stable across processes.
        return cls(f"{seed}:{frame_index}:{row}")

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return self._rng.random()

    def in_unit_sphere(self) -> Vec3:
        """Uniform point inside the unit ball (rejection sampling)."""
        rnd = self._rng.random
        while True:
            p = (2.0 * rnd() - 1.0, 2.0 * rnd() - 1.0, 2.0 * rnd() - 1.0)
            if dot(p, p) < 1.0:
                return p

    def unit_vector(self) -> Vec3:
        """Uniform direction on the unit sphere."""
        z = 1.0 - 2.0 * self._rng.random()
        phi = 2.0 * math.pi * self._rng.random()
        r = math.sqrt(max(0.0, 1.0 - z * z))
        return (r * math.cos(phi), r * math.sin(phi), z)

    def cosine_hemisphere(self, normal: Vec3) -> Vec3:
        """
        Cosine-weighted direction about a unit normal.

        Uses normal + uniform unit vector; when the two nearly cancel the
        normal itself is returned.
        """
        d = add(normal, self.unit_vector())
        if length(d) < 1e-8:
            return normal
        return norm(d)

    def pixel_offset(self):
        """Sub-pixel jitter in [0, 1)^2."""
        return self._rng.random(), self._rng.random()

    def scaled_ball_point(self, center: Vec3, radius: float) -> Vec3:
        if radius <= 0.0:
            return center
        return add(center, mul(self.in_unit_sphere(), radius))
