"""
Vector and color arithmetic on plain 3-tuples.

Vectors and colors share one representation: an immutable tuple of three
floats. Colors are linear radiance and are never clamped here; clamping
only happens at tone-mapping time.
"""
import math
from typing import Optional, Tuple

Vec3 = Tuple[float, float, float]
Color = Tuple[float, float, float]

ZERO: Vec3 = (0.0, 0.0, 0.0)
BLACK: Color = (0.0, 0.0, 0.0)
WHITE: Color = (1.0, 1.0, 1.0)

# Below this length a vector is treated as zero by norm().
NORM_EPSILON = 1e-12


def add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])

def sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])

def mul(a: Vec3, s: float) -> Vec3:
    return (a[0] * s, a[1] * s, a[2] * s)

def neg(a: Vec3) -> Vec3:
    return (-a[0], -a[1], -a[2])

def hadamard(a: Vec3, b: Vec3) -> Vec3:
    """Component-wise product, used to blend colors."""
    return (a[0] * b[0], a[1] * b[1], a[2] * b[2])

def dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]

def cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )

def length(v: Vec3) -> float:
    return math.sqrt(dot(v, v))

def norm(v: Vec3) -> Vec3:
    """Unit vector along v. A (near) zero-length vector maps to ZERO."""
    l = length(v)
    if l < NORM_EPSILON:
        return ZERO
    return mul(v, 1.0 / l)

def lerp(a: Vec3, b: Vec3, t: float) -> Vec3:
    return (
        a[0] + (b[0] - a[0]) * t,
        a[1] + (b[1] - a[1]) * t,
        a[2] + (b[2] - a[2]) * t,
    )

def reflect(rd: Vec3, n: Vec3) -> Vec3:
    """Reflect ray direction rd off surface with normal n."""
    return sub(rd, mul(n, 2.0 * dot(rd, n)))

def refract(uv: Vec3, n: Vec3, eta_ratio: float) -> Optional[Vec3]:
    """
    Refract unit direction uv through a surface with unit normal n.

    n must face against uv and eta_ratio is n_incident / n_transmitted.
    Returns None on total internal reflection.
    """
    cos_i = -dot(uv, n)
    sin_t_sq = eta_ratio * eta_ratio * (1.0 - cos_i * cos_i)
    if sin_t_sq > 1.0:
        return None
    cos_t = math.sqrt(1.0 - sin_t_sq)
    return add(mul(uv, eta_ratio), mul(n, eta_ratio * cos_i - cos_t))

def clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))

def max_component(v: Vec3) -> float:
    return max(v[0], v[1], v[2])

def is_finite(v: Vec3) -> bool:
    return all(math.isfinite(c) for c in v)

def as_vec3(value, name: str = "vector") -> Vec3:
    """Coerce a 3-element sequence to a float tuple."""
    try:
        x, y, z = value
        return (float(x), float(y), float(z))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must have three numeric components, got {value!r}") from exc
