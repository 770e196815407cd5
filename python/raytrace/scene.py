"""
Scene container: primitives, lights and the nearest-hit query.

A Scene is built once per render job and is read-only afterwards, so it can
be shared (or pickled to worker processes) freely.
"""
import logging
import math
from typing import Iterable, Optional, Tuple

from .errors import SceneConfigError
from .geometry import PRIMITIVE_TYPES, HitRecord, Primitive, Ray
from .lights import SphereLight
from .materials import MATERIAL_TYPES, Material

logger = logging.getLogger(__name__)


class Scene:
    """Primitives plus light sources. Construction fails closed on bad input."""

    def __init__(self, primitives: Iterable[Primitive] = (), lights: Iterable[SphereLight] = ()):
        primitives = tuple(primitives)
        lights = tuple(lights)
        for i, prim in enumerate(primitives):
            if not isinstance(prim, PRIMITIVE_TYPES):
                raise SceneConfigError(
                    f"primitive #{i} is a {type(prim).__name__}, expected Sphere or Triangle")
            if not isinstance(prim.material, MATERIAL_TYPES):
                raise SceneConfigError(
                    f"primitive #{i} has no valid material (got {type(prim.material).__name__})")
        for i, light in enumerate(lights):
            if not isinstance(light, SphereLight):
                raise SceneConfigError(
                    f"light #{i} is a {type(light).__name__}, expected SphereLight")
        self._primitives = primitives
        self._lights = lights
        logger.debug("Scene built: %d primitives, %d lights", len(primitives), len(lights))

    @property
    def primitives(self) -> Tuple[Primitive, ...]:
        return self._primitives

    @property
    def lights(self) -> Tuple[SphereLight, ...]:
        return self._lights

    @property
    def materials(self) -> Tuple[Material, ...]:
        """Distinct materials in first-use order."""
        seen = {}
        for prim in self._primitives:
            seen.setdefault(id(prim.material), prim.material)
        return tuple(seen.values())

    def __len__(self):
        return len(self._primitives)

    def __repr__(self):
        return f"Scene(primitives={len(self._primitives)}, lights={len(self._lights)})"

    def closest_hit(self, ray: Ray) -> Optional[Tuple[HitRecord, Material]]:
        """
        Nearest intersection over all primitives within the ray's range.

        Ties keep the primitive inserted first.
        """
        nearest = None
        t_max = ray.t_max
        for prim in self._primitives:
            hit = prim.intersect(ray, ray.t_min, t_max)
            if hit is not None and (nearest is None or hit.t < nearest.t):
                nearest = hit
                t_max = hit.t
        if nearest is None:
            return None
        return nearest, nearest.primitive.material

    def occluded(self, ray: Ray) -> bool:
        """True if any primitive intersects the ray within its range."""
        for prim in self._primitives:
            if prim.intersect(ray) is not None:
                return True
        return False

    def closest_light(self, ray: Ray, t_max: float = math.inf) -> Optional[Tuple[float, SphereLight]]:
        """Nearest light surface hit before t_max."""
        nearest = None
        for light in self._lights:
            t = light.intersect(ray, ray.t_min, min(t_max, ray.t_max))
            if t is not None and (nearest is None or t < nearest[0]):
                nearest = (t, light)
        return nearest
