"""
Recursive ray tracer.

trace() finds the nearest hit, adds direct lighting from every light
(shadow-ray tested, several jittered samples per light for soft shadows),
then lets the hit material scatter at most one secondary ray and recurses
on it. Recursion stops at max_depth, when the path's throughput falls below
min_weight, or when the ray escapes to the background.
"""
import logging

from .camera import Viewport
from .config import RenderConfig, background_color
from .geometry import RAY_EPSILON, HitRecord, Ray
from .materials import (
    Diffuse, Material, beer_lambert, direct_response, scatter,
)
from .sampling import Sampler
from .scene import Scene
from .vecmath import BLACK, WHITE, Color, add, hadamard, max_component, mul

logger = logging.getLogger(__name__)


class RayTracer:
    """Integrator bound to one immutable scene and render configuration."""

    def __init__(self, scene: Scene, config: RenderConfig):
        self.scene = scene
        self.config = config

    def trace(self, ray: Ray, depth: int, sampler: Sampler,
              throughput: Color = WHITE, medium: Color = BLACK,
              count_emission: bool = True) -> Color:
        """
        Radiance arriving along ray.

        Args:
            ray: Ray to follow (unit direction)
            depth: Number of scatter events already on this path
            sampler: Random source for this pixel's samples
            throughput: Product of the attenuations along the path so far
            medium: Absorption coefficient of the medium the ray travels in
            count_emission: Whether hitting a light returns its radiance.
                False after a diffuse bounce, where direct lighting has
                already accounted for the lights.
        """
        cfg = self.config
        if depth >= cfg.max_depth:
            return BLACK
        if depth > 0 and max_component(throughput) < cfg.min_weight:
            return BLACK

        found = self.scene.closest_hit(ray)

        if cfg.lights_visible and count_emission and self.scene.lights:
            t_limit = found[0].t if found is not None else ray.t_max
            light_hit = self.scene.closest_light(ray, t_limit)
            if light_hit is not None:
                t_light, light = light_hit
                return hadamard(light.radiance, beer_lambert(medium, t_light))

        if found is None:
            return background_color(cfg.background, ray.direction)

        hit, material = found
        color = self.direct_lighting(hit, material, sampler)

        scattered = scatter(material, ray, hit, sampler, medium)
        if scattered is not None:
            incoming = self.trace(
                scattered.ray,
                depth + 1,
                sampler,
                hadamard(throughput, scattered.attenuation),
                scattered.medium,
                not isinstance(material, Diffuse),
            )
            color = add(color, hadamard(scattered.attenuation, incoming))

        return hadamard(color, beer_lambert(medium, hit.t))

    def direct_lighting(self, hit: HitRecord, material: Material, sampler: Sampler) -> Color:
        """Sum over lights of radiance * visibility * diffuse response."""
        if not isinstance(material, Diffuse):
            return BLACK

        total = BLACK
        shadow_origin = add(hit.point, mul(hit.normal, RAY_EPSILON))
        for light in self.scene.lights:
            n_samples = 1 if light.is_point else self.config.shadow_samples
            acc = BLACK
            for _ in range(n_samples):
                ill = light.illuminate(hit.point, light.sample_point(sampler))
                if ill is None:
                    continue
                response = direct_response(material, hit.normal, ill.direction)
                if response == BLACK:
                    continue
                shadow_ray = Ray(shadow_origin, ill.direction, RAY_EPSILON,
                                 ill.distance - RAY_EPSILON)
                if self.scene.occluded(shadow_ray):
                    continue
                acc = add(acc, hadamard(ill.radiance, response))
            total = add(total, mul(acc, 1.0 / n_samples))
        return total

    def render_pixel(self, viewport: Viewport, x: int, y: int, sampler: Sampler) -> Color:
        """Average radiance over the configured samples of pixel (x, y)."""
        cfg = self.config
        spp = cfg.samples_per_pixel
        acc = BLACK
        for _ in range(spp):
            if spp == 1:
                jx, jy = 0.5, 0.5
            else:
                jx, jy = sampler.pixel_offset()
            ray = viewport.ray((x + jx) / cfg.width, (y + jy) / cfg.height)
            acc = add(acc, self.trace(ray, 0, sampler))
        return mul(acc, 1.0 / spp)

    def render_row(self, viewport: Viewport, y: int, sampler: Sampler):
        return [self.render_pixel(viewport, x, y, sampler) for x in range(self.config.width)]
