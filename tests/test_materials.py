"""Tests for material scatter behavior."""

import pytest

from raytrace import Diffuse, Reflective, Refractive, Sampler, SceneConfigError, Sphere, Triangle, scatter
from raytrace.geometry import Ray
from raytrace.materials import beer_lambert, direct_response, schlick
from raytrace.vecmath import BLACK, WHITE, dot, length, norm


class FixedSampler(Sampler):
    """Sampler whose uniform draw is pinned, for Fresnel branch selection."""

    def __init__(self, value, seed=0):
        super().__init__(seed)
        self.value = value

    def random(self):
        return self.value


def _hit(material, ray, center=(0.0, 0.0, -2.0), radius=1.0):
    return Sphere(center, radius, material).intersect(ray)


HEAD_ON = Ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))


class TestDiffuse:
    """Lambertian scatter."""

    def test_scatters_into_hemisphere_with_albedo(self):
        mat = Diffuse((0.2, 0.4, 0.6))
        hit = _hit(mat, HEAD_ON)
        sampler = Sampler(1)
        for _ in range(200):
            result = scatter(mat, HEAD_ON, hit, sampler)
            assert result is not None
            assert result.attenuation == (0.2, 0.4, 0.6)
            assert dot(result.ray.direction, hit.normal) >= 0.0
            assert length(result.ray.direction) == pytest.approx(1.0)

    def test_direct_response_is_cosine_weighted(self):
        mat = Diffuse((1.0, 0.5, 0.0))
        assert direct_response(mat, (0.0, 1.0, 0.0), (0.0, 1.0, 0.0)) == (1.0, 0.5, 0.0)
        half = direct_response(mat, (0.0, 1.0, 0.0), norm((0.0, 1.0, 3.0 ** 0.5)))
        assert half == pytest.approx((0.5, 0.25, 0.0))
        assert direct_response(mat, (0.0, 1.0, 0.0), (0.0, -1.0, 0.0)) == BLACK

    def test_negative_albedo_rejected(self):
        with pytest.raises(SceneConfigError):
            Diffuse((-0.1, 0.0, 0.0))


class TestReflective:
    """Mirror reflection with fuzz."""

    def test_perfect_mirror(self):
        mat = Reflective((0.9, 0.9, 0.9), 0.0)
        floor = Triangle((-5.0, 0.0, -5.0), (5.0, 0.0, -5.0), (0.0, 0.0, 5.0), mat)
        ray = Ray((-1.0, 1.0, 0.0), norm((1.0, -1.0, 0.0)))
        hit = floor.intersect(ray)
        result = scatter(mat, ray, hit, Sampler(0))
        assert result.attenuation == (0.9, 0.9, 0.9)
        assert result.ray.direction == pytest.approx(norm((1.0, 1.0, 0.0)))
        assert result.ray.origin[1] > 0.0

    def test_head_on_reflects_back(self):
        mat = Reflective(WHITE, 0.0)
        result = scatter(mat, HEAD_ON, _hit(mat, HEAD_ON), Sampler(0))
        assert result.ray.direction == pytest.approx((0.0, 0.0, 1.0))

    def test_fuzz_stays_above_surface_or_absorbs(self):
        mat = Reflective(WHITE, 1.0)
        ray = Ray((-5.0, 1.0, -2.0), norm((1.0, -0.05, 0.0)))
        hit = _hit(mat, ray)
        assert hit is not None
        sampler = Sampler(2)
        absorbed = 0
        for _ in range(300):
            result = scatter(mat, ray, hit, sampler)
            if result is None:
                absorbed += 1
            else:
                assert dot(result.ray.direction, hit.normal) > 0.0
                assert length(result.ray.direction) == pytest.approx(1.0)
        assert absorbed > 0

    def test_fuzz_out_of_range_rejected(self):
        with pytest.raises(SceneConfigError):
            Reflective(WHITE, 1.5)


class TestRefractive:
    """Dielectric refraction, reflection and total internal reflection."""

    def test_head_on_transmits_straight(self):
        mat = Refractive(1.5)
        hit = _hit(mat, HEAD_ON)
        result = scatter(mat, HEAD_ON, hit, FixedSampler(0.99))
        assert result.attenuation == WHITE
        assert result.ray.direction == pytest.approx((0.0, 0.0, -1.0))
        # The transmitted ray starts just inside the surface.
        assert result.ray.origin[2] < hit.point[2]

    def test_fresnel_choice_can_reflect(self):
        mat = Refractive(1.5)
        result = scatter(mat, HEAD_ON, _hit(mat, HEAD_ON), FixedSampler(0.0))
        assert result.ray.direction == pytest.approx((0.0, 0.0, 1.0))

    def test_total_internal_reflection_from_inside(self):
        mat = Refractive(1.5)
        # Start inside the sphere and hit the wall at a grazing angle.
        ray = Ray((0.0, 0.9, -2.0), (1.0, 0.0, 0.0))
        hit = _hit(mat, ray)
        assert not hit.front_face
        for value in (0.0, 0.5, 0.999):
            result = scatter(mat, ray, hit, FixedSampler(value))
            assert dot(result.ray.direction, hit.normal) > 0.0

    def test_transmission_tracks_medium(self):
        mat = Refractive(1.5, absorption=(0.5, 0.0, 0.0))
        result = scatter(mat, HEAD_ON, _hit(mat, HEAD_ON), FixedSampler(0.99))
        assert result.medium == (0.5, 0.0, 0.0)

    def test_schlick_limits(self):
        assert schlick(1.0, 1.5) == pytest.approx(0.04)
        assert schlick(0.0, 1.5) == pytest.approx(1.0)

    def test_no_direct_response(self):
        assert direct_response(Refractive(1.5), (0.0, 1.0, 0.0), (0.0, 1.0, 0.0)) == BLACK
        assert direct_response(Reflective(), (0.0, 1.0, 0.0), (0.0, 1.0, 0.0)) == BLACK

    def test_invalid_index_rejected(self):
        with pytest.raises(SceneConfigError):
            Refractive(0.0)


def test_beer_lambert():
    assert beer_lambert(BLACK, 100.0) == WHITE
    r, g, b = beer_lambert((1.0, 0.0, 2.0), 1.0)
    assert r == pytest.approx(0.36787944117)
    assert g == 1.0
    assert b == pytest.approx(0.13533528323)


def test_materials_are_immutable():
    mat = Diffuse((0.5, 0.5, 0.5))
    with pytest.raises(AttributeError):
        mat.albedo = (1.0, 1.0, 1.0)
