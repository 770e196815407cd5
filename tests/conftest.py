"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Make the package importable without installing it
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "python"))

from raytrace import (  # noqa: E402
    Camera, Diffuse, Reflective, RenderConfig, Scene, Sphere, SphereLight,
)


@pytest.fixture
def red():
    return Diffuse((1.0, 0.0, 0.0))


@pytest.fixture
def mirror():
    return Reflective((1.0, 1.0, 1.0), 0.0)


@pytest.fixture
def front_camera():
    """Camera at the origin looking down -z with a square image."""
    return Camera((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), aspect_ratio=1.0)


@pytest.fixture
def small_config():
    """Tiny square render with odd dimensions so a pixel sits on the optical axis."""
    return RenderConfig(width=5, height=5, max_depth=3, samples_per_pixel=1, workers=1)


@pytest.fixture
def lit_red_sphere(red):
    """Red sphere in front of the camera with a point light above and behind the camera."""
    sphere = Sphere((0.0, 0.0, -1.0), 0.5, red)
    light = SphereLight((0.0, 2.0, 0.0), 0.0, (1.0, 1.0, 1.0), 1.0)
    return Scene([sphere], [light])


@pytest.fixture
def scene_doc():
    """Scene document as it would be read from scene.json."""
    return {
        "camera": {"position": [0, 0, 0], "look_at": [0, 0, -1], "fov": 60},
        "render": {"width": 4, "height": 3, "max_depth": 2, "tone_map": "reinhard"},
        "materials": {
            "red": {"type": "diffuse", "albedo": [1, 0, 0]},
            "chrome": {"type": "reflective", "albedo": [0.9, 0.9, 0.9], "fuzz": 0.1},
            "glass": {"type": "refractive", "refractive_index": 1.5},
        },
        "objects": [
            {"type": "sphere", "center": [0, 0, -3], "radius": 1, "material": "red"},
            {"type": "sphere", "center": [2, 0, -3], "radius": 0.5, "material": "red"},
            {"type": "triangle", "vertices": [[-5, -1, 0], [5, -1, 0], [0, -1, -10]],
             "material": "chrome"},
        ],
        "lights": [{"center": [0, 5, 0], "radius": 1, "color": [1, 1, 1], "intensity": 4}],
    }
