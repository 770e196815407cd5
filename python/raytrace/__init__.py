"""
CPU ray tracer for animated scenes of spheres and triangles lit by
spherical area lights.

The core consumes an in-memory Scene, a Camera and a RenderConfig and
produces one HDR FrameBuffer per frame; tone mapping turns a frame into a
row-major grid of 8-bit RGB pixels.
"""

__version__ = "0.2.0"

from .camera import Camera
from .config import RenderConfig, SkyGradient
from .errors import RaytraceError, RenderConfigError, SceneConfigError
from .framebuffer import FrameBuffer
from .geometry import HitRecord, Ray, Sphere, Triangle
from .lights import SphereLight
from .materials import Diffuse, Reflective, Refractive, scatter
from .render import render_frame, render_ldr_sequence, render_sequence, tone_map_frame
from .sampling import Sampler
from .scene import Scene
from .tonemap import ToneMapOperator
from .tracer import RayTracer

__all__ = [
    "Camera",
    "Diffuse",
    "FrameBuffer",
    "HitRecord",
    "Ray",
    "RayTracer",
    "RaytraceError",
    "Reflective",
    "Refractive",
    "RenderConfig",
    "RenderConfigError",
    "Sampler",
    "Scene",
    "SceneConfigError",
    "SkyGradient",
    "Sphere",
    "SphereLight",
    "ToneMapOperator",
    "Triangle",
    "render_frame",
    "render_ldr_sequence",
    "render_sequence",
    "scatter",
    "tone_map_frame",
]
