"""
Interactive 3D preview of the scene using Plotly.
Helps verify geometry before rendering.
"""
import math
from typing import List, Tuple

import plotly.graph_objects as go

from .camera import Camera
from .geometry import Sphere, Triangle
from .materials import Diffuse, Reflective, Refractive
from .scene import Scene
from .vecmath import add, clamp01, mul

def _material_color(material) -> str:
    """Plotly color string approximating a material's look."""
    if isinstance(material, Refractive):
        r, g, b = material.tint
        return f"rgba({int(clamp01(r) * 255)}, {int(clamp01(g) * 255)}, {int(clamp01(b) * 255)}, 0.4)"
    if isinstance(material, (Diffuse, Reflective)):
        r, g, b = material.albedo
        return f"rgb({int(clamp01(r) * 255)}, {int(clamp01(g) * 255)}, {int(clamp01(b) * 255)})"
    return "gray"

def sphere_grid(center, radius: float, steps: int = 16) -> Tuple[List[List[float]], ...]:
    """Latitude/longitude grid of points on a sphere for go.Surface."""
    xs, ys, zs = [], [], []
    for i in range(steps + 1):
        theta = math.pi * i / steps
        row_x, row_y, row_z = [], [], []
        for j in range(steps + 1):
            phi = 2.0 * math.pi * j / steps
            row_x.append(center[0] + radius * math.sin(theta) * math.cos(phi))
            row_y.append(center[1] + radius * math.cos(theta))
            row_z.append(center[2] + radius * math.sin(theta) * math.sin(phi))
        xs.append(row_x)
        ys.append(row_y)
        zs.append(row_z)
    return xs, ys, zs

def create_scene_preview(scene: Scene, camera: Camera) -> go.Figure:
    """Create interactive 3D plot of scene."""
    fig = go.Figure()

    for i, prim in enumerate(scene.primitives):
        color = _material_color(prim.material)
        if isinstance(prim, Sphere):
            xs, ys, zs = sphere_grid(prim.center, prim.radius)
            fig.add_trace(go.Surface(
                x=xs, y=ys, z=zs,
                colorscale=[[0, color], [1, color]],
                showscale=False,
                opacity=0.9,
                name=f'Sphere {i+1}'
            ))
        elif isinstance(prim, Triangle):
            v0, v1, v2 = prim.v0, prim.v1, prim.v2
            fig.add_trace(go.Mesh3d(
                x=[v0[0], v1[0], v2[0]],
                y=[v0[1], v1[1], v2[1]],
                z=[v0[2], v1[2], v2[2]],
                i=[0], j=[1], k=[2],
                color=color,
                opacity=0.8,
                name=f'Triangle {i+1}'
            ))

    # Light sources
    for i, light in enumerate(scene.lights):
        fig.add_trace(go.Scatter3d(
            x=[light.center[0]],
            y=[light.center[1]],
            z=[light.center[2]],
            mode='markers',
            marker=dict(size=8 + 10 * light.radius, color='yellow', symbol='circle'),
            name=f'Light {i+1}'
        ))

    # Camera
    cam_pos = camera.position
    look_at = add(cam_pos, mul(camera.basis()[2], 1.0))

    fig.add_trace(go.Scatter3d(
        x=[cam_pos[0]],
        y=[cam_pos[1]],
        z=[cam_pos[2]],
        mode='markers',
        marker=dict(size=10, color='red', symbol='diamond'),
        name='Camera'
    ))

    # Camera look direction
    fig.add_trace(go.Scatter3d(
        x=[cam_pos[0], look_at[0]],
        y=[cam_pos[1], look_at[1]],
        z=[cam_pos[2], look_at[2]],
        mode='lines',
        line=dict(color='red', width=3, dash='dash'),
        name='Camera Look'
    ))

    fig.update_layout(
        title="Scene Preview (Interactive 3D)",
        scene=dict(
            xaxis_title="X",
            yaxis_title="Y",
            zaxis_title="Z",
            aspectmode='data'
        ),
        width=1000,
        height=800
    )

    return fig
