"""Scene loading and validation from scene.json"""
import json
from typing import Any, Dict, Tuple

from .camera import Camera
from .config import RenderConfig
from .errors import SceneConfigError
from .geometry import Sphere, Triangle
from .lights import SphereLight
from .materials import Diffuse, Material, Reflective, Refractive
from .scene import Scene

MATERIAL_KINDS = {
    "diffuse": Diffuse,
    "reflective": Reflective,
    "refractive": Refractive,
}

def load_scene(json_path: str = "scene.json") -> Dict[str, Any]:
    """Load scene configuration from JSON file."""
    with open(json_path, 'r') as f:
        return json.load(f)

def _require(mapping: Dict[str, Any], key: str, where: str):
    if not isinstance(mapping, dict):
        raise SceneConfigError(f"{where} must be a JSON object, got {mapping!r}")
    if key not in mapping:
        raise SceneConfigError(f"{where} must have '{key}'")
    return mapping[key]

def _vec(value, where: str):
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise SceneConfigError(f"{where} must be a list of 3 numbers, got {value!r}")
    return tuple(value)

def _list(scene: Dict[str, Any], key: str) -> list:
    items = scene.get(key, [])
    if not isinstance(items, list):
        raise SceneConfigError(f"'{key}' must be a list, got {items!r}")
    return items

def validate_scene(scene: Dict[str, Any]) -> None:
    """Structural validation of a scene document. Raises SceneConfigError."""
    if not isinstance(scene, dict):
        raise SceneConfigError("scene document must be a JSON object")
    _require(scene, "camera", "Scene")
    if not isinstance(_require(scene, "render", "Scene"), dict):
        raise SceneConfigError("'render' must be a JSON object")

    # Validate camera
    cam = scene["camera"]
    _vec(_require(cam, "position", "camera"), "camera position")
    if "look_at" not in cam and "direction" not in cam:
        raise SceneConfigError("camera must have 'look_at' or 'direction'")

    # Validate materials
    materials = scene.get("materials", {})
    if not isinstance(materials, dict):
        raise SceneConfigError("'materials' must map names to material definitions")
    for name, entry in materials.items():
        kind = _require(entry, "type", f"material '{name}'")
        if not isinstance(kind, str) or kind not in MATERIAL_KINDS:
            raise SceneConfigError(
                f"material '{name}' has unknown type {kind!r} (expected one of {', '.join(MATERIAL_KINDS)})")

    # Validate objects
    for i, obj in enumerate(_list(scene, "objects")):
        where = f"object #{i}"
        kind = _require(obj, "type", where)
        mat = _require(obj, "material", where)
        if not isinstance(mat, str) or mat not in materials:
            raise SceneConfigError(f"{where} references unknown material {mat!r}")
        if kind == "sphere":
            _vec(_require(obj, "center", where), f"{where} center")
            _require(obj, "radius", where)
        elif kind == "triangle":
            verts = _require(obj, "vertices", where)
            if not isinstance(verts, list) or len(verts) != 3:
                raise SceneConfigError(f"{where} must have exactly 3 vertices")
            for v in verts:
                _vec(v, f"{where} vertex")
        else:
            raise SceneConfigError(f"{where} has unknown type {kind!r}")

    # Validate lights
    for i, light in enumerate(_list(scene, "lights")):
        _vec(_require(light, "center", f"light #{i}"), f"light #{i} center")

def _build_material(name: str, entry: Dict[str, Any]) -> Material:
    params = {k: v for k, v in entry.items() if k != "type"}
    try:
        return MATERIAL_KINDS[entry["type"]](**params)
    except TypeError as exc:
        raise SceneConfigError(f"material '{name}': {exc}") from exc

def build_scene(doc: Dict[str, Any]) -> Tuple[Scene, Camera, RenderConfig]:
    """
    Turn a validated scene document into render-ready objects.

    Named materials are built once and shared by every object using them.
    Any invalid value fails the whole build; no partial scene is returned.
    """
    validate_scene(doc)
    config = RenderConfig.from_dict(doc["render"])

    materials = {name: _build_material(name, entry)
                 for name, entry in doc.get("materials", {}).items()}

    primitives = []
    for obj in doc.get("objects", []):
        material = materials[obj["material"]]
        if obj["type"] == "sphere":
            primitives.append(Sphere(tuple(obj["center"]), obj["radius"], material))
        else:
            v0, v1, v2 = (tuple(v) for v in obj["vertices"])
            primitives.append(Triangle(v0, v1, v2, material))

    lights = []
    for entry in doc.get("lights", []):
        try:
            lights.append(SphereLight(**entry))
        except TypeError as exc:
            raise SceneConfigError(f"light: {exc}") from exc

    cam = dict(doc["camera"])
    position = cam.pop("position")
    look_at = cam.pop("look_at", None)
    if "fov" in cam:
        cam["fov_degrees"] = cam.pop("fov")
    cam.setdefault("aspect_ratio", config.aspect_ratio)
    try:
        if look_at is not None:
            camera = Camera.looking_at(position, look_at, **cam)
        else:
            camera = Camera(position, **cam)
    except TypeError as exc:
        raise SceneConfigError(f"camera: {exc}") from exc

    return Scene(primitives, lights), camera, config

def load_job(json_path: str) -> Tuple[Scene, Camera, RenderConfig]:
    try:
        return build_scene(load_scene(json_path))
    except json.JSONDecodeError as exc:
        raise SceneConfigError(f"{json_path} is not valid JSON: {exc}") from exc
