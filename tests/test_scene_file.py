"""Tests for building render jobs from scene documents."""

import copy
import json

import pytest

from raytrace import (
    Diffuse, RaytraceError, Reflective, RenderConfigError, SceneConfigError, Sphere, Triangle,
)
from raytrace.scene_file import build_scene, load_job, load_scene, validate_scene


class TestBuildScene:

    def test_builds_everything(self, scene_doc):
        scene, camera, config = build_scene(scene_doc)
        assert len(scene) == 3
        assert len(scene.lights) == 1
        assert isinstance(scene.primitives[0], Sphere)
        assert isinstance(scene.primitives[2], Triangle)
        assert (config.width, config.height) == (4, 3)
        assert camera.fov_degrees == 60
        assert camera.aspect_ratio == pytest.approx(4 / 3)
        assert camera.direction == (0.0, 0.0, -1.0)
        assert scene.lights[0].intensity == 4.0

    def test_named_materials_are_shared(self, scene_doc):
        scene, _, _ = build_scene(scene_doc)
        first, second, floor = scene.primitives
        assert first.material is second.material
        assert isinstance(first.material, Diffuse)
        assert isinstance(floor.material, Reflective)
        assert floor.material.fuzz == pytest.approx(0.1)

    def test_camera_direction_instead_of_look_at(self, scene_doc):
        scene_doc["camera"] = {"position": [0, 1, 0], "direction": [0, 0, -2], "aspect_ratio": 2.0}
        _, camera, _ = build_scene(scene_doc)
        assert camera.position == (0.0, 1.0, 0.0)
        assert camera.aspect_ratio == 2.0

    def test_unused_materials_are_allowed(self, scene_doc):
        scene, _, _ = build_scene(scene_doc)
        assert len(scene.materials) == 2


def _broken(doc, mutate):
    doc = copy.deepcopy(doc)
    mutate(doc)
    return doc


@pytest.mark.parametrize("mutate", [
    lambda d: d.pop("camera"),
    lambda d: d.pop("render"),
    lambda d: d["camera"].pop("look_at"),
    lambda d: d["camera"].update(position=[0, 0]),
    lambda d: d["materials"]["red"].update(type="plastic"),
    lambda d: d["materials"]["red"].update(shininess=3),
    lambda d: d["materials"]["chrome"].update(fuzz=2.0),
    lambda d: d["objects"][0].update(material="gold"),
    lambda d: d["objects"][0].update(type="cube"),
    lambda d: d["objects"][0].update(radius=-1),
    lambda d: d["objects"][2].update(vertices=[[0, 0, 0], [1, 1, 1], [2, 2, 2]]),
    lambda d: d["objects"][2].update(vertices=[[0, 0, 0], [1, 1, 1]]),
    lambda d: d["lights"][0].update(intensity=0),
    lambda d: d["lights"][0].update(falloff=2),
    lambda d: d.update(camera=5),
    lambda d: d.update(render=[1, 2]),
    lambda d: d.update(objects={"ball": 1}),
    lambda d: d.update(lights="lamp"),
    lambda d: d["materials"].update(red="matte"),
    lambda d: d["materials"]["red"].update(type=["diffuse"]),
    lambda d: d["objects"][0].update(material=["red"]),
    lambda d: d["objects"].append(7),
    lambda d: d["lights"].append([0, 5, 0]),
    lambda d: d["camera"].update(fov="wide"),
])
def test_invalid_documents_rejected(scene_doc, mutate):
    with pytest.raises(SceneConfigError):
        build_scene(_broken(scene_doc, mutate))


def test_bad_render_settings(scene_doc):
    scene_doc["render"]["samples"] = 4
    with pytest.raises(RenderConfigError):
        build_scene(scene_doc)


def test_validate_accepts_good_document(scene_doc):
    validate_scene(scene_doc)


def test_validate_rejects_non_object():
    with pytest.raises(SceneConfigError):
        validate_scene([1, 2, 3])


class TestLoadJob:

    def test_round_trip_through_file(self, tmp_path, scene_doc):
        path = tmp_path / "scene.json"
        path.write_text(json.dumps(scene_doc))
        assert load_scene(str(path)) == scene_doc
        scene, camera, config = load_job(str(path))
        assert len(scene) == 3

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text("{not json")
        with pytest.raises(SceneConfigError):
            load_job(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_job(str(tmp_path / "missing.json"))

    def test_errors_share_a_base_class(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text("[]")
        with pytest.raises(RaytraceError):
            load_job(str(path))
