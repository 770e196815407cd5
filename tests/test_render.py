"""Tests for frame assembly, sequences and the frame buffer."""

import dataclasses

import pytest

from raytrace import (
    Camera, FrameBuffer, RenderConfig, RenderConfigError, Scene, SkyGradient, ToneMapOperator,
    render_frame, render_ldr_sequence, render_sequence, tone_map_frame,
)
from raytrace.render import _band_ranges


class TestRenderFrame:

    def test_empty_scene_is_background(self, front_camera):
        background = (0.1, 0.2, 0.3)
        config = RenderConfig(width=6, height=4, background=background)
        frame = render_frame(Scene(), front_camera, config)
        assert (frame.width, frame.height) == (6, 4)
        assert all(c == background for row in frame.rows() for c in row)

    def test_empty_scene_with_supersampling(self, front_camera):
        background = (0.1, 0.2, 0.3)
        config = RenderConfig(width=3, height=3, samples_per_pixel=4, background=background)
        frame = render_frame(Scene(), front_camera, config)
        for row in frame.rows():
            for c in row:
                assert c == pytest.approx(background)

    def test_sky_gradient_brighter_toward_zenith(self, front_camera):
        sky = SkyGradient((0.0, 0.0, 0.0), (1.0, 1.0, 1.0))
        frame = render_frame(Scene(), front_camera, RenderConfig(width=3, height=5, background=sky))
        assert frame.get(1, 0)[0] > frame.get(1, 4)[0]

    @pytest.mark.slow
    def test_worker_count_does_not_change_output(self, lit_red_sphere, front_camera):
        config = RenderConfig(width=6, height=6, samples_per_pixel=2, shadow_samples=2,
                              max_depth=3, workers=1)
        inline = render_frame(lit_red_sphere, front_camera, config)
        pooled = render_frame(lit_red_sphere, front_camera,
                              dataclasses.replace(config, workers=2))
        assert list(inline.rows()) == list(pooled.rows())

    def test_rejects_wrong_types(self, front_camera, small_config):
        with pytest.raises(RenderConfigError):
            render_frame([], front_camera, small_config)
        with pytest.raises(RenderConfigError):
            render_frame(Scene(), front_camera, {"width": 5})

    def test_band_ranges_cover_every_row(self):
        for height in (1, 5, 17, 180):
            for workers in (1, 2, 3, 8):
                bands = _band_ranges(height, workers)
                rows = [y for y0, y1 in bands for y in range(y0, y1)]
                assert rows == list(range(height))


class TestSequence:

    def _moving_camera(self):
        return Camera((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), aspect_ratio=1.0,
                      velocity=(0.0, 0.0, 1.0))

    def test_frames_yielded_in_requested_order(self, lit_red_sphere, small_config):
        camera = self._moving_camera()
        frames = list(render_sequence(lit_red_sphere, camera, small_config, [2, 0, 1]))
        assert [index for index, _ in frames] == [2, 0, 1]
        single = render_frame(lit_red_sphere, camera, small_config, frame_index=0)
        assert list(frames[1][1].rows()) == list(single.rows())

    def test_animation_changes_frames(self, lit_red_sphere):
        config = RenderConfig(width=5, height=5, max_depth=2, fps=1.0)
        frames = dict(render_sequence(lit_red_sphere, self._moving_camera(), config, [0, 1]))
        assert list(frames[0].rows()) != list(frames[1].rows())

    def test_ldr_sequence(self, lit_red_sphere, front_camera, small_config):
        frames = list(render_ldr_sequence(lit_red_sphere, front_camera, small_config, [0]))
        index, ldr = frames[0]
        assert index == 0
        assert len(ldr) == 5 and all(len(row) == 5 for row in ldr)
        assert all(0 <= ch <= 255 for row in ldr for px in row for ch in px)


class TestFrameBuffer:

    def test_get_set(self):
        fb = FrameBuffer(3, 2)
        assert fb.get(2, 1) == (0.0, 0.0, 0.0)
        fb.set(2, 1, (1.0, 2.0, 3.0))
        assert fb.get(2, 1) == (1.0, 2.0, 3.0)
        assert fb.get(1, 1) == (0.0, 0.0, 0.0)

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            FrameBuffer(0, 4)

    def test_set_row_checks_width(self):
        fb = FrameBuffer(3, 2)
        with pytest.raises(ValueError):
            fb.set_row(0, [(0.0, 0.0, 0.0)] * 2)

    def test_from_rows(self):
        fb = FrameBuffer.from_rows([[(1.0, 1.0, 1.0), (0.0, 0.0, 0.0)]])
        assert (fb.width, fb.height) == (2, 1)
        with pytest.raises(ValueError):
            FrameBuffer.from_rows([[(1.0, 1.0, 1.0)], []])

    def test_average_luminance_and_scaling(self):
        fb = FrameBuffer(2, 2, (1.0, 1.0, 1.0))
        assert fb.average_luminance() == pytest.approx(1.0)
        half = fb.scaled(0.5)
        assert half.average_luminance() == pytest.approx(0.5)
        assert fb.get(0, 0) == (1.0, 1.0, 1.0)
        fb.clear()
        assert fb.average_luminance() == 0.0

    def test_to_ldr(self):
        fb = FrameBuffer(2, 1)
        fb.set(1, 0, (1.0, 1.0, 1.0))
        ldr = fb.to_ldr(ToneMapOperator.REINHARD, gamma=1.0)
        assert ldr == [[(0, 0, 0), (127, 127, 127)]]

    def test_tone_map_frame_uses_config(self):
        fb = FrameBuffer(1, 1, (1.0, 1.0, 1.0))
        config = RenderConfig(width=1, height=1, tone_map="reinhard", gamma=1.0)
        assert tone_map_frame(fb, config) == [[(127, 127, 127)]]
