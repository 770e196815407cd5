"""
Frame assembly.

render_frame() splits the image into bands of rows and traces them inline
or on a process pool (pure-Python tracing is CPU bound, so threads would
serialize). Every row draws from its own Sampler seeded by
(seed, frame, row), which keeps the output independent of worker count and
scheduling order. render_sequence() yields frames in the requested order.
"""
import logging
import math
import time
from concurrent.futures import Executor, ProcessPoolExecutor
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from .camera import Camera
from .config import RenderConfig
from .errors import RenderConfigError
from .framebuffer import FrameBuffer, LDRFrame
from .sampling import Sampler
from .scene import Scene
from .tracer import RayTracer
from .vecmath import Color

logger = logging.getLogger(__name__)

# Bands handed to each worker per frame; more bands balance uneven rows better.
BANDS_PER_WORKER = 4


def _band_ranges(height: int, workers: int) -> List[Tuple[int, int]]:
    band = max(1, math.ceil(height / (workers * BANDS_PER_WORKER)))
    return [(y, min(y + band, height)) for y in range(0, height, band)]


def _render_band(task) -> List[List[Color]]:
    scene, camera, config, frame_index, y0, y1 = task
    tracer = RayTracer(scene, config)
    viewport = camera.viewport(config.frame_time(frame_index))
    rows = []
    for y in range(y0, y1):
        sampler = Sampler.for_row(config.seed, frame_index, y)
        rows.append(tracer.render_row(viewport, y, sampler))
    return rows


def _check_job(scene, camera, config) -> None:
    if not isinstance(scene, Scene):
        raise RenderConfigError(f"expected a Scene, got {type(scene).__name__}")
    if not isinstance(camera, Camera):
        raise RenderConfigError(f"expected a Camera, got {type(camera).__name__}")
    if not isinstance(config, RenderConfig):
        raise RenderConfigError(f"expected a RenderConfig, got {type(config).__name__}")
    if abs(camera.aspect_ratio - config.aspect_ratio) > 1e-3:
        logger.warning("Camera aspect ratio %.4f differs from image aspect %.4f; image will be stretched",
                       camera.aspect_ratio, config.aspect_ratio)


def render_frame(scene: Scene, camera: Camera, config: RenderConfig, frame_index: int = 0,
                 executor: Optional[Executor] = None) -> FrameBuffer:
    """
    Render one HDR frame.

    Args:
        scene: Immutable scene to render
        camera: Camera (animated cameras are posed for frame_index / fps)
        config: Validated render settings
        frame_index: Index of the frame in the sequence
        executor: Pool to reuse; one is created when config.workers > 1

    Returns:
        FrameBuffer holding linear radiance for every pixel
    """
    _check_job(scene, camera, config)
    W, H = config.width, config.height
    logger.info("Rendering frame %d: %dx%d, %d spp, %d shadow samples, max depth %d",
                frame_index, W, H, config.samples_per_pixel, config.shadow_samples, config.max_depth)
    start = time.perf_counter()

    bands = _band_ranges(H, config.workers)
    tasks = [(scene, camera, config, frame_index, y0, y1) for y0, y1 in bands]

    if executor is not None:
        results = executor.map(_render_band, tasks)
    elif config.workers > 1:
        with ProcessPoolExecutor(max_workers=config.workers) as pool:
            results = list(pool.map(_render_band, tasks))
    else:
        results = map(_render_band, tasks)

    frame = FrameBuffer(W, H)
    for (y0, y1), rows in zip(bands, results):
        for y, row in enumerate(rows, y0):
            frame.set_row(y, row)
        logger.debug("Progress: %d/%d (%d%%)", y1, H, 100 * y1 // H)

    logger.info("Frame %d done in %.2fs", frame_index, time.perf_counter() - start)
    return frame


def render_sequence(scene: Scene, camera: Camera, config: RenderConfig,
                    frame_indices: Iterable[int]) -> Iterator[Tuple[int, FrameBuffer]]:
    """Yield (frame_index, FrameBuffer) pairs in the order frame_indices lists them."""
    _check_job(scene, camera, config)
    if config.workers > 1:
        with ProcessPoolExecutor(max_workers=config.workers) as pool:
            for index in frame_indices:
                yield index, render_frame(scene, camera, config, index, executor=pool)
    else:
        for index in frame_indices:
            yield index, render_frame(scene, camera, config, index)


def tone_map_frame(frame: FrameBuffer, config: RenderConfig) -> LDRFrame:
    """Apply the configured operator, gamma and quantization."""
    return frame.to_ldr(config.tone_map, config.exposure, config.gamma)


def render_ldr_sequence(scene: Scene, camera: Camera, config: RenderConfig,
                        frame_indices: Sequence[int]) -> Iterator[Tuple[int, LDRFrame]]:
    for index, frame in render_sequence(scene, camera, config, frame_indices):
        yield index, tone_map_frame(frame, config)
