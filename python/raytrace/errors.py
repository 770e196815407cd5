"""Exceptions raised while setting up a render job."""


class RaytraceError(Exception):
    """Base class for every error raised by the ray tracer."""


class SceneConfigError(RaytraceError, ValueError):
    """Degenerate geometry or a malformed scene description."""


class RenderConfigError(RaytraceError, ValueError):
    """Invalid render settings (sample counts, tone-mapping operator, ...)."""
