class AsciiCamError(Exception):
    """Base class for errors raised while rendering a frame."""


class ConfigurationError(AsciiCamError, ValueError):
    """Options or frame dimensions failed validation. Nothing has been drawn."""


class SurfaceError(AsciiCamError, RuntimeError):
    """The rendering surface rejected a resize or a draw instruction."""
