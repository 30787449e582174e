"""
Palette extraction error types.

Every failure of an extraction request is one of these. The service layer
maps ``status_code`` onto the HTTP response; nothing here is retried.
"""


class PaletteError(Exception):
    """Base class for all extraction failures."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(PaletteError):
    """Bad grid/K parameters or an empty raster."""

    status_code = 400


class DecodeError(PaletteError):
    """Input bytes are not a supported raster format."""

    status_code = 415


class FetchError(PaletteError):
    """The source image could not be retrieved."""

    status_code = 502


class ComputationError(PaletteError):
    """The color reduction itself failed, e.g. clustering did not converge."""

    status_code = 500
