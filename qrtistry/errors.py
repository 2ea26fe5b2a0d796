"""Typed errors raised by the render engine and its collaborators."""


class QrtistryError(Exception):
    """Base class for every error raised by qrtistry."""


class ConfigValidationError(QrtistryError, ValueError):
    """A style field is out of range, or fields form an unusable combination."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class MatrixError(QrtistryError, ValueError):
    """The module matrix is empty, ragged or not square."""


class GeometryError(QrtistryError):
    """Layout cannot be computed for the requested output."""


class DegenerateModuleSizeError(GeometryError):
    """Output too small: a module would be narrower than one pixel."""

    def __init__(self, matrix_size: int, border: int, output_size: int):
        self.matrix_size = matrix_size
        self.border = border
        self.output_size = output_size
        self.module_size = output_size / (matrix_size + 2 * border)
        super().__init__(
            f"module size {self.module_size:.3f}px < 1px "
            f"({output_size}px for {matrix_size} modules + {border} border on each side)"
        )


class AssetDecodeError(QrtistryError):
    """Logo or background bytes could not be decoded as an image."""


class EncodingError(QrtistryError):
    """Content cannot be encoded into a symbol at the chosen error-correction level."""


class PresetError(QrtistryError):
    """A style preset is malformed."""


class RenderError(QrtistryError):
    """Unexpected failure after painting started."""
