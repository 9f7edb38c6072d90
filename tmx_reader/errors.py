"""
Exceptions raised while reading TMX/TSX documents.

Every failure aborts the whole parse. There is no partial map: callers
either get a complete document tree or one of these exceptions.

All exceptions derive from TmxError, so a loader that does not care about
the category can catch that single class.
"""

from pathlib import Path
from typing import Optional, Union


class TmxError(Exception):
    """Base class for every error raised by tmx_reader."""


class MalformedAttributes(TmxError):
    """A required attribute was missing or did not have the expected type."""


class UnsupportedEncoding(TmxError):
    """Tile data uses an encoding/compression pair we cannot decode."""


class DecompressionFailure(TmxError):
    """The zlib/gzip/zstd stream could not be inflated."""


class EncodingFailure(TmxError):
    """Tile data text is not valid base64."""


class TokenizerFailure(TmxError):
    """The XML tokenizer rejected the markup."""


class PrematureEnd(TmxError):
    """The document ended before the expected closing structure."""


class ExternalResourceError(TmxError):
    """
    An external tileset reference could not be resolved.

    Raised when the map has no known location on disk, or when the
    referenced .tsx file cannot be opened.
    """

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = path


class MapFileNotFound(TmxError):
    """parse_file() or parse_tileset_file() was given a path that does not exist."""

    def __init__(self, path: Union[str, Path]):
        super().__init__(f"File not found: {path}")
        self.path = path


class MapFileUnreadable(TmxError):
    """The file exists but cannot be opened (a directory, no permission...)."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = path


class PropertyError(TmxError):
    """Base class for custom property failures."""


class UnknownPropertyType(PropertyError):
    """A <property> declared a type we do not know."""

    def __init__(self, property_type: str):
        super().__init__(f'Unknown property type "{property_type}"')
        self.property_type = property_type


class PropertyValueParseFailure(PropertyError):
    """A <property> value does not parse as its declared type."""
