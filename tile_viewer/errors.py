#!/usr/bin/env python3
"""
Exception classes for tile_viewer.
"""

from __future__ import annotations

# Standard Library
from pathlib import Path

#============================================


class TileViewerError(Exception):
	"""
	Base exception for all tile_viewer errors.
	"""

	def __init__(self, message: str = "") -> None:
		self.message = message
		super().__init__(message)


class MetadataParseError(TileViewerError):
	"""
	Raised when tile content is not parseable as XML.
	"""


class MissingMetadataError(TileViewerError):
	"""
	Raised when keywords cannot be attached because the document has no
	<metadata> element or no cc:Work container inside it.
	"""


class TileWriteError(TileViewerError):
	"""
	Raised when a tile cannot be written back to disk.
	"""

	def __init__(self, path: Path, message: str = "") -> None:
		self.path = path
		super().__init__(message or f"Could not write {path}")


class ConfigError(TileViewerError):
	"""
	Raised when a user config file cannot be read or holds bad values.
	"""
