#!/usr/bin/env python3
"""
In-memory collection of loaded tiles.
"""

from __future__ import annotations

# Standard Library
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
import logging
from pathlib import Path

# local repo modules
from .errors import TileWriteError
from .scanner import iter_folders

logger = logging.getLogger(__name__)

#============================================


@dataclass(slots=True)
class Tile:
	"""
	One loaded SVG file.

	Attributes:
		path: Absolute file path.
		content: Raw text as last read from or written to disk.
		error: Parse error message when the content is not valid XML.
	"""
	path: Path
	content: str
	error: str | None = None

	#============================================
	@classmethod
	def read(cls, path: Path) -> Tile:
		"""
		Read a tile from disk.

		Raises:
			OSError: The file cannot be read.
		"""
		return cls(path=path, content=path.read_text(encoding="utf-8"))

	#============================================
	@property
	def loadable(self) -> bool:
		return self.error is None


#============================================


class TileStore:
	"""
	Ordered, append-only list of tiles.

	Indices stay stable while tiles are appended; only clear() removes tiles.
	"""

	#============================================
	def __init__(self, extension: str = ".svg") -> None:
		self.extension = extension
		self._tiles: list[Tile] = []

	#============================================
	def __len__(self) -> int:
		return len(self._tiles)

	#============================================
	def __iter__(self) -> Iterator[Tile]:
		return iter(self._tiles)

	#============================================
	def in_range(self, index: int) -> bool:
		return 0 <= index < len(self._tiles)

	#============================================
	def load_from_paths(self, paths: Iterable[Path]) -> int:
		"""
		Read and append tiles.

		Files that cannot be read are logged and skipped.

		Args:
			paths: File paths.

		Returns:
			Number of tiles added.
		"""
		added = 0
		for path in paths:
			path = Path(path).expanduser().resolve()
			try:
				tile = Tile.read(path)
			except (OSError, UnicodeDecodeError) as exc:
				logger.warning("Skipping unreadable tile %s: %s", path, exc)
				continue
			self._tiles.append(tile)
			added += 1
		logger.info("Loaded %d tile(s), store holds %d", added, len(self._tiles))
		return added

	#============================================
	def load_from_directories(self, folders: Iterable[Path]) -> int:
		"""
		Scan folders recursively and append every tile found.

		Args:
			folders: Folders to scan.

		Returns:
			Number of tiles added.
		"""
		folder_list = [Path(folder).expanduser().resolve() for folder in folders]
		return self.load_from_paths(iter_folders(folder_list, self.extension))

	#============================================
	def get(self, index: int) -> Tile | None:
		if not self.in_range(index):
			return None
		return self._tiles[index]

	#============================================
	def replace_content(self, index: int, content: str) -> bool:
		"""
		Write new content to a tile's file, then update the tile.

		Args:
			index: Tile index.
			content: New SVG text.

		Returns:
			False when the index is out of range, True after a successful write.

		Raises:
			TileWriteError: The write failed; the tile is left unchanged.
		"""
		tile = self.get(index)
		if tile is None:
			logger.debug("replace_content ignored for index %s", index)
			return False
		try:
			tile.path.write_text(content, encoding="utf-8")
		except OSError as exc:
			raise TileWriteError(tile.path, f"Could not write {tile.path}: {exc}") from exc
		tile.content = content
		tile.error = None
		return True

	#============================================
	def reload(self, index: int) -> bool:
		"""
		Re-read a tile's content from disk.

		Returns:
			True when the content was refreshed.
		"""
		tile = self.get(index)
		if tile is None:
			return False
		try:
			tile.content = tile.path.read_text(encoding="utf-8")
		except (OSError, UnicodeDecodeError) as exc:
			logger.warning("Cannot reload tile %s: %s", tile.path, exc)
			return False
		tile.error = None
		return True

	#============================================
	def clear(self) -> None:
		self._tiles = []
