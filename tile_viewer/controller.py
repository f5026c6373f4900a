#!/usr/bin/env python3
"""
Presentation controller: tile store -> display payloads on the channel.
"""

from __future__ import annotations

# Standard Library
from collections.abc import Iterable
from datetime import datetime, timezone
import json
import logging
from pathlib import Path

# local repo modules
from . import channel as msg
from .channel import BoundaryChannel, status_area
from .config import AppConfig
from .errors import MetadataParseError, MissingMetadataError, TileViewerError, TileWriteError
from .store import Tile, TileStore
from .svg_metadata import TileMetadata, extract_metadata, parse_document, rewrite_keywords

logger = logging.getLogger(__name__)

#============================================


def coerce_index(value: object) -> int | None:
	"""
	Turn an index received from the UI into an int.

	Args:
		value: int, integer-like float or numeric string.

	Returns:
		The index, or None when the value is not integer-like.
	"""
	if isinstance(value, bool):
		return None
	if isinstance(value, int):
		return value
	if isinstance(value, float):
		return int(value) if value.is_integer() else None
	if isinstance(value, str):
		try:
			return int(value.strip())
		except ValueError:
			return None
	return None


#============================================


def _iso_time(timestamp: float) -> str:
	moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
	return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def file_stats(path: Path) -> dict[str, str]:
	"""
	Selected file system times for a tile.

	Returns:
		Dictionary with atime, mtime and ctime as ISO-8601 UTC strings.
	"""
	stats = path.stat()
	return {
		"atime": _iso_time(stats.st_atime),
		"mtime": _iso_time(stats.st_mtime),
		"ctime": _iso_time(stats.st_ctime),
	}


#============================================


class TileController:
	"""
	Owns the tile store and drives the UI surface through the channel.
	"""

	#============================================
	def __init__(
		self,
		store: TileStore,
		channel: BoundaryChannel,
		config: AppConfig | None = None,
	) -> None:
		self.store = store
		self.channel = channel
		self.config = config or AppConfig()

	#============================================
	def bind(self) -> None:
		"""
		Register handlers for UI -> backend messages.
		"""
		backend = self.channel.to_backend
		backend.on(msg.UPDATE_TILE, self.update_tile)
		backend.on(msg.SAVE_KEYWORDS, self.save_keywords)
		backend.on(msg.RESEND_TILE, self.resend_tile)
		backend.on(msg.PREVIOUS_TILE, self.previous)
		backend.on(msg.NEXT_TILE, self.next)
		backend.on(msg.CLEAR_TILES, self.clear_all)
		backend.on(msg.OPEN_FILES, self.load_files)
		backend.on(msg.OPEN_FOLDERS, self.load_folders)

	#============================================
	def _status(self, text: str, area: str = "left") -> None:
		self.channel.to_ui.send(msg.STATUS_MESSAGE, text, status_area(area))

	#============================================
	def _tile_at(self, index: object) -> tuple[int, Tile] | None:
		position = coerce_index(index)
		if position is None:
			logger.debug("Ignoring non-integer tile index %r", index)
			return None
		tile = self.store.get(position)
		if tile is None:
			logger.debug("Ignoring out-of-range tile index %d", position)
			return None
		return (position, tile)

	#============================================
	def show_tile(self, index: object) -> bool:
		"""
		Send the display payload for one tile.

		Args:
			index: Tile index.

		Returns:
			True when a payload was sent.
		"""
		found = self._tile_at(index)
		if found is None:
			return False
		position, tile = found
		problems: list[str] = []
		try:
			stats = file_stats(tile.path)
		except OSError as exc:
			logger.warning("Cannot stat %s: %s", tile.path, exc)
			stats = {}
			problems.append(f"Cannot read file times for {tile.path.name}")
		try:
			metadata = extract_metadata(parse_document(tile.content))
			tile.error = None
		except MetadataParseError as exc:
			logger.error("Tile %s is not valid SVG: %s", tile.path, exc)
			tile.error = exc.message
			metadata = TileMetadata()
			problems.append(f"Unloadable tile {tile.path.name}: {exc.message}")
		self.channel.to_ui.send(
			msg.SHOW_TILE,
			position,
			tile.content,
			tile.path.as_uri(),
			json.dumps(stats),
			metadata.to_dict(),
		)
		self._status(f"{position + 1} of {len(self.store)}", "middle")
		for problem in problems:
			self._status(problem, "left")
		return True

	#============================================
	def resend_tile(self, index: object) -> bool:
		"""
		Re-read a tile from disk and show it again.

		Used when the UI drops an edit; changes made outside the viewer are
		picked up too. A tile that cannot be re-read is shown from memory.
		"""
		position = coerce_index(index)
		if position is None or not self.store.in_range(position):
			return False
		self.store.reload(position)
		return self.show_tile(position)

	#============================================
	def previous(self, index: object) -> bool:
		position = coerce_index(index)
		if position is None or not self.store.in_range(position - 1):
			return False
		return self.show_tile(position - 1)

	#============================================
	def next(self, index: object) -> bool:
		position = coerce_index(index)
		if position is None or not self.store.in_range(position + 1):
			return False
		return self.show_tile(position + 1)

	#============================================
	def save_keywords(self, index: object, keywords_csv: str) -> bool:
		"""
		Rewrite a tile's keyword list and persist it.

		Args:
			index: Tile index.
			keywords_csv: Comma separated keywords as edited.

		Returns:
			True when the file was written.
		"""
		if not isinstance(keywords_csv, str):
			logger.debug("Ignoring keyword payload of type %s", type(keywords_csv).__name__)
			return False
		found = self._tile_at(index)
		if found is None:
			return False
		position, tile = found
		try:
			content = rewrite_keywords(
				tile.content,
				keywords_csv,
				create_missing=self.config.create_missing_metadata,
			)
		except (MetadataParseError, MissingMetadataError) as exc:
			self._report_save_failure(tile, exc)
			return False
		return self._persist(position, tile, content)

	#============================================
	def update_tile(self, index: object, content: str) -> bool:
		"""
		Persist raw content produced by the UI surface.
		"""
		if not isinstance(content, str):
			logger.debug("Ignoring tile content of type %s", type(content).__name__)
			return False
		found = self._tile_at(index)
		if found is None:
			return False
		position, tile = found
		return self._persist(position, tile, content)

	#============================================
	def _persist(self, position: int, tile: Tile, content: str) -> bool:
		try:
			self.store.replace_content(position, content)
		except TileWriteError as exc:
			self._report_save_failure(tile, exc)
			return False
		logger.info("Saved %s", tile.path)
		self._status(f"Saved {tile.path.name}", "left")
		self.show_tile(position)
		return True

	#============================================
	def _report_save_failure(self, tile: Tile, exc: TileViewerError) -> None:
		logger.error("Saving %s failed: %s", tile.path, exc.message)
		self._status(f"Save failed: {exc.message}", "left")

	#============================================
	def load_files(self, paths: Iterable[Path | str]) -> int:
		"""
		Load tiles from explicit file paths and show the first new one.

		Returns:
			Number of tiles added.
		"""
		before = len(self.store)
		added = self.store.load_from_paths(Path(p) for p in paths)
		self._after_load(before, added)
		return added

	#============================================
	def load_folders(self, folders: Iterable[Path | str]) -> int:
		"""
		Load every tile below the given folders and show the first new one.

		Returns:
			Number of tiles added.
		"""
		before = len(self.store)
		added = self.store.load_from_directories(Path(p) for p in folders)
		self._after_load(before, added)
		return added

	#============================================
	def _after_load(self, before: int, added: int) -> None:
		self._status(f"Added: {added}", "left")
		self._status(f"Tiles: {len(self.store)}", "right")
		if added:
			self.show_tile(before)
		else:
			logger.info("No tiles were added")

	#============================================
	def clear_all(self) -> None:
		"""
		Drop every tile and reset the display.
		"""
		self.store.clear()
		self.channel.to_ui.send(msg.CLEAR_TILE, self.config.placeholder_url())
		self._status("Added: 0", "left")
		self._status("0 of 0", "middle")
		self._status("Tiles: 0", "right")
