#!/usr/bin/env python3
"""
Folder scanner for SVG tiles.
"""

from __future__ import annotations

# Standard Library
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

#============================================


def iter_tile_paths(
	folder: Path,
	extension: str = ".svg",
	_visited: set[Path] | None = None,
) -> list[Path]:
	"""
	Collect tile files below a folder.

	Entries are visited depth-first in the order the file system lists them;
	the suffix match is case-sensitive. Folders that cannot be listed are
	logged and skipped. A folder reached twice, for example through a
	symlink back to a parent, is only scanned the first time.

	Args:
		folder: Folder to scan.
		extension: File name suffix to collect.

	Returns:
		List of file paths.
	"""
	visited = set() if _visited is None else _visited
	paths: list[Path] = []
	real = folder.resolve()
	if real in visited:
		logger.debug("Already scanned %s, skipping", folder)
		return paths
	visited.add(real)
	try:
		entries = list(folder.iterdir())
	except OSError as exc:
		logger.warning("Cannot list folder %s: %s", folder, exc)
		return paths
	for entry in entries:
		if entry.is_dir():
			paths.extend(iter_tile_paths(entry, extension, visited))
		elif entry.name.endswith(extension):
			paths.append(entry)
	return paths


#============================================


def iter_folders(folders: list[Path], extension: str = ".svg") -> list[Path]:
	"""
	Collect tile files below each folder, folder by folder.

	Each folder is scanned on its own, so naming a folder twice loads its
	tiles twice.

	Args:
		folders: Folders to scan.
		extension: File name suffix to collect.

	Returns:
		List of file paths.
	"""
	paths: list[Path] = []
	for folder in folders:
		paths.extend(iter_tile_paths(folder, extension))
	return paths
