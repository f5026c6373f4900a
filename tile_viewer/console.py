#!/usr/bin/env python3
"""
Terminal UI surface: renders backend messages and sends user commands.
"""

from __future__ import annotations

# Standard Library
from collections.abc import Callable
import json
import shlex
import sys
from pathlib import Path
from urllib.parse import unquote, urlparse

# local repo modules
from . import channel as msg
from .channel import BoundaryChannel

HELP_TEXT = """Commands:
  n            next tile
  p            previous tile
  k <a, b, c>  save keywords for the shown tile
  r            discard edits and show the tile again
  o <file>...  open SVG files
  d <dir>...   open folders
  c            close all tiles
  q            quit"""

FIELD_LABELS = (
	("title", "Title"),
	("viewbox", "ViewBox"),
	("width", "Width"),
	("height", "Height"),
	("date", "Date"),
	("creator", "Creator"),
	("rights", "Rights"),
	("publisher", "Publisher"),
	("keywords", "Keywords"),
)

#============================================


def _color(text: str, code: str) -> str:
	if sys.stdout.isatty():
		return f"\033[{code}m{text}\033[0m"
	return text


def url_to_path(file_url: str) -> Path:
	return Path(unquote(urlparse(file_url).path))


#============================================


class ConsoleSurface:
	"""
	Prints tiles pushed by the backend and turns typed commands into
	backend messages.
	"""

	#============================================
	def __init__(self, channel: BoundaryChannel) -> None:
		self.channel = channel
		self.index: int | None = None
		self.keywords = ""
		self.status: dict[str, str] = {area: "" for area in msg.STATUS_AREAS}
		channel.to_ui.on(msg.SHOW_TILE, self.on_show_tile)
		channel.to_ui.on(msg.CLEAR_TILE, self.on_clear_tile)
		channel.to_ui.on(msg.STATUS_MESSAGE, self.on_status)

	#============================================
	def on_show_tile(
		self,
		index: int,
		content: str,
		file_url: str,
		file_stats: str,
		metadata: dict[str, str],
	) -> None:
		self.index = index
		self.keywords = metadata.get("keywords", "")
		stats = json.loads(file_stats) if file_stats else {}
		path = url_to_path(file_url)
		print(_color(f"[TILE {index + 1}]", "36") + f" {path.name}")
		print(f"  Path: {path.parent}")
		print(f"  Created: {stats.get('ctime', '')}")
		print(f"  Modified: {stats.get('mtime', '')}")
		for key, label in FIELD_LABELS:
			print(f"  {label}: {metadata.get(key, '')}")

	#============================================
	def on_clear_tile(self, file_url: str) -> None:
		self.index = None
		self.keywords = ""
		print(_color("[CLEARED]", "33") + f" {url_to_path(file_url).name}")

	#============================================
	def on_status(self, text: str, area: str) -> None:
		self.status[area] = text
		print(_color(f"[{area.upper()}]", "34") + f" {text}")

	#============================================
	def handle_command(self, line: str) -> bool:
		"""
		Run one typed command.

		Args:
			line: Raw input line.

		Returns:
			False when the user asked to quit.
		"""
		command, _, rest = line.strip().partition(" ")
		backend = self.channel.to_backend
		if command == "q":
			return False
		if command == "o":
			backend.send(msg.OPEN_FILES, shlex.split(rest))
		elif command == "d":
			backend.send(msg.OPEN_FOLDERS, shlex.split(rest))
		elif command == "c":
			backend.send(msg.CLEAR_TILES)
		elif command in {"n", "p", "k", "r"}:
			if self.index is None:
				print(_color("[INFO]", "34") + " No tile loaded")
				return True
			if command == "n":
				backend.send(msg.NEXT_TILE, self.index)
			elif command == "p":
				backend.send(msg.PREVIOUS_TILE, self.index)
			elif command == "k":
				backend.send(msg.SAVE_KEYWORDS, self.index, rest)
			else:
				backend.send(msg.RESEND_TILE, self.index)
		elif command:
			print(HELP_TEXT)
		return True

	#============================================
	def run(self, read_line: Callable[[str], str] = input) -> None:
		"""
		Read commands until quit or end of input.
		"""
		print(HELP_TEXT)
		while True:
			try:
				line = read_line("tile> ")
			except EOFError:
				break
			if not self.handle_command(line):
				break
