"""
Pytest config to ensure local package imports work without installation.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _add_repo_root_to_path() -> None:
	"""
	Insert the repo root into sys.path for local imports.
	"""
	repo_root = Path(__file__).resolve().parent.parent
	repo_root_str = str(repo_root)
	if repo_root_str not in sys.path:
		sys.path.insert(0, repo_root_str)


_add_repo_root_to_path()

from tile_viewer.channel import BoundaryChannel, Message  # noqa: E402

INKSCAPE_TILE = """<?xml version="1.0" encoding="UTF-8" standalone="no"?>
<!-- Created with Inkscape -->
<svg
   xmlns:dc="http://purl.org/dc/elements/1.1/"
   xmlns:cc="http://creativecommons.org/ns#"
   xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
   xmlns:svg="http://www.w3.org/2000/svg"
   xmlns="http://www.w3.org/2000/svg"
   width="64"
   height="64"
   viewBox="0 0 64 64"
   version="1.1">
  <title>Stone floor</title>
  <metadata
     id="metadata1">
    <rdf:RDF>
      <cc:Work
         rdf:about="">
        <dc:format>image/svg+xml</dc:format>
        <dc:type
           rdf:resource="http://purl.org/dc/dcmitype/StillImage" />
        <dc:title>Stone floor</dc:title>
        <dc:date>2018-03-04</dc:date>
        <dc:creator>
          <cc:Agent>
            <dc:title>Jane</dc:title>
          </cc:Agent>
        </dc:creator>
        <dc:rights>
          <cc:Agent>
            <dc:title>CC-BY</dc:title>
          </cc:Agent>
        </dc:rights>
        <dc:publisher>
          <cc:Agent>
            <dc:title>Tile Works</dc:title>
          </cc:Agent>
        </dc:publisher>
        <dc:description>Grey flagstones</dc:description>
        <dc:subject>
          <rdf:Bag>
            <rdf:li>stone</rdf:li>
            <rdf:li>floor</rdf:li>
          </rdf:Bag>
        </dc:subject>
      </cc:Work>
    </rdf:RDF>
  </metadata>
  <rect x="0" y="0" width="64" height="64" fill="#888888" />
</svg>
"""

PLAIN_TILE = """<svg xmlns="http://www.w3.org/2000/svg" width="10" height="20" viewBox="0 0 10 20">
  <title>Plain</title>
  <circle cx="5" cy="5" r="4" />
</svg>
"""


class MessageRecorder:
	"""
	Test-only UI surface that records every backend -> UI message.
	"""

	def __init__(self, channel: BoundaryChannel) -> None:
		self.messages: list[Message] = []
		channel.to_ui.observe(self.messages.append)

	def named(self, name: str) -> list[Message]:
		return [message for message in self.messages if message.name == name]

	def statuses(self) -> list[tuple[str, str]]:
		return [(m.args[1], m.args[0]) for m in self.named("status-message")]

	def clear(self) -> None:
		self.messages.clear()


@pytest.fixture
def tile_dir(tmp_path: Path) -> Path:
	"""
	Folder with two metadata tiles, one plain tile and a non-SVG file.
	"""
	(tmp_path / "a.svg").write_text(INKSCAPE_TILE, encoding="utf-8")
	(tmp_path / "notes.txt").write_text("not a tile", encoding="utf-8")
	nested = tmp_path / "nested"
	nested.mkdir()
	(nested / "b.svg").write_text(INKSCAPE_TILE, encoding="utf-8")
	(nested / "c.svg").write_text(PLAIN_TILE, encoding="utf-8")
	return tmp_path
