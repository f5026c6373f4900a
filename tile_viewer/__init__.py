"""
tile_viewer
===========

Browse folders of SVG tiles, inspect their embedded metadata and edit keywords.
"""

__version__ = "0.3.0"

__all__ = [
	"channel",
	"config",
	"controller",
	"scanner",
	"store",
	"svg_metadata",
]
