#!/usr/bin/env python3
"""
Command line interface for tile_viewer.
"""

# Standard Library
import argparse
import logging
from pathlib import Path

# local repo modules
from .channel import BoundaryChannel
from .config import AppConfig, apply_user_config, load_user_config
from .console import ConsoleSurface
from .controller import TileController
from .errors import ConfigError
from .store import TileStore

#============================================


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse CLI arguments.
	"""
	parser = argparse.ArgumentParser(
		description="View SVG tiles and edit the keywords in their metadata."
	)
	parser.add_argument(
		"-f",
		"--file",
		dest="files",
		action="append",
		default=[],
		help="SVG file to open (repeatable).",
	)
	parser.add_argument(
		"-d",
		"--folder",
		dest="folders",
		action="append",
		default=[],
		help="Folder to scan recursively for SVG files (repeatable).",
	)
	parser.add_argument(
		"-c",
		"--config",
		dest="config_path",
		help="Optional JSON or YAML config file.",
	)
	parser.add_argument(
		"-i",
		"--index",
		dest="index",
		type=int,
		default=None,
		help="Tile to show first (0-based).",
	)
	parser.add_argument(
		"-k",
		"--keywords",
		dest="keywords",
		help="Comma separated keywords to save into the shown tile.",
	)
	parser.add_argument(
		"--create-metadata",
		dest="create_metadata",
		action="store_true",
		help="Create the metadata block when a tile has none.",
	)
	parser.add_argument(
		"--interactive",
		dest="interactive",
		action="store_true",
		help="Browse tiles with an interactive prompt.",
	)
	parser.add_argument(
		"-v",
		"--verbose",
		dest="verbose",
		action="store_true",
		help="Verbose logging.",
	)
	return parser.parse_args(argv)


#============================================


def build_config(args: argparse.Namespace) -> AppConfig:
	"""
	Build runtime config from args and file.
	"""
	config = AppConfig()
	if args.config_path:
		config.config_path = Path(args.config_path).expanduser()
		apply_user_config(config, load_user_config(config.config_path))
	config.files.extend(Path(p).expanduser() for p in args.files)
	config.folders.extend(Path(p).expanduser() for p in args.folders)
	if args.index is not None:
		config.start_index = args.index
	if args.create_metadata:
		config.create_missing_metadata = True
	if args.interactive:
		config.interactive = True
	if args.verbose:
		config.verbose = True
	return config


#============================================


def build_app(config: AppConfig) -> tuple[TileController, ConsoleSurface]:
	"""
	Wire store, channel, controller and terminal surface.
	"""
	channel = BoundaryChannel()
	store = TileStore(extension=config.extension)
	controller = TileController(store, channel, config)
	controller.bind()
	surface = ConsoleSurface(channel)
	return (controller, surface)


#============================================


def main(argv: list[str] | None = None) -> int:
	"""
	Entry point for the CLI.
	"""
	args = parse_args(argv)
	try:
		config = build_config(args)
	except ConfigError as exc:
		logging.basicConfig(level=logging.WARNING)
		logging.error("%s", exc.message)
		return 1
	if config.verbose:
		logging.basicConfig(level=logging.INFO)
	else:
		logging.basicConfig(level=logging.WARNING)
	controller, surface = build_app(config)
	if config.files:
		controller.load_files(config.normalized_files())
	if config.folders:
		controller.load_folders(config.normalized_folders())
	if surface.index is not None and surface.index != config.start_index:
		if not controller.show_tile(config.start_index):
			logging.error("No tile at index %d", config.start_index)
			return 1
	if args.keywords is not None:
		if surface.index is None:
			logging.error("No tile loaded, keywords not saved")
			return 1
		if not controller.save_keywords(surface.index, args.keywords):
			return 1
	if config.interactive:
		surface.run()
	return 0


#============================================


if __name__ == "__main__":
	raise SystemExit(main())
