#!/usr/bin/env python3
from __future__ import annotations

# Standard Library
from dataclasses import dataclass, field
from pathlib import Path
import json

# PIP3 modules
import yaml

# local repo modules
from .errors import ConfigError

#============================================

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_PLACEHOLDER = PACKAGE_DIR / "assets" / "no-tile-loaded.svg"


def _default_paths() -> list[Path]:
	return []


#============================================


@dataclass(slots=True)
class AppConfig:
	"""
	Runtime configuration settings.

	Attributes:
		files: SVG files to load at startup.
		folders: Folders to scan recursively for tiles.
		extension: File name suffix collected by folder scans (case-sensitive).
		placeholder_path: Image shown when no tile is loaded.
		create_missing_metadata: Build the metadata/Work chain when saving
			keywords into a tile that lacks it.
		start_index: Tile shown first.
		interactive: Run the terminal command loop.
		verbose: Verbose logging.
		config_path: Optional user config path.
	"""
	files: list[Path] = field(default_factory=_default_paths)
	folders: list[Path] = field(default_factory=_default_paths)
	extension: str = ".svg"
	placeholder_path: Path = DEFAULT_PLACEHOLDER
	create_missing_metadata: bool = False
	start_index: int = 0
	interactive: bool = False
	verbose: bool = False
	config_path: Path | None = None

	#============================================
	def normalized_files(self) -> list[Path]:
		"""
		Normalize user file paths.

		Returns:
			List of absolute Path objects.
		"""
		return [path.expanduser().resolve() for path in self.files]

	#============================================
	def normalized_folders(self) -> list[Path]:
		"""
		Normalize user folder paths.

		Returns:
			List of absolute Path objects.
		"""
		return [path.expanduser().resolve() for path in self.folders]

	#============================================
	def placeholder_url(self) -> str:
		return self.placeholder_path.expanduser().resolve().as_uri()


#============================================


YAML_SUFFIXES = {".yml", ".yaml"}


def load_user_config(config_path: Path | str | None) -> dict:
	"""
	Read viewer settings from a YAML or JSON file.

	The loader is picked by suffix: .yml and .yaml go through PyYAML,
	anything else is read as JSON. An empty YAML file means no settings.

	Args:
		config_path: Settings file; None or a missing file gives no settings.

	Returns:
		Mapping of setting names to raw values.

	Raises:
		ConfigError: The file cannot be parsed or is not a mapping.
	"""
	if config_path is None:
		return {}
	path = Path(config_path).expanduser()
	if not path.is_file():
		return {}
	try:
		text = path.read_text(encoding="utf-8")
		if path.suffix.lower() in YAML_SUFFIXES:
			loaded = yaml.safe_load(text)
		else:
			loaded = json.loads(text)
	except (OSError, UnicodeDecodeError, yaml.YAMLError, json.JSONDecodeError) as exc:
		raise ConfigError(f"Cannot read config {path}: {exc}") from exc
	if loaded is None:
		return {}
	if not isinstance(loaded, dict):
		raise ConfigError(f"Config {path} must hold a mapping, not {type(loaded).__name__}")
	return loaded


#============================================


def apply_user_config(config: AppConfig, user_cfg: dict) -> AppConfig:
	"""
	Merge values from a user config file into the runtime config.

	Args:
		config: Config to update in place.
		user_cfg: Values from load_user_config().

	Returns:
		The updated config.

	Raises:
		ConfigError: start_index is not an integer.
	"""
	if user_cfg.get("files"):
		config.files.extend(Path(p).expanduser() for p in user_cfg["files"])
	if user_cfg.get("folders"):
		config.folders.extend(Path(p).expanduser() for p in user_cfg["folders"])
	if user_cfg.get("extension"):
		config.extension = str(user_cfg["extension"])
	if user_cfg.get("placeholder_path"):
		config.placeholder_path = Path(user_cfg["placeholder_path"]).expanduser()
	if "start_index" in user_cfg:
		try:
			config.start_index = int(user_cfg["start_index"])
		except (TypeError, ValueError) as exc:
			raise ConfigError(f"start_index must be an integer: {exc}") from exc
	if "create_missing_metadata" in user_cfg:
		config.create_missing_metadata = bool(user_cfg.get("create_missing_metadata"))
	if "interactive" in user_cfg:
		config.interactive = bool(user_cfg.get("interactive"))
	if "verbose" in user_cfg:
		config.verbose = bool(user_cfg.get("verbose"))
	return config
