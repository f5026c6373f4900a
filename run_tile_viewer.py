#!/usr/bin/env python3
"""
Repo-root runner for tile_viewer.

Examples:
	python run_tile_viewer.py --folder ~/tiles --interactive
	python run_tile_viewer.py --file tile.svg --keywords "stone, floor"
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
	"""
	Run the CLI entrypoint with repo-root import behavior.
	"""
	repo_root = Path(__file__).resolve().parent
	if str(repo_root) not in sys.path:
		sys.path.insert(0, str(repo_root))

	from tile_viewer.cli import main as cli_main

	raise SystemExit(cli_main())


if __name__ == "__main__":
	main()
