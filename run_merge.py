"""
run_merge.py — CLI Entry Point

Runs the image merger from a source checkout without installing it.

Usage:
    python run_merge.py a.png b.png c.png d.png --columns 2 --rows 2

For help on available options, run:
    python run_merge.py --help
"""
import sys
# Source code in src/ subdirectory
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

import image_merge.cli as im_cli

if __name__ == "__main__":
    raise SystemExit(im_cli.main())
