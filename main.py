#!/usr/bin/env python3
"""
Edit Pilot - drive an editor with natural-language instructions.

Development entry point; the installed package provides 'edit-pilot'.
"""

import sys
from pathlib import Path

# Add src to path for development
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from edit_pilot.main import main


if __name__ == "__main__":
    sys.exit(main())
