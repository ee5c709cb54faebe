#!/usr/bin/env python3
"""
TexCombine - Texture Atlas Tool
Packs a folder of sprite images into one square power-of-two atlas.
"""

import sys
from pathlib import Path

# Add current directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent))

from texcombine_core.cli import main

if __name__ == "__main__":
    sys.exit(main())
