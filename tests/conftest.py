from __future__ import annotations

import sys
from pathlib import Path

# Import the local src tree (and the shared fakes next to this file).
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))
sys.path.insert(0, str(Path(__file__).resolve().parent))
