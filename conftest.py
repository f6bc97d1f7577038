from __future__ import annotations

import sys
from pathlib import Path

HERE = Path(__file__).resolve().parent
SRC = HERE / "src"
# src for the texia package, the root for scripts such as seed_demo
for path in (SRC, HERE):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))
