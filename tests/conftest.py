from __future__ import annotations

import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
PYTHON_SRC = ROOT / "python"

if str(PYTHON_SRC) not in sys.path:
    sys.path.insert(0, str(PYTHON_SRC))
else:
    sys.path.remove(str(PYTHON_SRC))
    sys.path.insert(0, str(PYTHON_SRC))


def _prefer_local_package(name: str) -> None:
    loaded = sys.modules.get(name)
    if loaded is None:
        return
    mod_file = getattr(loaded, "__file__", "") or ""
    if str(PYTHON_SRC / name) in mod_file:
        return
    for mod in list(sys.modules):
        if mod == name or mod.startswith(name + "."):
            sys.modules.pop(mod, None)


_prefer_local_package("a11yscan")
_prefer_local_package("a11yscan_cli")
