"""
Build script for htmlfilter with optional mypyc compilation.

Usage:
    # Pure Python build (default)
    python -m build

    # Compiled with mypyc
    HTMLFILTER_USE_MYPYC=1 pip install .
"""

import os
import sys
from pathlib import Path

from setuptools import setup

USE_MYPYC = os.environ.get("HTMLFILTER_USE_MYPYC", "0") == "1"

# Scanning and tree assembly dominate parse time.
# node.py and filter.py stay interpreted: frozen slotted dataclasses with a shared base.
MYPYC_MODULES = [
    "src/htmlfilter/tokenizer.py",
    "src/htmlfilter/treebuilder.py",
    "src/htmlfilter/serialize.py",
]


def build_with_mypyc() -> list:
    """Build extension modules using mypyc."""
    try:
        from mypyc.build import mypycify
    except ImportError:
        print("ERROR: mypyc is not installed. Install with: pip install mypy", file=sys.stderr)
        print("Or install with mypyc support: pip install htmlfilter[mypyc]", file=sys.stderr)
        sys.exit(1)

    for module_path in MYPYC_MODULES:
        if not Path(module_path).exists():
            print(f"ERROR: Module not found: {module_path}", file=sys.stderr)
            sys.exit(1)

    print(f"Compiling {len(MYPYC_MODULES)} htmlfilter modules with mypyc:")
    for module in MYPYC_MODULES:
        print(f"  - {module}")

    mypyc_options = {
        "opt_level": os.environ.get("MYPYC_OPT_LEVEL", "3"),
        "debug_level": os.environ.get("MYPYC_DEBUG_LEVEL", "0"),
        "separate": False,
        "multi_file": False,
    }
    return mypycify(MYPYC_MODULES, **mypyc_options)


if __name__ == "__main__":
    ext_modules = []

    if USE_MYPYC:
        ext_modules = build_with_mypyc()

    setup(
        ext_modules=ext_modules,
    )
