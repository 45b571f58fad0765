"""
Skill library that ships with skillbook.

The library is a regular skill root (alias ``superpowers`` by default)
with the highest rank, so personal skills override it.
"""

import pathlib as _pathlib


def get_library_path() -> _pathlib.Path:
    """Get the path to the bundled skill library."""
    return _pathlib.Path(__file__).parent
