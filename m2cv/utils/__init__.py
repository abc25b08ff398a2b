"""
Shared utilities for m2cv.

Common functionality used across contexts:
- Filesystem primitives
- Logger setup
"""

from m2cv.utils.filesystem import copy_file, create_dir, exists

__all__ = ["copy_file", "create_dir", "exists"]
