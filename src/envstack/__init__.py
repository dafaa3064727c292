"""
envstack - layered environment declarations

envstack discovers ``.envstack.yaml`` files across a directory tree, composes
them into one ordered environment description, and freezes/verifies that
description with a lock file.
"""

__version__ = "0.4.0"
__all__ = ["__version__"]
