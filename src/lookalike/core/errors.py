"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exception hierarchy for scanning, grouping and reclaiming images.

- InputError: bad CLI arguments or threshold values (nothing is scanned)
- TraversalError: directory walk failed (the whole scan is aborted)
- DecodeError / FingerprintError: a single image could not be processed
- DistanceError: a single pair of fingerprints could not be compared
- ReclaimError: stat or removal failed while reclaiming a group
"""

from typing import Optional


class LookalikeError(RuntimeError):
    """Base class for all errors raised by lookalike."""


class InputError(LookalikeError, ValueError):
    """Invalid user input (arguments, percentages, parameters)."""


class TraversalError(LookalikeError):
    """Raised when the directory tree cannot be walked."""


class DecodeError(LookalikeError):
    """Raised when an image file cannot be decoded."""

    def __init__(self, path: str, message: str):
        super().__init__(f"Cannot decode {path}: {message}")
        self.path = path


class FingerprintError(LookalikeError):
    """Raised when a decoded image cannot be fingerprinted."""

    def __init__(self, path: str, message: str):
        super().__init__(f"Cannot fingerprint {path}: {message}")
        self.path = path


class DistanceError(LookalikeError):
    """Raised when two fingerprints cannot be compared."""


class ReclaimError(LookalikeError):
    """Raised when a file of a group cannot be measured or removed."""

    def __init__(self, path: str, message: str, bytes_discarded: Optional[int] = None):
        super().__init__(f"Failed to reclaim {path}: {message}")
        self.path = path
        self.bytes_discarded = bytes_discarded or 0
