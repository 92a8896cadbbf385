"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the similarity pipeline.
Decoding and fingerprinting are treated as black boxes behind these protocols,
so grouping and reclamation can run against deterministic fakes in tests.

Key Components:
---------------
- ImageDecoder: Turns an image file into an in-memory raster.
- FingerprintAlgorithm: Fingerprints a raster and measures distance between fingerprints.
- ImageScanner: Walks a directory tree and returns a FingerprintStore.
"""

from typing import Any, Callable, Optional, Protocol
from lookalike.core.models import FingerprintStore


# ===== Interfaces =====

class ImageDecoder(Protocol):
    """Interface for decoding image files."""

    def decode(self, path: str) -> Any:
        """
        Decode the file at `path` into a raster image.

        Raises:
            DecodeError: If the file cannot be read or is not a valid image.
        """
        ...


class FingerprintAlgorithm(Protocol):
    """
    Interface for perceptual fingerprint algorithms.

    `max_distance` is the largest value `distance` can ever return
    (for bit-based hashes, the number of bits in the fingerprint).
    """

    @property
    def max_distance(self) -> int: ...

    def fingerprint(self, image: Any) -> Any:
        """Compute the fingerprint of a decoded image."""
        ...

    def distance(self, first: Any, second: Any) -> int:
        """
        Distance between two fingerprints, in [0, max_distance].

        Raises:
            DistanceError: If the fingerprints cannot be compared.
        """
        ...


class ImageScanner(Protocol):
    """
    Interface for scanning file systems and fingerprinting image files.

    Methods:
        scan: Scans and returns the fingerprints in deterministic order.
    """
    def scan(
        self,
        progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> FingerprintStore:
        ...
