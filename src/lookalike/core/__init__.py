"""
Core similarity engine: scanner, fingerprinting, grouper and reclaimer.

- ImageScannerImpl: recursive traversal, extension filter, sorted decode + fingerprint
- PillowImageDecoder + PerceptualHashAlgorithmImpl: Pillow decoding and ImageHash phash
- SimilarityGrouper: greedy anchor-based clustering over fingerprint distances
- SpaceReclaimer: keeps the closest-to-anchor image and deletes the rest
- Models: FingerprintedImage, ImageGroup, SimilarityThreshold and friends

No GUI dependencies; suitable for CLI and library usage.
"""

from .errors import (
    LookalikeError, InputError, TraversalError, DecodeError, FingerprintError,
    DistanceError, ReclaimError)
from .models import (
    FingerprintedImage, FingerprintStore, ImageGroup, SimilarityThreshold, ScanParams,
    ReclaimReport, IMAGE_EXTENSIONS, DEFAULT_HASH_SIZE)
from .fingerprinter import PillowImageDecoder, PerceptualHashAlgorithmImpl
from .scanner import ImageScannerImpl
from .grouper import SimilarityGrouper
from .reclaimer import SpaceReclaimer

__all__ = [
    "LookalikeError",
    "InputError",
    "TraversalError",
    "DecodeError",
    "FingerprintError",
    "DistanceError",
    "ReclaimError",
    "FingerprintedImage",
    "FingerprintStore",
    "ImageGroup",
    "SimilarityThreshold",
    "ScanParams",
    "ReclaimReport",
    "IMAGE_EXTENSIONS",
    "DEFAULT_HASH_SIZE",
    "PillowImageDecoder",
    "PerceptualHashAlgorithmImpl",
    "ImageScannerImpl",
    "SimilarityGrouper",
    "SpaceReclaimer",
]
