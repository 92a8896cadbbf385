"""
lookalike: find visually similar images and reclaim the space they take.

Core features:
- Perceptual hashing (phash) of .jpg/.jpeg/.png files via Pillow + ImageHash
- Greedy anchor-based grouping with a similarity threshold in percent
- Optional deletion of all but one image per group (permanent or to trash via send2trash)
- CLI interface for headless usage
"""

# Get version
try:
    from importlib.metadata import version as _version, PackageNotFoundError
    __version__ = _version("lookalike")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API: only what users should import directly
from lookalike.commands import SimilarityCommand
from lookalike.core import (
    FingerprintedImage, FingerprintStore, ImageGroup, SimilarityThreshold, ScanParams,
    SimilarityGrouper, SpaceReclaimer)
from lookalike.services.file_service import FileService
from lookalike.utils.convert_utils import ConvertUtils

__all__ = [
    "SimilarityCommand",
    "FingerprintedImage",
    "FingerprintStore",
    "ImageGroup",
    "SimilarityThreshold",
    "ScanParams",
    "SimilarityGrouper",
    "SpaceReclaimer",
    "FileService",
    "ConvertUtils",
    "__version__",
]
