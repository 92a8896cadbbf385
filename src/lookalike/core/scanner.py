"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Walks a directory tree and fingerprints every image file it finds.
Features:
- Recursively scans directories with os.walk
- Keeps only .jpg/.jpeg/.png files (case-insensitive), skipping symlinks
- Sorts paths lexicographically so grouping is reproducible on every platform
- Returns a FingerprintStore in that order
"""

import os
import time
from pathlib import Path
from typing import Callable, List, Optional
import logging

logger = logging.getLogger(__name__)

# Local imports
from lookalike.core.errors import DecodeError, FingerprintError, TraversalError
from lookalike.core.fingerprinter import PerceptualHashAlgorithmImpl, PillowImageDecoder
from lookalike.core.interfaces import FingerprintAlgorithm, ImageDecoder, ImageScanner
from lookalike.core.models import IMAGE_EXTENSIONS, FingerprintedImage, FingerprintStore


class ImageScannerImpl(ImageScanner):
    """
    Scans directories recursively and fingerprints matching image files.

    Attributes:
        root_dir: Root directory to scan
        decoder: Turns a file into a raster image (Pillow by default)
        algorithm: Fingerprints rasters (phash by default)
        extensions: Allowed lowercase extensions, e.g. [".jpg", ".png"]
        skip_unreadable: Log and skip undecodable files instead of aborting the scan
    """

    def __init__(
        self,
        root_dir: str,
        decoder: Optional[ImageDecoder] = None,
        algorithm: Optional[FingerprintAlgorithm] = None,
        extensions: Optional[List[str]] = None,
        skip_unreadable: bool = False
    ):
        self.root_dir = root_dir
        self.decoder = decoder or PillowImageDecoder()
        self.algorithm = algorithm or PerceptualHashAlgorithmImpl()
        self.extensions = [ext.lower() for ext in (extensions or IMAGE_EXTENSIONS)]
        self.skip_unreadable = skip_unreadable

    def scan(self,
             progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None) -> FingerprintStore:
        """
        Collect image paths, then decode and fingerprint each one in sorted order.

        Raises:
            TraversalError: If the tree cannot be walked.
            DecodeError / FingerprintError: If a file cannot be processed
                (unless skip_unreadable is set).
        """
        start_time = time.time()
        paths = self.collect_paths()
        total = len(paths)
        logger.debug(f"Fingerprinting {total} images under {self.root_dir}")

        images = []
        for index, path in enumerate(paths, 1):
            image = self._fingerprint_file(path)
            if image is not None:
                images.append(image)
            if progress_callback:
                progress_callback('fingerprinting', index, total)

        logger.debug(f"Scan completed in {time.time() - start_time:.2f} seconds: "
                     f"{len(images)} of {total} images fingerprinted")
        return FingerprintStore(images)

    def collect_paths(self) -> List[str]:
        """Return every matching image path below root_dir, sorted lexicographically."""
        root_path = Path(self.root_dir)

        if not root_path.exists():
            error_msg = f"Directory does not exist: {self.root_dir}"
            logger.error(error_msg)
            raise TraversalError(error_msg)
        if not root_path.is_dir():
            error_msg = f"Not a directory: {self.root_dir}"
            logger.error(error_msg)
            raise TraversalError(error_msg)

        def _on_walk_error(error: OSError) -> None:
            logger.error(f"Cannot walk {error.filename}: {error}")
            raise TraversalError(f"Cannot walk {error.filename}: {error.strerror or error}") from error

        found = []
        for root, _dirs, files in os.walk(str(root_path), onerror=_on_walk_error):
            for filename in files:
                path = Path(root) / filename
                if self._accepts(path):
                    found.append(str(path))

        found.sort()
        logger.debug(f"Found {len(found)} image files")
        return found

    def _accepts(self, path: Path) -> bool:
        if path.suffix.lower() not in self.extensions:
            return False
        if path.is_symlink():
            logger.debug(f"Skipping symbolic link: {path}")
            return False
        return path.is_file()

    def _fingerprint_file(self, path: str) -> Optional[FingerprintedImage]:
        """Decode and fingerprint one file. Returns None only when the file is skipped."""
        try:
            raster = self.decoder.decode(path)
        except DecodeError as e:
            return self._unreadable(e)

        try:
            fingerprint = self.algorithm.fingerprint(raster)
        except FingerprintError as e:
            return self._unreadable(e)
        except (OSError, ValueError, TypeError) as e:
            return self._unreadable(FingerprintError(path, str(e)))
        finally:
            close = getattr(raster, "close", None)
            if close is not None:
                close()

        logger.debug(f"Fingerprinted {path}")
        return FingerprintedImage(path=path, fingerprint=fingerprint)

    def _unreadable(self, error: Exception) -> None:
        if not self.skip_unreadable:
            logger.error(str(error))
            raise error
        logger.warning(f"Skipping unreadable image: {error}")
        return None
