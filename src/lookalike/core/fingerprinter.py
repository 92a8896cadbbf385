"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

fingerprinter.py
Pillow-based image decoding and ImageHash-based perceptual fingerprints.

Use the same way to plug in any other decoder or hash (dhash, whash, ...):
implement ImageDecoder / FingerprintAlgorithm and inject it into the scanner.
"""

import imagehash
from PIL import Image, UnidentifiedImageError

from lookalike.core.errors import DecodeError, DistanceError
from lookalike.core.interfaces import FingerprintAlgorithm, ImageDecoder
from lookalike.core.models import DEFAULT_HASH_SIZE


class PillowImageDecoder(ImageDecoder):
    """Decodes JPEG/PNG (and anything else Pillow understands) into PIL images."""

    def decode(self, path: str) -> Image.Image:
        try:
            img = Image.open(path)
        except (OSError, UnidentifiedImageError, ValueError, Image.DecompressionBombError) as e:
            raise DecodeError(path, str(e)) from e

        # Force pixel data to load now so truncated files fail here, not later
        try:
            img.load()
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
            img.close()
            raise DecodeError(path, str(e)) from e
        return img


class PerceptualHashAlgorithmImpl(FingerprintAlgorithm):
    """
    DCT perceptual hash (phash). With the default hash_size of 8 the
    fingerprint has 64 bits and distances range over [0, 64].
    """

    def __init__(self, hash_size: int = DEFAULT_HASH_SIZE):
        if hash_size < 2:
            raise ValueError("hash_size must be at least 2")
        self.hash_size = int(hash_size)

    @property
    def max_distance(self) -> int:
        return self.hash_size * self.hash_size

    def fingerprint(self, image: Image.Image) -> imagehash.ImageHash:
        return imagehash.phash(image, hash_size=self.hash_size)

    def distance(self, first: imagehash.ImageHash, second: imagehash.ImageHash) -> int:
        try:
            return int(first - second)
        except (TypeError, ValueError, AttributeError) as e:
            raise DistanceError(f"Cannot compare fingerprints: {e}") from e
