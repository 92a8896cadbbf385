"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for image scanning, similarity grouping and space reclamation.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, List, Optional, Tuple, Union
import math
import os

from lookalike.core.errors import InputError, ReclaimError


IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png")
DEFAULT_HASH_SIZE = 8  # phash bits per side -> 64-bit fingerprint


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class FingerprintedImage:
    """
    A scanned image file together with its perceptual fingerprint.
    The fingerprint is opaque: it is only ever compared through a
    FingerprintAlgorithm, so it takes no part in equality.
    """
    path: str
    fingerprint: Any = field(compare=False, repr=False)

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    def __repr__(self):
        return f"<FingerprintedImage path={self.path}>"


@dataclass
class ImageGroup:
    """
    Images judged similar to the group's anchor (the first member).
    Only the anchor-to-member distance is guaranteed to pass the threshold.
    """
    images: List[FingerprintedImage] = field(default_factory=list)

    @property
    def anchor(self) -> FingerprintedImage:
        if not self.images:
            raise IndexError("Empty group has no anchor")
        return self.images[0]

    @property
    def paths(self) -> List[str]:
        return [image.path for image in self.images]

    def add_image(self, image: FingerprintedImage) -> None:
        self.images.append(image)

    def is_similar_group(self) -> bool:
        """True if this group contains at least two images."""
        return len(self.images) >= 2

    def __len__(self):
        return len(self.images)

    def __iter__(self) -> Iterator[FingerprintedImage]:
        return iter(self.images)

    def __getitem__(self, index):
        return self.images[index]

    def __repr__(self):
        return f"<ImageGroup anchor={self.images[0].path if self.images else None}, count={len(self.images)}>"


@dataclass(frozen=True)
class SimilarityThreshold:
    """
    Required similarity in [0.0, 1.0]: 1.0 accepts identical fingerprints only,
    0.0 accepts any pair.
    """
    value: float

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise InputError(f"Similarity threshold must be a number, got {self.value!r}")
        if math.isnan(self.value) or not 0.0 <= self.value <= 1.0:
            raise InputError(f"Similarity threshold must be between 0 and 1, got {self.value}")

    @classmethod
    def from_percentage(cls, percentage: Union[str, int, float]) -> 'SimilarityThreshold':
        """Build a threshold from a user-supplied percentage in [0, 100]."""
        try:
            value = float(str(percentage).strip())
        except ValueError:
            raise InputError(f"Invalid similarity percentage: '{percentage}'")

        if not math.isfinite(value):
            raise InputError(f"Invalid similarity percentage: '{percentage}'")
        if value < 0 or value > 100:
            raise InputError("Invalid similarity percentage: percentage must be between 0 and 100")
        return cls(value / 100)

    @staticmethod
    def similarity(distance: int, max_distance: int) -> float:
        return 1 - distance / max_distance

    def accepts(self, distance: int, max_distance: int) -> bool:
        """Inclusive comparison: a similarity equal to the threshold passes."""
        return self.similarity(distance, max_distance) >= self.value

    @property
    def percentage(self) -> float:
        return self.value * 100


@dataclass
class ScanParams:
    """Parameters for a scan-and-group run, validated on creation."""
    root_dir: str
    threshold: SimilarityThreshold
    extensions: List[str] = field(default_factory=lambda: list(IMAGE_EXTENSIONS))
    skip_unreadable: bool = False

    def __post_init__(self):
        if not self.root_dir:
            raise InputError("Root directory cannot be empty")

        if not isinstance(self.threshold, SimilarityThreshold):
            raise InputError("threshold must be a SimilarityThreshold")

        # Normalize extensions: ensure they start with dot and are lowercase
        normalized = []
        for ext in self.extensions:
            ext = ext.strip().lower()
            if ext and not ext.startswith('.'):
                ext = f".{ext}"
            if ext:
                normalized.append(ext)
        if not normalized:
            raise InputError("At least one image extension is required")
        self.extensions = normalized


@dataclass
class ReclaimReport:
    """Outcome of reclaiming a batch of groups."""
    bytes_freed: int = 0
    groups_reclaimed: int = 0
    files_deleted: int = 0
    failures: List[Tuple[ImageGroup, ReclaimError]] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)


# =============================
# Utility Classes
# =============================

class FingerprintStore:
    """
    Ordered, read-only collection of fingerprinted images in discovery order.
    Built once by the scanner and handed to the grouper by reference.
    """

    def __init__(self, images: Optional[Iterable[FingerprintedImage]] = None):
        self._images: Tuple[FingerprintedImage, ...] = tuple(images or ())

    @property
    def images(self) -> Tuple[FingerprintedImage, ...]:
        return self._images

    def get_paths(self) -> List[str]:
        return [image.path for image in self._images]

    def __len__(self):
        return len(self._images)

    def __bool__(self):
        return bool(self._images)

    def __iter__(self) -> Iterator[FingerprintedImage]:
        return iter(self._images)

    def __getitem__(self, index):
        return self._images[index]

    def __repr__(self):
        return f"<FingerprintStore({len(self._images)} images)>"
