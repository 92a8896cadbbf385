"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Greedy threshold clustering of fingerprinted images.

Each unclaimed image in input order becomes an anchor; every later unclaimed
image within the threshold of that anchor joins its group. Membership is
decided against the anchor only, so the clustering is order-dependent and
not transitive.
"""

from typing import Callable, List, Optional, Sequence
import logging

from lookalike.core.errors import DistanceError
from lookalike.core.fingerprinter import PerceptualHashAlgorithmImpl
from lookalike.core.interfaces import FingerprintAlgorithm
from lookalike.core.models import FingerprintedImage, ImageGroup, SimilarityThreshold

logger = logging.getLogger(__name__)


class SimilarityGrouper:
    """
    Partitions images into groups of visually similar images.
    Uses an injected FingerprintAlgorithm for distances; holds no state between calls.
    """

    def __init__(self, algorithm: Optional[FingerprintAlgorithm] = None):
        self.algorithm = algorithm or PerceptualHashAlgorithmImpl()

    def group(
            self,
            images: Sequence[FingerprintedImage],
            threshold: SimilarityThreshold,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> List[ImageGroup]:
        """
        Args:
            images: Images in discovery order (never modified)
            threshold: Minimum similarity to the anchor, inclusive
            progress_callback: (stage, current, total) -> None

        Returns:
            Groups with 2+ images, in anchor order. Images that match
            nothing appear in no group.
        """
        max_distance = self.algorithm.max_distance
        total = len(images)
        claimed = [False] * total
        groups = []

        for i in range(total):
            if claimed[i]:
                continue

            anchor = images[i]
            group = ImageGroup([anchor])
            for j in range(i + 1, total):
                if claimed[j]:
                    continue
                try:
                    distance = self.algorithm.distance(anchor.fingerprint, images[j].fingerprint)
                except DistanceError as e:
                    logger.warning(f"Error calculating distance between {anchor.path} and {images[j].path}: {e}")
                    continue

                if threshold.accepts(distance, max_distance):
                    group.add_image(images[j])
                    claimed[j] = True

            if group.is_similar_group():
                logger.debug(f"Group anchored at {anchor.path}: {len(group)} images")
                groups.append(group)

            if progress_callback:
                progress_callback('grouping', i + 1, total)

        return groups
