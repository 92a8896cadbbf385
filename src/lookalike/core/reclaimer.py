"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/reclaimer.py
Keeps one representative per group and deletes the rest.

The member closest to the anchor is kept; since the anchor's distance to
itself is 0 and the sort is stable, that is always the anchor. Deletion is
not transactional: files removed before a failure stay removed, but their
bytes are not reported.
"""

from typing import Iterable, List, Optional
import logging

from lookalike.core.errors import DistanceError, ReclaimError
from lookalike.core.fingerprinter import PerceptualHashAlgorithmImpl
from lookalike.core.interfaces import FingerprintAlgorithm
from lookalike.core.models import FingerprintedImage, ImageGroup, ReclaimReport
from lookalike.services.file_service import FileService

logger = logging.getLogger(__name__)


class SpaceReclaimer:
    """
    Deletes all but one image of each group and tallies the bytes freed.

    Args:
        algorithm: Used to rank members by distance to the anchor
        use_trash: Move files to the system trash instead of removing them
    """

    def __init__(self, algorithm: Optional[FingerprintAlgorithm] = None, use_trash: bool = False):
        self.algorithm = algorithm or PerceptualHashAlgorithmImpl()
        self.use_trash = use_trash

    def order_for_keep(self, group: ImageGroup) -> List[FingerprintedImage]:
        """
        Return the group's images sorted by ascending distance to the anchor
        (stable, anchor first). The group itself is left untouched.
        """
        if not len(group):
            return []

        anchor = group.anchor

        def distance_to_anchor(image: FingerprintedImage) -> int:
            if image is anchor:
                return 0
            try:
                return self.algorithm.distance(image.fingerprint, anchor.fingerprint)
            except DistanceError as e:
                logger.warning(f"Error calculating distance for {image.path}: {e}")
                return self.algorithm.max_distance

        return sorted(group.images, key=distance_to_anchor)

    def reclaim(self, group: ImageGroup) -> int:
        """
        Delete every member except the one kept and return the bytes freed.

        Returns 0 for groups with fewer than 2 images.

        Raises:
            ReclaimError: On the first stat or removal failure. Bytes counted
                for this group so far are dropped.
        """
        if len(group) < 2:
            return 0

        ordered = self.order_for_keep(group)
        logger.debug(f"Keeping {ordered[0].path}")

        total_saved = 0
        for image in ordered[1:]:
            try:
                size = FileService.get_file_size(image.path)
                FileService.delete_file(image.path, use_trash=self.use_trash)
            except (OSError, RuntimeError) as e:
                logger.error(f"Failed to delete {image.path}: {e}")
                raise ReclaimError(image.path, str(e), bytes_discarded=total_saved) from e
            total_saved += size
            logger.debug(f"Deleted {image.path} ({size} bytes)")

        return total_saved

    def reclaim_all(self, groups: Iterable[ImageGroup]) -> ReclaimReport:
        """
        Reclaim each group in turn. A failing group is recorded and skipped;
        only groups reclaimed in full count towards bytes_freed.
        """
        report = ReclaimReport()
        for group in groups:
            if not group.is_similar_group():
                continue
            try:
                saved = self.reclaim(group)
            except ReclaimError as e:
                logger.debug(f"Group anchored at {group.anchor.path} left partially reclaimed")
                report.failures.append((group, e))
                continue
            report.bytes_freed += saved
            report.groups_reclaimed += 1
            report.files_deleted += len(group) - 1
        return report
