"""
Unified command orchestrator for similarity search.
This is the single place where scanning and grouping are wired together;
front ends only parse input and print output.
"""
from typing import Callable, List, Optional
from lookalike.core.fingerprinter import PerceptualHashAlgorithmImpl, PillowImageDecoder
from lookalike.core.grouper import SimilarityGrouper
from lookalike.core.interfaces import FingerprintAlgorithm, ImageDecoder
from lookalike.core.models import FingerprintedImage, FingerprintStore, ImageGroup, ScanParams
from lookalike.core.scanner import ImageScannerImpl


class SimilarityCommand:
    """
    Orchestrates the scan-and-group workflow:
    1. Walk params.root_dir and fingerprint every image (sorted by path)
    2. Group the fingerprints with params.threshold

    Usage:
        params = ScanParams(root_dir="photos", threshold=SimilarityThreshold.from_percentage("90"))
        command = SimilarityCommand()
        groups = command.execute(params, progress_callback=cli_progress_printer)
    """

    def __init__(
            self,
            decoder: Optional[ImageDecoder] = None,
            algorithm: Optional[FingerprintAlgorithm] = None
    ):
        self.decoder = decoder or PillowImageDecoder()
        self.algorithm = algorithm or PerceptualHashAlgorithmImpl()
        self._grouper = SimilarityGrouper(self.algorithm)
        self._store = FingerprintStore()

    def execute(
            self,
            params: ScanParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> List[ImageGroup]:
        """
        Scan and group with the given parameters.

        Returns:
            Groups of 2+ similar images, in anchor order.

        Raises:
            TraversalError: If the directory cannot be walked
            DecodeError / FingerprintError: If an image cannot be processed
                and params.skip_unreadable is False
        """
        scanner = ImageScannerImpl(
            root_dir=params.root_dir,
            decoder=self.decoder,
            algorithm=self.algorithm,
            extensions=params.extensions,
            skip_unreadable=params.skip_unreadable
        )

        self._store = scanner.scan(progress_callback=progress_callback)

        return self._grouper.group(
            self._store.images,
            params.threshold,
            progress_callback=progress_callback
        )

    def get_images(self) -> List[FingerprintedImage]:
        """Get fingerprinted images from the last execution."""
        return list(self._store)
