#!/usr/bin/env python3
"""
lookalike CLI: find visually similar images and optionally delete all but one per group.

Usage: lookalike [-d] <directory> <similarity percentage>

Without -d the run is report-only. With -d every group keeps the image closest
to its anchor and the rest are removed (or moved to trash with --trash).
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import os
import sys
import time
from typing import List, Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

from lookalike.commands import SimilarityCommand
from lookalike.core.errors import InputError, LookalikeError
from lookalike.core.models import ImageGroup, ScanParams, SimilarityThreshold
from lookalike.core.reclaimer import SpaceReclaimer
from lookalike.utils.convert_utils import ConvertUtils

EPILOG_TEXT = """
Examples:
  lookalike ~/Pictures 90          report groups of images at least 90% similar
  lookalike -d ~/Pictures 95       report, then delete all but one image per group
  lookalike -d --trash ~/Pictures 95
                                   same, but move the files to the system trash
"""


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="lookalike",
            description="lookalike: find visually similar images and reclaim disk space",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "directory",
            type=str,
            help="Directory to scan recursively for .jpg, .jpeg and .png images"
        )
        parser.add_argument(
            "similarity",
            type=str,
            help="Minimum similarity percentage, between 0 and 100"
        )

        # Actions
        parser.add_argument(
            "-d", "--delete",
            action="store_true",
            help="Delete all but one image per group after reporting"
        )
        parser.add_argument(
            "--trash",
            action="store_true",
            help="With -d, move images to the system trash instead of deleting them"
        )
        parser.add_argument(
            "--skip-unreadable",
            action="store_true",
            dest="skip_unreadable",
            help="Skip images that cannot be decoded instead of aborting the scan"
        )

        # Output options
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show debug logging, progress and a keep/delete preview"
        )

        return parser.parse_args(args)

    def create_params(self, args: argparse.Namespace) -> ScanParams:
        """Validate arguments and build ScanParams from them."""
        if args.trash and not args.delete:
            self.error_exit("--trash can only be used with -d")

        try:
            threshold = SimilarityThreshold.from_percentage(args.similarity)
            return ScanParams(
                root_dir=args.directory,
                threshold=threshold,
                skip_unreadable=args.skip_unreadable
            )
        except InputError as e:
            self.error_exit(str(e))

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(f"\r  [{stage}] {current}/{total} ({percent:.1f}%)")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} images processed...")
        if total and current >= total:
            sys.stderr.write("\n")
        sys.stderr.flush()

    def run_search(self, command: SimilarityCommand, params: ScanParams) -> List[ImageGroup]:
        """Scan and group; any scan failure ends the run."""
        if self.verbose:
            print(f"Scanning directory: {params.root_dir} "
                  f"(similarity >= {params.threshold.percentage:g}%)", file=sys.stderr)
        try:
            return command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None
            )
        except LookalikeError as e:
            self.error_exit(f"Error loading images: {e}")

    @staticmethod
    def output_results(groups: List[ImageGroup]) -> None:
        """Print each group: header, one path per line, blank separator."""
        for group in groups:
            print("Similar images:")
            for image in group:
                print(image.path)
            print()

    def preview_reclaim(self, groups: List[ImageGroup], reclaimer: SpaceReclaimer) -> None:
        """Show which image each group keeps and which ones go."""
        max_distance = reclaimer.algorithm.max_distance
        for idx, group in enumerate(groups, 1):
            ordered = reclaimer.order_for_keep(group)
            print(f"Group {idx} | Images: {len(ordered)}")
            print(f"   [KEEP] {ordered[0].path}")
            for image in ordered[1:]:
                try:
                    distance = reclaimer.algorithm.distance(image.fingerprint, group.anchor.fingerprint)
                    similarity = ConvertUtils.similarity_to_human(
                        SimilarityThreshold.similarity(distance, max_distance))
                except LookalikeError:
                    similarity = "n/a"
                print(f"   [DEL]  {image.path} (similarity {similarity})")
            print()

    def execute_reclaim(self, groups: List[ImageGroup], reclaimer: SpaceReclaimer) -> int:
        """Reclaim every group, report failures and print the total bytes freed."""
        if self.verbose:
            self.preview_reclaim(groups, reclaimer)

        report = reclaimer.reclaim_all(groups)
        for _, error in report.failures:
            self.warning(f"Error deleting images: {error}")

        print(f"Total space saved: {report.bytes_freed} bytes")

        if self.verbose:
            action = "moved to trash" if reclaimer.use_trash else "deleted"
            print(f"{report.files_deleted} files {action} from {report.groups_reclaimed} groups "
                  f"({ConvertUtils.bytes_to_human(report.bytes_freed)})", file=sys.stderr)
        return report.bytes_freed

    @staticmethod
    def warning(message: str) -> None:
        """Print a warning message to stderr."""
        print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point: scan, report, optionally reclaim."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        if self.verbose:
            logging.getLogger().setLevel(logging.DEBUG)

        params = self.create_params(args)
        command = SimilarityCommand()
        groups = self.run_search(command, params)

        self.output_results(groups)
        if self.verbose and not groups:
            print("No similar images found.", file=sys.stderr)

        if args.delete:
            reclaimer = SpaceReclaimer(command.algorithm, use_trash=args.trash)
            self.execute_reclaim(groups, reclaimer)

        if self.verbose:
            elapsed = time.time() - self.start_time
            print(f"Completed in {elapsed:.2f} seconds", file=sys.stderr)


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
