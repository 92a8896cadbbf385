"""
Shared fixtures for lookalike tests.
Provides a deterministic integer fingerprint algorithm and real PNG fixtures.
"""
import random
import sys
import pytest
from pathlib import Path
from typing import Dict, List, Optional
from PIL import Image

# Add src/ to sys.path so the lookalike package is importable without installing
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from lookalike.core.errors import DecodeError, DistanceError
from lookalike.core.models import FingerprintedImage


class IntFingerprintAlgorithm:
    """Integers as fingerprints, absolute difference as distance."""

    def __init__(self, max_distance: int = 64):
        self._max_distance = max_distance
        self.calls = 0

    @property
    def max_distance(self) -> int:
        return self._max_distance

    def fingerprint(self, image: int) -> int:
        return image

    def distance(self, first: Optional[int], second: Optional[int]) -> int:
        self.calls += 1
        if first is None or second is None:
            raise DistanceError("fingerprint missing")
        return min(abs(first - second), self._max_distance)


class IntFileDecoder:
    """Reads an integer from a text file; anything else fails to decode."""

    def decode(self, path: str) -> int:
        try:
            return int(Path(path).read_text().strip())
        except (OSError, ValueError) as e:
            raise DecodeError(path, str(e)) from e


@pytest.fixture
def int_algorithm() -> IntFingerprintAlgorithm:
    return IntFingerprintAlgorithm()


@pytest.fixture
def int_decoder() -> IntFileDecoder:
    return IntFileDecoder()


@pytest.fixture
def make_images():
    """Build FingerprintedImage objects named img0.png, img1.png, ... from integer fingerprints."""
    def _make(fingerprints: List[Optional[int]], root: str = "/photos") -> List[FingerprintedImage]:
        return [
            FingerprintedImage(path=f"{root}/img{i}.png", fingerprint=fp)
            for i, fp in enumerate(fingerprints)
        ]
    return _make


@pytest.fixture
def make_files(tmp_path):
    """Create real files with given sizes and return FingerprintedImage objects for them."""
    def _make(entries: List[tuple]) -> List[FingerprintedImage]:
        images = []
        for name, size, fingerprint in entries:
            path = tmp_path / name
            path.write_bytes(b"x" * size)
            images.append(FingerprintedImage(path=str(path), fingerprint=fingerprint))
        return images
    return _make


def gradient_image(size: int = 64) -> Image.Image:
    img = Image.new("L", (size, size))
    img.putdata([min(255, (x + y) * 2) for y in range(size) for x in range(size)])
    return img


def noise_image(size: int = 64, seed: int = 7) -> Image.Image:
    rng = random.Random(seed)
    return Image.frombytes("L", (size, size), bytes(rng.randrange(256) for _ in range(size * size)))


@pytest.fixture
def photo_dir(tmp_path) -> Dict[str, Path]:
    """
    Four PNG images:
    - a.png, b.png, c.png: same pixels saved with different compression (different sizes)
    - other/d.png: random noise, not similar to the others
    """
    files = {}
    root = tmp_path / "photos"
    (root / "other").mkdir(parents=True)

    gradient = gradient_image()
    for name, level in (("a", 9), ("b", 0), ("c", 6)):
        files[name] = root / f"{name}.png"
        gradient.save(files[name], format="PNG", compress_level=level)

    files["d"] = root / "other" / "d.png"
    noise_image().save(files["d"], format="PNG")

    # Not an image extension: must be ignored by the scanner
    files["notes"] = root / "notes.txt"
    files["notes"].write_text("not an image")

    files["root"] = root
    return files
