"""Shared fixtures: a throwaway site root with the gallery image folders."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from astrogallery.config import GalleryPaths


def write_image(path: Path, size: tuple[int, int] = (40, 30), color: str = "navy") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    fmt = "PNG" if path.suffix.lower() == ".png" else "JPEG"
    Image.new("RGB", size, color).save(path, fmt)
    return path


@pytest.fixture
def paths(tmp_path: Path) -> GalleryPaths:
    return GalleryPaths.from_root(tmp_path)


@pytest.fixture
def site(paths: GalleryPaths) -> GalleryPaths:
    """Thumbs and full dirs holding a matching pair for each name."""
    for name in ("ngc_7000.jpg", "m31-andromeda.jpg", "horsehead-nebula.jpg"):
        write_image(paths.thumbs / name)
        write_image(paths.full / name)
    return paths
