"""Paths and constants shared by the gallery build commands.

Everything is relative to the repository root; pass ``--root`` to any of
the commands to run them from somewhere else.
"""

from dataclasses import dataclass
from pathlib import Path

ORIGINALS_DIR = "src/assets/images/originals"
THUMB_DIR = "src/assets/images/thumbs"
FULL_DIR = "src/assets/images/full"
CATALOG_PATH = "public/data/gallery.json"
SNAPSHOT_PATH = "dist/gallery.html"

# Public URLs the site serves the derived images and the catalog from
THUMB_URL_PREFIX = "/assets/images/thumbs/"
FULL_URL_PREFIX = "/assets/images/full/"
CATALOG_URL_PATH = "/data/gallery.json"
DEFAULT_BASE_URL = "http://localhost:3000"

CATALOG_EXTS = {".jpg", ".jpeg", ".png"}
ORIGINAL_EXTS = CATALOG_EXTS | {".tif", ".tiff"}


@dataclass(frozen=True)
class GalleryPaths:
    originals: Path
    thumbs: Path
    full: Path
    catalog: Path
    snapshot: Path

    @classmethod
    def from_root(cls, root: str | Path = ".") -> "GalleryPaths":
        root = Path(root).resolve()
        return cls(
            originals=root / ORIGINALS_DIR,
            thumbs=root / THUMB_DIR,
            full=root / FULL_DIR,
            catalog=root / CATALOG_PATH,
            snapshot=root / SNAPSHOT_PATH,
        )
