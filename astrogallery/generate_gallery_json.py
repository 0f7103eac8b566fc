"""Build public/data/gallery.json from the optimized images on disk.

Scans src/assets/images/thumbs/ and src/assets/images/full/ (both written
by optimize-images) and merges them with the existing gallery.json:

  * an image already listed in the catalog keeps its entry untouched, so
    hand-edited titles, dates and equipment notes survive a rebuild;
  * a new image gets a placeholder entry with a title and tags guessed
    from its filename and "[UPDATE: ...]" markers for the rest;
  * a thumbnail whose full-size copy is missing is skipped with a warning;
  * videos are copied through as-is.

Images are written in filename order. New entries are dated with the
current UTC date. Running the script twice with no new files produces the
same catalog byte for byte.

Usage:  generate-gallery-json
        python -m astrogallery.generate_gallery_json --root .
"""

import argparse
import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from astrogallery.config import (
    CATALOG_EXTS,
    FULL_URL_PREFIX,
    ORIGINALS_DIR,
    THUMB_URL_PREFIX,
    GalleryPaths,
)
from astrogallery.errors import EmptyInputError, GalleryError, SetupError
from astrogallery.naming import guess_tags, guess_title

log = logging.getLogger("catalog")

UPDATE_MARKER = "[UPDATE:"
PLACEHOLDER_SUBTITLE = "[UPDATE: Add catalog number & distance]"
PLACEHOLDER_EXPOSURE = "[UPDATE: e.g., 150 x 180s Ha/OIII]"
PLACEHOLDER_EQUIPMENT = "[UPDATE: Telescope + Camera]"


@dataclass
class ReconcileResult:
    catalog: dict
    kept: list[str] = field(default_factory=list)
    added: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.catalog["images"])


def empty_catalog() -> dict:
    return {"images": [], "videos": []}


def list_images(directory: Path) -> list[str]:
    """Sorted filenames in *directory* that the catalog accepts."""
    return sorted(
        f.name for f in directory.iterdir()
        if f.is_file() and f.suffix.lower() in CATALOG_EXTS
    )


def load_catalog(path: Path) -> dict:
    """Read an existing catalog. A missing or unreadable file counts as empty."""
    if not path.exists():
        return empty_catalog()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
        log.warning("Existing %s is invalid (%s), creating a new one", path.name, e)
        return empty_catalog()
    if not isinstance(data, dict):
        log.warning("Existing %s is not a JSON object, creating a new one", path.name)
        return empty_catalog()
    images = data.get("images")
    videos = data.get("videos")
    return {
        "images": images if isinstance(images, list) else [],
        "videos": videos if isinstance(videos, list) else [],
    }


def save_catalog(path: Path, catalog: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(catalog, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def identity_key(entry: dict) -> str:
    return Path(entry.get("thumb", "")).name


def new_entry(filename: str, today: str) -> dict:
    """Placeholder entry for an image the catalog has not seen before."""
    return {
        "thumb": THUMB_URL_PREFIX + filename,
        "full": FULL_URL_PREFIX + filename,
        "title": guess_title(filename),
        "subtitle": PLACEHOLDER_SUBTITLE,
        "tags": guess_tags(filename),
        "date": today,
        "exposure": PLACEHOLDER_EXPOSURE,
        "equipment": PLACEHOLDER_EQUIPMENT,
    }


def reconcile(
    thumb_files: list[str],
    full_files: list[str] | set[str],
    existing: dict,
    today: str | None = None,
) -> ReconcileResult:
    """Merge directory listings with the existing catalog.

    Output order follows the sorted thumbnail names, whatever order the
    existing catalog used. Existing entries are reused as the same objects,
    never copied or edited.
    """
    thumbs = sorted(f for f in thumb_files if Path(f).suffix.lower() in CATALOG_EXTS)
    if not thumbs:
        raise EmptyInputError(
            "No images found in thumbs directory",
            hint=f"Add images to {ORIGINALS_DIR}/ and run: optimize-images",
        )

    today = today or datetime.now(timezone.utc).date().isoformat()
    full = set(full_files)
    by_name = {}
    for entry in existing.get("images", []):
        if isinstance(entry, dict):
            by_name[identity_key(entry)] = entry

    result = ReconcileResult(catalog={"images": [], "videos": existing.get("videos", [])})
    images = result.catalog["images"]

    for name in thumbs:
        # optimize-images writes the same filename to both trees
        if name not in full:
            log.warning("Missing full-size image for: %s", name)
            result.skipped.append(name)
            continue

        if name in by_name:
            images.append(by_name[name])
            result.kept.append(name)
        else:
            images.append(new_entry(name, today))
            result.added.append(name)

    return result


def pending_entries(catalog: dict) -> list[str]:
    """Titles of image entries that still carry [UPDATE: ...] placeholders."""
    pending = []
    for entry in catalog.get("images", []):
        if not isinstance(entry, dict):
            continue
        if any(isinstance(v, str) and UPDATE_MARKER in v for v in entry.values()):
            pending.append(entry.get("title", identity_key(entry)))
    return pending


def generate(paths: GalleryPaths, today: str | None = None) -> ReconcileResult:
    """Scan, merge and write the catalog. Returns what happened."""
    for label, d in (("Thumbs", paths.thumbs), ("Full", paths.full)):
        if not d.is_dir():
            raise SetupError(f"{label} directory not found: {d}", hint="Run: optimize-images")

    thumb_files = list_images(paths.thumbs)
    full_files = list_images(paths.full)
    print(f"Found {len(thumb_files)} thumbnail(s)")
    print(f"Found {len(full_files)} full-size image(s)\n")

    existing = load_catalog(paths.catalog)
    result = reconcile(thumb_files, full_files, existing, today=today)
    save_catalog(paths.catalog, result.catalog)
    return result


def print_report(result: ReconcileResult, catalog_path: Path) -> None:
    added = set(result.added)
    for entry in result.catalog["images"]:
        name = identity_key(entry)
        if name in added:
            print(f"+ Added new: {entry['title']} -> {name}")
        else:
            print(f"  Kept existing: {entry.get('title', name)}")

    pending = pending_entries(result.catalog)
    print("\n" + "=" * 60)
    print("Gallery JSON generated")
    print("=" * 60)
    print(f"  Existing entries preserved: {len(result.kept)}")
    print(f"  New entries added: {len(result.added)}")
    if result.skipped:
        print(f"  Skipped (no full-size image): {len(result.skipped)}")
    print(f"  Total images: {result.total}")
    print(f"  Videos: {len(result.catalog['videos'])}")
    print(f"  Entries still needing details: {len(pending)}")

    if pending:
        print("\nNext steps:")
        print(f"  1. Open: {catalog_path}")
        print(f'  2. Search for "{UPDATE_MARKER}" and fill in details')


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Build gallery.json from optimized images")
    parser.add_argument("--root", default=".", help="Repository root directory")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s: %(message)s")
    paths = GalleryPaths.from_root(args.root)

    print("Scanning for images...\n")
    try:
        result = generate(paths)
    except GalleryError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        if e.hint:
            print(f"  {e.hint}", file=sys.stderr)
        return 1

    print_report(result, paths.catalog)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
