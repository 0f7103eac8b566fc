"""Make web-sized copies of the gallery originals.

For every image in src/assets/images/originals/ (.jpg, .jpeg, .png, .tif,
.tiff) writes two progressive JPEGs with the same stem:

  thumbs/<name>.jpg   300x300 center crop for the gallery grid
  full/<name>.jpg     at most 2500px wide for the lightbox

Originals are never modified. A file that fails to convert is reported
and the rest of the batch still runs.

Requires Pillow: pip install pillow

Usage:  optimize-images
        python -m astrogallery.optimize_images --root .
"""

import argparse
import logging
from pathlib import Path

from PIL import Image, ImageOps

from astrogallery.config import ORIGINAL_EXTS, ORIGINALS_DIR, GalleryPaths

log = logging.getLogger("optimize")

THUMB_SIZE = (300, 300)
THUMB_QUALITY = 85
FULL_MAX_WIDTH = 2500
FULL_QUALITY = 90


def output_name(name: str) -> str:
    return Path(name).stem + ".jpg"


def to_rgb(img: Image.Image) -> Image.Image:
    if img.mode == "RGB":
        return img
    if img.mode in ("I;16", "I;16B", "I;16L", "I"):
        # 16-bit TIFF stacks: scale down to 8 bits before converting
        img = img.convert("I").point(lambda v: v * (1 / 256)).convert("L")
    return img.convert("RGB")


def make_thumbnail(img: Image.Image) -> Image.Image:
    return ImageOps.fit(img, THUMB_SIZE, Image.LANCZOS, centering=(0.5, 0.5))


def make_full(img: Image.Image) -> Image.Image:
    if img.width <= FULL_MAX_WIDTH:
        return img
    height = max(1, round(img.height * FULL_MAX_WIDTH / img.width))
    return img.resize((FULL_MAX_WIDTH, height), Image.LANCZOS)


def save_jpeg(img: Image.Image, path: Path, quality: int) -> None:
    img.save(path, "JPEG", quality=quality, optimize=True, progressive=True)


def optimize_image(src: Path, thumb_dir: Path, full_dir: Path) -> bool:
    """Write the thumbnail and full-size copies of *src*. Returns True on success."""
    name = output_name(src.name)
    try:
        with Image.open(src) as opened:
            img = to_rgb(ImageOps.exif_transpose(opened))
            save_jpeg(make_thumbnail(img), thumb_dir / name, THUMB_QUALITY)
            save_jpeg(make_full(img), full_dir / name, FULL_QUALITY)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        log.warning("Failed to process %s: %s", src.name, e)
        return False
    return True


def find_originals(originals: Path) -> list[Path]:
    return sorted(
        f for f in originals.iterdir()
        if f.is_file() and f.suffix.lower() in ORIGINAL_EXTS
    )


def optimize_all(paths: GalleryPaths) -> tuple[int, int]:
    """Convert every original. Returns (converted, failed)."""
    for d in (paths.thumbs, paths.full):
        d.mkdir(parents=True, exist_ok=True)

    converted = failed = 0
    for src in find_originals(paths.originals):
        if optimize_image(src, paths.thumbs, paths.full):
            print(f"  ok {src.name}")
            converted += 1
        else:
            failed += 1
    return converted, failed


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Optimize gallery originals for the web")
    parser.add_argument("--root", default=".", help="Repository root directory")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s: %(message)s")
    paths = GalleryPaths.from_root(args.root)

    if not paths.originals.is_dir():
        paths.originals.mkdir(parents=True, exist_ok=True)
        print(f"No originals directory found. Created {ORIGINALS_DIR}/")
        print("  Add your high-res images there and run: optimize-images")
        return 0

    count = len(find_originals(paths.originals))
    if count == 0:
        print("No images found in originals directory")
        print(f"  Add .jpg, .png, or .tiff files to {ORIGINALS_DIR}/")
        return 0

    print(f"Processing {count} image(s)...\n")
    converted, failed = optimize_all(paths)

    print(f"\nOptimized {converted} image(s)" + (f", {failed} failed." if failed else "."))
    print(f"  Thumbs: {paths.thumbs}")
    print(f"  Full:   {paths.full}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
