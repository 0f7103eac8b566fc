"""Guess display titles and tags from astro image filenames.

Both helpers are pure: the same filename always yields the same result,
which keeps regenerated catalogs stable.
"""

import re
from pathlib import Path

MESSIER_RE = re.compile(r"m(\d+)", re.IGNORECASE)
NGC_RE = re.compile(r"ngc[\s_-]?(\d+)", re.IGNORECASE)
IC_RE = re.compile(r"ic[\s_-]?(\d+)", re.IGNORECASE)

# (pattern, tag) checked in order against the lower-cased filename.
# Rules are independent; a file can collect several tags.
TAG_RULES = [
    (re.compile(r"m\d+|messier"), "Messier"),
    (re.compile(r"ngc"), "NGC"),
    (re.compile(r"ic\d+"), "IC"),
    (re.compile(r"nebula|ngc|ic"), "Nebula"),
    (re.compile(r"galaxy|m31|m51|m81|m82|m101"), "Galaxy"),
    (re.compile(r"cluster|pleiades|m45"), "Cluster"),
    (re.compile(r"milky|milkyway"), "Milky Way"),
]
DEFAULT_TAG = "Deep Sky"


def title_from_filename(name: str) -> str:
    stem = Path(name).stem
    words = re.sub(r"[-_]", " ", stem).split(" ")
    return " ".join(w[:1].upper() + w[1:].lower() for w in words)


def guess_title(filename: str) -> str:
    """Return a catalog designation (M31, NGC 7000, IC 434) or a title-cased name."""
    stem = Path(filename).stem

    m = MESSIER_RE.search(stem)
    if m:
        return f"M{m.group(1)}"

    m = NGC_RE.search(stem)
    if m:
        return f"NGC {m.group(1)}"

    m = IC_RE.search(stem)
    if m:
        return f"IC {m.group(1)}"

    return title_from_filename(filename)


def guess_tags(filename: str) -> list[str]:
    name = filename.lower()
    tags = [tag for pattern, tag in TAG_RULES if pattern.search(name)]
    return tags or [DEFAULT_TAG]
