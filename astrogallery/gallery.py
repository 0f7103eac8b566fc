"""Gallery page: card grid plus a single-image lightbox.

The page fetches /data/gallery.json once, renders one card per image and
opens a lightbox when a card is selected. All page behaviour goes through
``handle(state, event)``, which returns the next state and the change to
apply to the page:

    Loading ──Loaded──▶ Rendered ──CardSelected(i)──▶ DetailOpen(i)
       │                   ▲                              │
       └─LoadFailed─▶ Failed└──── Escape / background click ┘

``render-gallery`` runs the same flow against a running dev server and
writes a static snapshot of the result to dist/gallery.html.

Usage:  render-gallery --base-url http://localhost:3000
"""

import argparse
import logging
from dataclasses import dataclass, field
from functools import partial
from html import escape as html_escape
from typing import Callable, Optional, Union

import requests

from astrogallery.config import (
    CATALOG_URL_PATH,
    DEFAULT_BASE_URL,
    ORIGINALS_DIR,
    GalleryPaths,
)
from astrogallery.errors import CatalogFormatError, FetchError, GalleryError

log = logging.getLogger("render")

FETCH_TIMEOUT = 30


# ---------------- page ----------------
@dataclass
class Lightbox:
    active: bool = False
    img_src: str = ""
    img_alt: str = ""
    title: str = ""
    subtitle: str = ""


@dataclass
class Page:
    """Handles to the parts of the page the gallery writes to."""

    grid: str = ""
    lightbox: Lightbox = field(default_factory=Lightbox)
    body_overflow: str = ""


# ---------------- states ----------------
@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Rendered:
    images: list


@dataclass(frozen=True)
class Failed:
    message: str


@dataclass(frozen=True)
class DetailOpen:
    images: list
    index: int


State = Union[Loading, Rendered, Failed, DetailOpen]


# ---------------- events ----------------
@dataclass(frozen=True)
class Loaded:
    catalog: dict


@dataclass(frozen=True)
class LoadFailed:
    message: str


@dataclass(frozen=True)
class CardSelected:
    index: int


@dataclass(frozen=True)
class KeyPressed:
    key: str


@dataclass(frozen=True)
class LightboxClicked:
    # False when the click landed on the image or caption
    on_background: bool


Event = Union[Loaded, LoadFailed, CardSelected, KeyPressed, LightboxClicked]
Effect = Callable[[Page], None]


# ---------------- rendering ----------------
LOADING_HTML = '<div class="gallery-status"><p>Loading gallery...</p></div>'


def render_card(img: dict, index: int) -> str:
    thumb = html_escape(str(img.get("thumb", "")))
    title = html_escape(str(img.get("title", "")))
    subtitle = html_escape(str(img.get("subtitle", "")))
    return f"""<div class="card" data-index="{index}">
  <div class="card-image">
    <img src="{thumb}" alt="{title}" loading="lazy">
  </div>
  <div class="card-content">
    <h3 class="card-title">{title}</h3>
    <p class="card-subtitle">{subtitle}</p>
  </div>
</div>"""


def render_grid(images: list) -> str:
    if not images:
        return f"""<div class="gallery-status empty-state">
  <p>No images available yet.</p>
  <p>Add images to <code>{ORIGINALS_DIR}/</code> and run <code>optimize-images</code></p>
</div>"""
    return "\n".join(render_card(img, i) for i, img in enumerate(images))


def render_error(message: str) -> str:
    return f"""<div class="gallery-status error-panel" role="alert">
  <p>Failed to load gallery data</p>
  <p>Error: {html_escape(message)}</p>
  <p>Expected location: {CATALOG_URL_PATH}</p>
</div>"""


def render_lightbox(lightbox: Lightbox) -> str:
    cls = "lightbox active" if lightbox.active else "lightbox"
    return f"""<div id="lightbox" class="{cls}" role="dialog" aria-modal="true" aria-label="Image viewer">
  <div class="lightbox-content">
    <img id="lightbox-img" src="{html_escape(lightbox.img_src)}" alt="{html_escape(lightbox.img_alt)}">
    <h2 id="lightbox-title">{html_escape(lightbox.title)}</h2>
    <p id="lightbox-subtitle">{html_escape(lightbox.subtitle)}</p>
  </div>
</div>"""


def show_gallery(page: Page, images: list) -> None:
    page.grid = render_grid(images)


def show_error(page: Page, message: str) -> None:
    page.grid = render_error(message)


def open_lightbox(page: Page, img: dict) -> None:
    title = str(img.get("title", ""))
    page.lightbox = Lightbox(
        active=True,
        img_src=str(img.get("full", "")),
        img_alt=title,
        title=title,
        subtitle=str(img.get("subtitle", "")),
    )
    page.body_overflow = "hidden"


def close_lightbox(page: Page) -> None:
    page.lightbox.active = False
    page.body_overflow = ""


# ---------------- state machine ----------------
def handle(state: State, event: Event) -> tuple[State, Optional[Effect]]:
    """Return the next state and the page update for *event*.

    Events that do not apply to the current state leave it unchanged with
    no page update.
    """
    if isinstance(state, Loading):
        if isinstance(event, Loaded):
            images = event.catalog.get("images") or []
            return Rendered(images), partial(show_gallery, images=images)
        if isinstance(event, LoadFailed):
            return Failed(event.message), partial(show_error, message=event.message)

    elif isinstance(state, Rendered):
        if isinstance(event, CardSelected) and 0 <= event.index < len(state.images):
            img = state.images[event.index]
            return DetailOpen(state.images, event.index), partial(open_lightbox, img=img)

    elif isinstance(state, DetailOpen):
        dismissed = (
            (isinstance(event, KeyPressed) and event.key == "Escape")
            or (isinstance(event, LightboxClicked) and event.on_background)
        )
        if dismissed:
            return Rendered(state.images), close_lightbox

    return state, None


# ---------------- loading ----------------
def fetch_catalog(session: requests.Session, base_url: str) -> dict:
    """GET the catalog and check it has the expected shape."""
    url = base_url.rstrip("/") + CATALOG_URL_PATH
    response = session.get(url, timeout=FETCH_TIMEOUT)
    if not response.ok:
        raise FetchError(f"HTTP error! status: {response.status_code}")

    try:
        data = response.json()
    except ValueError as e:
        raise CatalogFormatError(f"Invalid JSON in {CATALOG_URL_PATH}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("images", []), list):
        raise CatalogFormatError("Catalog must be an object with an images list")
    if not all(isinstance(entry, dict) for entry in data.get("images", [])):
        raise CatalogFormatError("Every image entry must be an object")
    return data


class GalleryApp:
    """One page session: the current state plus the page it draws on."""

    def __init__(self, session: requests.Session | None = None, base_url: str = DEFAULT_BASE_URL):
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.base_url = base_url
        self.state: State = Loading()
        self.page = Page(grid=LOADING_HTML)

    def dispatch(self, event: Event) -> State:
        self.state, effect = handle(self.state, event)
        if effect is not None:
            effect(self.page)
        return self.state

    def load(self) -> State:
        try:
            catalog = fetch_catalog(self.session, self.base_url)
        except (requests.RequestException, GalleryError) as e:
            log.error("Failed to load gallery: %s", e)
            return self.dispatch(LoadFailed(str(e)))
        return self.dispatch(Loaded(catalog))

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "GalleryApp":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def select(self, index: int) -> State:
        return self.dispatch(CardSelected(index))

    def key(self, key: str) -> State:
        return self.dispatch(KeyPressed(key))

    def click_lightbox(self, on_background: bool = True) -> State:
        return self.dispatch(LightboxClicked(on_background))


def snapshot_html(page: Page) -> str:
    style = f' style="overflow: {page.body_overflow}"' if page.body_overflow else ""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Gallery</title>
</head>
<body{style}>
    <main id="main">
        <h1>Gallery</h1>
        <section id="gallery-grid" class="gallery-grid">
{page.grid}
        </section>
    </main>
{render_lightbox(page.lightbox)}
</body>
</html>
"""


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Render a static snapshot of the gallery page")
    parser.add_argument("--root", default=".", help="Repository root directory")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL, help="Site serving /data/gallery.json")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s: %(message)s")
    paths = GalleryPaths.from_root(args.root)

    print(f"Fetching {args.base_url.rstrip('/')}{CATALOG_URL_PATH}...")
    with requests.Session() as session:
        app = GalleryApp(session, args.base_url)
        state = app.load()

    out = paths.snapshot
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(snapshot_html(app.page), encoding="utf-8")

    if isinstance(state, Rendered):
        print(f"Rendered {len(state.images)} card(s) → {out}")
    else:
        print(f"Rendered error page → {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
