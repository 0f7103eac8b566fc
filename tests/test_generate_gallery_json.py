"""Tests for astrogallery/generate_gallery_json.py."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import pytest

from astrogallery.config import GalleryPaths
from astrogallery.errors import EmptyInputError, SetupError
from astrogallery.generate_gallery_json import (
    PLACEHOLDER_EQUIPMENT,
    PLACEHOLDER_SUBTITLE,
    empty_catalog,
    generate,
    load_catalog,
    main,
    pending_entries,
    reconcile,
    save_catalog,
)

from tests.conftest import write_image

TODAY = "2024-03-01"

_EDITED_M31 = {
    "thumb": "/assets/images/thumbs/m31-andromeda.jpg",
    "full": "/assets/images/full/m31-andromeda.jpg",
    "title": "Andromeda Galaxy",
    "subtitle": "M31 · 2.5 million light years",
    "tags": ["Galaxy"],
    "date": "2023-10-14",
    "exposure": "120 x 300s LRGB",
    "equipment": "RedCat 51 + ASI2600MC",
    "location": "Backyard",
}

_VIDEOS = [{"src": "/videos/timelapse.mp4", "title": "Milky Way timelapse"}]


class TestReconcile:
    def test_new_entry_placeholders(self) -> None:
        result = reconcile(["ngc_7000.jpg"], ["ngc_7000.jpg"], empty_catalog(), today=TODAY)

        assert result.catalog["images"] == [
            {
                "thumb": "/assets/images/thumbs/ngc_7000.jpg",
                "full": "/assets/images/full/ngc_7000.jpg",
                "title": "NGC 7000",
                "subtitle": PLACEHOLDER_SUBTITLE,
                "tags": ["NGC", "Nebula"],
                "date": TODAY,
                "exposure": "[UPDATE: e.g., 150 x 180s Ha/OIII]",
                "equipment": PLACEHOLDER_EQUIPMENT,
            }
        ]
        assert result.added == ["ngc_7000.jpg"]
        assert result.kept == []

    def test_existing_entry_preserved(self) -> None:
        existing = {"images": [dict(_EDITED_M31)], "videos": []}
        files = ["m31-andromeda.jpg", "ngc_7000.jpg", "ic434.jpg"]

        result = reconcile(files, files, existing, today=TODAY)

        kept = [e for e in result.catalog["images"] if e["thumb"].endswith("m31-andromeda.jpg")]
        assert kept == [_EDITED_M31]
        assert kept[0] is existing["images"][0]
        assert result.kept == ["m31-andromeda.jpg"]
        assert sorted(result.added) == ["ic434.jpg", "ngc_7000.jpg"]

    def test_output_sorted_by_filename(self) -> None:
        existing = {
            "images": [
                {"thumb": "/assets/images/thumbs/zeta.jpg", "title": "Zeta"},
                {"thumb": "/assets/images/thumbs/alpha.jpg", "title": "Alpha"},
            ],
            "videos": [],
        }
        files = ["zeta.jpg", "beta.png", "alpha.jpg"]

        result = reconcile(files, files, existing, today=TODAY)

        names = [Path(e["thumb"]).name for e in result.catalog["images"]]
        assert names == ["alpha.jpg", "beta.png", "zeta.jpg"]

    def test_videos_pass_through(self) -> None:
        existing = {"images": [], "videos": _VIDEOS}
        result = reconcile(["m45-pleiades.jpg"], ["m45-pleiades.jpg"], existing, today=TODAY)
        assert result.catalog["videos"] is _VIDEOS

    def test_missing_full_size_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        existing = {"images": [dict(_EDITED_M31)], "videos": []}

        with caplog.at_level(logging.WARNING, logger="catalog"):
            result = reconcile(
                ["m31-andromeda.jpg", "ngc_7000.jpg"], ["ngc_7000.jpg"], existing, today=TODAY
            )

        names = [Path(e["thumb"]).name for e in result.catalog["images"]]
        assert names == ["ngc_7000.jpg"]
        assert result.skipped == ["m31-andromeda.jpg"]
        assert "m31-andromeda.jpg" in caplog.text

    def test_removed_file_dropped(self) -> None:
        existing = {"images": [dict(_EDITED_M31)], "videos": []}
        result = reconcile(["ic434.jpg"], ["ic434.jpg"], existing, today=TODAY)
        assert [e["title"] for e in result.catalog["images"]] == ["IC 434"]

    def test_non_image_files_ignored(self) -> None:
        files = ["notes.txt", "m42.JPG", ".DS_Store"]
        result = reconcile(files, files, empty_catalog(), today=TODAY)
        assert [e["title"] for e in result.catalog["images"]] == ["M42"]

    def test_no_thumbnails(self) -> None:
        with pytest.raises(EmptyInputError) as exc:
            reconcile(["readme.txt"], [], empty_catalog())
        assert "optimize-images" in exc.value.hint

    def test_defaults_to_utc_today(self) -> None:
        before = datetime.now(timezone.utc).date().isoformat()
        result = reconcile(["m1.jpg"], ["m1.jpg"], empty_catalog())
        after = datetime.now(timezone.utc).date().isoformat()
        assert result.catalog["images"][0]["date"] in {before, after}


class TestLoadCatalog:
    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_catalog(tmp_path / "gallery.json") == {"images": [], "videos": []}

    def test_corrupt_file(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        path = tmp_path / "gallery.json"
        path.write_text("{not json", encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="catalog"):
            assert load_catalog(path) == {"images": [], "videos": []}
        assert "invalid" in caplog.text

    def test_not_an_object(self, tmp_path: Path) -> None:
        path = tmp_path / "gallery.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert load_catalog(path) == {"images": [], "videos": []}

    def test_missing_keys(self, tmp_path: Path) -> None:
        path = tmp_path / "gallery.json"
        path.write_text('{"images": [{"thumb": "a.jpg"}]}', encoding="utf-8")
        assert load_catalog(path) == {"images": [{"thumb": "a.jpg"}], "videos": []}


class TestSaveCatalog:
    def test_format(self, tmp_path: Path) -> None:
        path = tmp_path / "public" / "data" / "gallery.json"
        save_catalog(path, {"images": [{"title": "Cœur"}], "videos": []})

        text = path.read_text(encoding="utf-8")
        assert text.endswith("}\n")
        assert '\n  "images": [' in text
        assert "Cœur" in text


class TestPendingEntries:
    def test_lists_placeholder_titles(self) -> None:
        result = reconcile(["m45.jpg"], ["m45.jpg"], {"images": [_EDITED_M31], "videos": []}, today=TODAY)
        assert pending_entries(result.catalog) == ["M45"]

    def test_complete_catalog(self) -> None:
        assert pending_entries({"images": [_EDITED_M31], "videos": []}) == []


class TestGenerate:
    def test_writes_catalog(self, site: GalleryPaths) -> None:
        result = generate(site, today=TODAY)

        data = json.loads(site.catalog.read_text(encoding="utf-8"))
        assert data == result.catalog
        assert [e["title"] for e in data["images"]] == ["Horsehead Nebula", "M31", "NGC 7000"]
        assert data["videos"] == []

    def test_idempotent(self, site: GalleryPaths) -> None:
        generate(site, today=TODAY)
        first = site.catalog.read_bytes()

        result = generate(site, today="2030-01-01")

        assert site.catalog.read_bytes() == first
        assert result.added == []
        assert len(result.kept) == 3

    def test_manual_edits_survive_new_files(self, site: GalleryPaths) -> None:
        save_catalog(site.catalog, {"images": [_EDITED_M31], "videos": _VIDEOS})
        write_image(site.thumbs / "m45-pleiades.jpg")
        write_image(site.full / "m45-pleiades.jpg")

        generate(site, today=TODAY)

        data = json.loads(site.catalog.read_text(encoding="utf-8"))
        assert _EDITED_M31 in data["images"]
        assert data["videos"] == _VIDEOS
        assert len(data["images"]) == 4

    def test_unpaired_thumbnail_excluded(self, site: GalleryPaths) -> None:
        write_image(site.thumbs / "ic434.jpg")

        result = generate(site, today=TODAY)

        assert result.skipped == ["ic434.jpg"]
        assert all("ic434" not in e["thumb"] for e in result.catalog["images"])

    def test_corrupt_catalog_rebuilt(self, site: GalleryPaths) -> None:
        site.catalog.parent.mkdir(parents=True)
        site.catalog.write_text("oops", encoding="utf-8")

        result = generate(site, today=TODAY)

        assert len(result.added) == 3

    def test_missing_thumbs_dir(self, paths: GalleryPaths) -> None:
        paths.full.mkdir(parents=True)
        with pytest.raises(SetupError, match="Thumbs directory not found"):
            generate(paths)

    def test_missing_full_dir(self, paths: GalleryPaths) -> None:
        paths.thumbs.mkdir(parents=True)
        with pytest.raises(SetupError, match="Full directory not found"):
            generate(paths)

    def test_empty_thumbs_dir(self, paths: GalleryPaths) -> None:
        paths.thumbs.mkdir(parents=True)
        paths.full.mkdir(parents=True)
        with pytest.raises(EmptyInputError):
            generate(paths)
        assert not paths.catalog.exists()


class TestMain:
    def test_success(self, site: GalleryPaths, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        assert main(["--root", str(tmp_path)]) == 0

        out = capsys.readouterr().out
        assert "+ Added new: M31 -> m31-andromeda.jpg" in out
        assert "New entries added: 3" in out
        assert "[UPDATE:" in out
        assert site.catalog.exists()

    def test_missing_dirs_exit_code(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        assert main(["--root", str(tmp_path)]) == 1

        err = capsys.readouterr().err
        assert "ERROR: Thumbs directory not found" in err
        assert "Run: optimize-images" in err

    def test_empty_input_exit_code(self, paths: GalleryPaths, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        paths.thumbs.mkdir(parents=True)
        paths.full.mkdir(parents=True)

        assert main(["--root", str(tmp_path)]) == 1
        assert "No images found" in capsys.readouterr().err
