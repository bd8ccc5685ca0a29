"""Tests for zip packaging."""

import asyncio
import io
import zipfile

import pytest

from portfolio_export.packaging import (
    CSS_PATH,
    JS_PATH,
    README_PATH,
    archive_entries,
    archive_filename,
    package,
)


@pytest.fixture
def inputs() -> dict:
    return {
        "css": "body { color: red; }",
        "js": "console.log('hi');",
        "readme": "Portfolio Export",
        "html_by_locale": {"en": "<html>en</html>", "ua": "<html>ua</html>"},
        "blobs_by_path": {
            "assets/img/avatar-0.png": b"\x89PNG avatar",
            "assets/img/project-1.jpg": b"\xff\xd8 project",
        },
    }


def build(inputs: dict, **kwargs):
    return asyncio.run(package(**inputs, **kwargs))


class TestPackage:
    """Test archive contents and stats."""

    def test_entries_in_fixed_order(self, inputs) -> None:
        archive = build(inputs)
        with zipfile.ZipFile(io.BytesIO(archive.data)) as zf:
            assert zf.namelist() == [
                CSS_PATH,
                JS_PATH,
                "assets/img/avatar-0.png",
                "assets/img/project-1.jpg",
                "en/index.html",
                "ua/index.html",
                README_PATH,
            ]
            assert zf.read("ua/index.html") == b"<html>ua</html>"
            assert zf.read("assets/img/avatar-0.png") == b"\x89PNG avatar"

    def test_entries_are_deflated_with_fixed_metadata(self, inputs) -> None:
        archive = build(inputs)
        with zipfile.ZipFile(io.BytesIO(archive.data)) as zf:
            for info in zf.infolist():
                assert info.compress_type == zipfile.ZIP_DEFLATED
                assert info.date_time == (1980, 1, 1, 0, 0, 0)
                assert info.external_attr >> 16 == 0o644

    def test_stats(self, inputs) -> None:
        archive = build(inputs)
        assert archive.stats.page_count == 2
        assert archive.stats.asset_count == 2
        assert archive.stats.file_size == len(archive.data)

    def test_byte_identical_for_same_input(self, inputs) -> None:
        assert build(inputs).data == build(inputs).data

    def test_compression_level_changes_nothing_but_size(self, inputs) -> None:
        inputs["css"] = "a { color: blue; }\n" * 500
        fast = build(inputs, compression_level=1)
        best = build(inputs, compression_level=9)
        with zipfile.ZipFile(io.BytesIO(fast.data)) as a, zipfile.ZipFile(io.BytesIO(best.data)) as b:
            assert a.read(CSS_PATH) == b.read(CSS_PATH)


class TestArchiveEntries:
    """Test the generated file list shared with publishing."""

    def test_without_readme(self, inputs) -> None:
        files = archive_entries(
            inputs["css"], inputs["js"], None, inputs["html_by_locale"], {}
        )
        assert [f.path for f in files] == [CSS_PATH, JS_PATH, "en/index.html", "ua/index.html"]
        assert not any(f.is_binary for f in files)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Jane Doe", "jane-doe-portfolio.zip"),
        ("  My   Cool\tSite ", "-my-cool-site--portfolio.zip"),
        ("Solo", "solo-portfolio.zip"),
        ("../../Escaped", "..-..-escaped-portfolio.zip"),
        ("C:\\Users\\Me", "c-users-me-portfolio.zip"),
    ],
    ids=["simple", "whitespace-runs", "single-word", "posix-separators", "windows-separators"],
)
def test_archive_filename(name: str, expected: str) -> None:
    assert archive_filename(name) == expected


@pytest.mark.parametrize("name", ["../../etc/cron.d/x", "a/b\\c", "/abs", ".."])
def test_archive_filename_is_single_component(name: str) -> None:
    filename = archive_filename(name)
    assert "/" not in filename
    assert "\\" not in filename
    assert filename.endswith("-portfolio.zip")
