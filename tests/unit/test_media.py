"""Test image reference discovery and rewriting."""

import logging

import pytest

from notepress.media import find_images, is_url, load_media, rewrite_images, upload_resolver


def test_find_both_forms_in_order():
    text = "![[a.png|100x50]] then ![alt|300](img/b.png) and ![[c.png|center]]"

    images = find_images(text)

    assert [(i.src, i.embed) for i in images] == [("a.png", True), ("img/b.png", False), ("c.png", True)]
    assert (images[0].width, images[0].height) == ("100", "50")
    assert (images[1].alt, images[1].width, images[1].height) == ("alt", "300", None)
    assert images[2].options == ("center",)
    assert text[images[1].start:images[1].end] == images[1].original


def test_url_detection():
    assert is_url("https://example.com/a.png")
    assert is_url("data:image/png;base64,AAAA")
    assert not is_url("attachments/a.png")


def test_rewrite_keeps_options():
    text = "Intro ![[my%20pic.png|640x480|left]] and ![x|200x100](b.png) and ![y](c.png)"
    calls = []

    def resolve(src):
        calls.append(src)
        return f"https://cdn.example.com/{src.replace(' ', '_')}"

    result = rewrite_images(text, resolve)

    assert calls == ["my pic.png", "b.png", "c.png"]
    assert result == (
        "Intro ![[https://cdn.example.com/my_pic.png|640x480|left]]"
        " and ![[https://cdn.example.com/b.png|200x100]]"
        " and ![[https://cdn.example.com/c.png]]"
    )


def test_rewrite_skips_urls():
    text = "![[https://example.com/a.png|100]]"
    assert rewrite_images(text, lambda src: pytest.fail("should not resolve urls")) == text


def test_unresolved_references_are_left_alone(caplog):
    text = "![[missing.png]] ![[ok.png]]"

    with caplog.at_level(logging.WARNING, logger="notepress.media"):
        result = rewrite_images(text, lambda src: "https://x/ok.png" if src == "ok.png" else None)

    assert result == "![[missing.png]] ![[https://x/ok.png]]"
    assert "missing.png" in caplog.text


def test_resolver_errors_propagate():
    def boom(src):
        raise RuntimeError("upload failed")

    with pytest.raises(RuntimeError):
        rewrite_images("![[a.png]]", boom)


def test_load_media(tmp_path):
    path = tmp_path / "pic.png"
    path.write_bytes(b"\x89PNG")
    unknown = tmp_path / "blob.zzz-unknown"
    unknown.write_bytes(b"?")

    media = load_media(path)

    assert (media.file_name, media.mime_type, media.content) == ("pic.png", "image/png", b"\x89PNG")
    assert load_media(unknown).mime_type == "application/octet-stream"


def test_upload_resolver(tmp_path):
    (tmp_path / "assets").mkdir()
    (tmp_path / "assets" / "deep.png").write_bytes(b"1")
    (tmp_path / "top.png").write_bytes(b"2")
    uploaded = []

    def upload(media):
        uploaded.append(media.file_name)
        return f"https://cdn/{media.file_name}"

    resolve = upload_resolver(tmp_path, upload)

    assert resolve("top.png") == "https://cdn/top.png"
    assert resolve("deep.png") == "https://cdn/deep.png"
    assert resolve("nowhere.png") is None
    assert uploaded == ["top.png", "deep.png"]
