"""Tests for upload placement and validation."""

import io
import re

import pytest
from fastapi import UploadFile

from tracks import uploads
from tracks.uploads import (
    UploadRejected,
    build_stored_filename,
    save_upload,
    validate_extension,
)


def make_upload(filename, content=b"data"):
    return UploadFile(file=io.BytesIO(content), filename=filename)


class TestValidateExtension:
    @pytest.mark.parametrize("name", ["a.mp3", "b.WAV", "c.ogg", "d.mpeg"])
    def test_audio_accepted(self, name):
        assert validate_extension("audio", name) == "." + name.split(".")[-1].lower()

    @pytest.mark.parametrize("name", ["a.jpg", "b.jpeg", "c.PNG", "d.gif"])
    def test_cover_accepted(self, name):
        validate_extension("cover", name)

    def test_image_in_audio_field_rejected(self):
        with pytest.raises(UploadRejected, match="audio"):
            validate_extension("audio", "cover.png")

    def test_audio_in_cover_field_rejected(self):
        with pytest.raises(UploadRejected, match="image"):
            validate_extension("cover", "song.mp3")

    def test_no_extension_rejected(self):
        with pytest.raises(UploadRejected):
            validate_extension("audio", "song")

    def test_unknown_field_rejected(self):
        with pytest.raises(UploadRejected, match="Unexpected"):
            validate_extension("lyrics", "song.mp3")


class TestStoredFilename:
    def test_timestamp_prefix(self):
        assert re.fullmatch(r"\d{13}-my_song\.mp3", build_stored_filename("my song.MP3"))

    def test_path_components_dropped(self):
        name = build_stored_filename("../../etc/passwd.mp3")
        assert "/" not in name
        assert name.endswith("-passwd.mp3")

    def test_windows_path_dropped(self):
        assert build_stored_filename("C:\\music\\track.ogg").endswith("-track.ogg")

    def test_unsafe_characters_removed(self):
        assert build_stored_filename("<bad>*name?.wav").endswith("-badname.wav")


class TestSaveUpload:
    def test_writes_file_and_returns_url(self, upload_dir):
        stored = save_upload("audio", make_upload("song.mp3", b"ID3-bytes"))

        assert stored["url"].startswith("/uploads/")
        assert stored["url"].endswith("-song.mp3")
        with open(stored["path"], "rb") as f:
            assert f.read() == b"ID3-bytes"

    def test_creates_missing_directory(self, upload_dir):
        target = upload_dir / "nested" / "dir"
        stored = save_upload("cover", make_upload("art.png"), upload_dir=str(target))
        assert target.is_dir()
        assert stored["path"].startswith(str(target))

    def test_oversized_file_removed(self, upload_dir):
        with pytest.raises(UploadRejected, match="limit"):
            save_upload("audio", make_upload("big.mp3", b"x" * 2048), max_size=1024)
        assert list(upload_dir.iterdir()) == []

    def test_bad_extension_writes_nothing(self, upload_dir):
        with pytest.raises(UploadRejected):
            save_upload("audio", make_upload("notes.txt"))
        assert list(upload_dir.iterdir()) == []

    def test_read_error_removes_partial_file(self, upload_dir):
        class DroppingStream(io.BytesIO):
            calls = 0

            def read(self, size=-1):
                self.calls += 1
                if self.calls > 1:
                    raise OSError("client disconnected")
                return super().read(size)

        upload = UploadFile(file=DroppingStream(b"ID3-first-chunk"), filename="song.mp3")
        with pytest.raises(OSError):
            save_upload("audio", upload)
        assert list(upload_dir.iterdir()) == []

    def test_same_name_in_same_millisecond(self, upload_dir, monkeypatch):
        monkeypatch.setattr(uploads.time, "time", lambda: 1700000000.0)

        first = save_upload("audio", make_upload("song.mp3", b"one"))
        second = save_upload("audio", make_upload("song.mp3", b"two"))

        assert first["path"] != second["path"]
        assert first["url"].endswith("/1700000000000-song.mp3")
        assert re.search(r"/1700000000000-[0-9a-f]{8}-song\.mp3$", second["url"])
        with open(first["path"], "rb") as f:
            assert f.read() == b"one"
        with open(second["path"], "rb") as f:
            assert f.read() == b"two"
