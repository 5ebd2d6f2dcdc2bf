import zipfile
from struct import pack

import pytest
from loguru import logger

from axml2xml.__main__ import main, read_axml
from axml2xml.constants import WORD_RES_TABLE, WORD_START_DOCUMENT

from conftest import MANIFEST_XML


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger.remove()
    logger.disable("axml2xml")


@pytest.fixture
def manifest_file(tmp_path, manifest):
    path = tmp_path / "AndroidManifest.xml"
    path.write_bytes(manifest)
    return path


class TestMain:

    def test_convert_file(self, manifest_file, capsys):
        assert main([str(manifest_file)]) == 0
        assert capsys.readouterr().out == MANIFEST_XML

    def test_convert_apk(self, tmp_path, manifest, capsys):
        apk = tmp_path / "app.apk"
        with zipfile.ZipFile(apk, "w") as zf:
            zf.writestr("AndroidManifest.xml", manifest)
            zf.writestr("classes.dex", b"dex\n035\x00")
        assert read_axml(str(apk)) == manifest
        assert main([str(apk), "--strict"]) == 0
        assert capsys.readouterr().out == MANIFEST_XML

    def test_lxml_output(self, manifest_file, capsys):
        assert main([str(manifest_file), "--lxml"]) == 0
        out = capsys.readouterr().out
        assert out.startswith('<manifest xmlns:android="http://schemas.android.com/apk/res/android"')
        assert 'android:debuggable="true"' in out

    def test_strings(self, manifest_file, capsys):
        assert main([str(manifest_file), "--strings"]) == 0
        assert "'manifest'" in capsys.readouterr().out

    def test_truncated_file(self, tmp_path, manifest, capsys):
        path = tmp_path / "broken.xml"
        path.write_bytes(manifest[:-5])
        assert main([str(path)]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Can not read over the buffer size" in captured.err

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.xml")]) == 1
        assert "Can not read" in capsys.readouterr().err

    def test_apk_without_manifest(self, tmp_path):
        apk = tmp_path / "empty.apk"
        with zipfile.ZipFile(apk, "w") as zf:
            zf.writestr("classes.dex", b"")
        assert main([str(apk)]) == 1

    def test_verbose_logs_chunks(self, manifest_file, capsys):
        assert main([str(manifest_file), "-v"]) == 0
        assert "START_TAG: manifest" in capsys.readouterr().err

    def test_zero_sized_chunk(self, tmp_path, capsys):
        path = tmp_path / "zero.xml"
        path.write_bytes(pack("<LLLL", WORD_START_DOCUMENT, 16, WORD_RES_TABLE, 0))
        assert main([str(path)]) == 1
        assert "smaller than the header size" in capsys.readouterr().err
