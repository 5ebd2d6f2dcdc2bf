from struct import pack

import pytest

from axml2xml.cursor import ByteCursor
from axml2xml.errors import TruncatedInput
from axml2xml.strings import StringPool

from axml_builder import encode_string_pool


def decode(strings, **kwargs):
    chunk = encode_string_pool(strings, **kwargs)
    return StringPool.decode(ByteCursor(chunk), 0), len(chunk)


class TestStringPool:

    def test_decode_utf16(self):
        (pool, consumed), size = decode(["manifest", "package", ""])
        assert list(pool) == ["manifest", "package", ""]
        assert consumed == size
        assert not pool.is_utf8

    def test_decode_non_ascii(self):
        (pool, _), _ = decode(["ünïcödé", "日本語"])
        assert pool[0] == "ünïcödé"
        assert pool[1] == "日本語"

    def test_surrogate_pair(self, log_messages):
        (pool, _), _ = decode(["a\U0001F600b"])
        assert pool[0] == "a\U0001F600b"
        assert not [m for m in log_messages if m["level"].name == "WARNING"]

    def test_surrogate_pair_utf8(self, log_messages):
        (pool, _), _ = decode(["\U0001F600"], utf8=True)
        assert pool[0] == "\U0001F600"
        assert not [m for m in log_messages if m["level"].name == "WARNING"]

    def test_lone_surrogate_is_replaced(self, log_messages):
        data = pack("<HHHH", 2, 0xD800, 0x41, 0)
        chunk = pack("<LLLLLLLL", 0x001C0001, 32 + len(data), 1, 0, 0, 32, 0, 0) + data
        pool, _ = StringPool.decode(ByteCursor(chunk), 0)
        assert pool[0] == "\ufffdA"
        assert not [m for m in log_messages if m["level"].name == "WARNING"]

    def test_wrong_length_warns(self, log_messages):
        data = pack("<BB", 5, 2) + b"ab\x00\x00"
        chunk = pack("<LLLLLLLL", 0x001C0001, 32 + len(data), 1, 0, 0x100, 32, 0, 0) + data
        pool, _ = StringPool.decode(ByteCursor(chunk), 0)
        assert pool[0] == "ab"
        assert "invalid decoded string length" in [m["message"] for m in log_messages]

    def test_decode_utf8(self):
        (pool, consumed), size = decode(["manifest", "ünï"], utf8=True)
        assert pool.is_utf8
        assert list(pool) == ["manifest", "ünï"]
        assert consumed == size

    def test_decode_at_offset(self):
        chunk = encode_string_pool(["a", "bc"])
        pool, consumed = StringPool.decode(ByteCursor(b"\x00" * 8 + chunk), 8)
        assert list(pool) == ["a", "bc"]
        assert consumed == len(chunk)

    def test_long_utf16_length_prefix(self):
        # high bit set: the length continues in the next unit
        text = "x" * 0x8001
        data = pack("<HH", 0x8000, 0x8001) + text.encode("utf-16-le") + b"\x00\x00"
        chunk = pack("<LLLLLLLL", 0x001C0001, 32 + len(data), 1, 0, 0, 32, 0, 0) + data
        pool, _ = StringPool.decode(ByteCursor(chunk), 0)
        assert pool[0] == text

    def test_style_offsets_are_kept(self):
        (pool, _), _ = decode(["a"], style_offsets=[0])
        assert pool.style_offsets == [0]
        assert list(pool) == ["a"]

    @pytest.mark.parametrize("index", [-1, 2, 3, 0xFFFFFFFF, None])
    def test_out_of_range_index_is_absent(self, index):
        (pool, _), _ = decode(["a", "b"])
        assert pool.get(index) is None
        assert pool[index] is None

    def test_empty_pool(self):
        pool = StringPool.empty()
        assert len(pool) == 0
        assert pool.get(0) is None

    def test_truncated_chunk(self):
        chunk = encode_string_pool(["manifest"])
        with pytest.raises(TruncatedInput):
            StringPool.decode(ByteCursor(chunk[:-2]), 0)

    def test_string_past_buffer(self):
        # string offset points far outside the buffer
        chunk = pack("<LLLLLLLL", 0x001C0001, 32, 1, 0, 0, 32, 0, 0x1000)
        with pytest.raises(TruncatedInput):
            StringPool.decode(ByteCursor(chunk), 0)

    def test_show(self, capsys):
        (pool, _), _ = decode(["manifest"])
        pool.show()
        out = capsys.readouterr().out
        assert "String Table" in out
        assert "00000000 'manifest'" in out

    def test_repr(self):
        (pool, _), _ = decode(["a", "b"])
        assert repr(pool) == "<StringPool #strings=2, #styles=0, UTF8=False>"
