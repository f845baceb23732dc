import re
from unittest import mock

import pytest

from ttyreckit.compress import default_compression_ext
from ttyreckit.outfile import next_suffix, open_out
from ttyreckit.stream import open_stream


@pytest.mark.parametrize("before,after", [
    ("", "a"),
    ("a", "b"),
    ("z", "aa"),
    ("az", "ba"),
    ("zz", "aaa"),
])
def test_next_suffix(before, after):
    assert next_suffix(before) == after


def test_suffixes_are_unique_and_ordered():
    seen = [""]
    for _ in range(60):
        seen.append(next_suffix(seen[-1]))
    assert len(set(seen)) == len(seen)
    assert seen[26] == "z"


def test_generated_name_shape(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    stream, name = open_out(None, ".cast", False)
    stream.close()
    pattern = r"\d{4}-\d\d-\d\d\.\d\d-\d\d-\d\d\.cast" + re.escape(default_compression_ext())
    assert re.fullmatch(pattern, name)
    assert (tmp_path / name).exists()


def test_generated_names_do_not_clash(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    comp = default_compression_ext()
    with mock.patch("time.strftime", return_value="2020-01-01.00-00-00"):
        first, name1 = open_out(None, ".cast", False)
        second, name2 = open_out(None, ".cast", False)
    first.close()
    second.close()
    assert name1 == "2020-01-01.00-00-00.cast" + comp
    assert name2 == "2020-01-01.00-00-00a.cast" + comp


def test_generated_file_round_trip(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    stream, name = open_out(None, "", False)
    stream.write(b"payload")
    stream.close()
    with open_stream(str(tmp_path / name)) as back:
        assert back.read() == b"payload"


def test_explicit_name_truncates(tmp_path):
    path = tmp_path / "out.txt"
    path.write_bytes(b"old contents")
    stream, name = open_out(str(path), "", False)
    stream.write(b"new")
    stream.close()
    assert name == str(path)
    assert path.read_bytes() == b"new"


def test_explicit_name_appends(tmp_path):
    path = tmp_path / "out.txt"
    path.write_bytes(b"one")
    stream, _ = open_out(str(path), "", True)
    stream.write(b"two")
    stream.close()
    assert path.read_bytes() == b"onetwo"


def test_append_to_missing_file_fails(tmp_path):
    with pytest.raises(OSError):
        open_out(str(tmp_path / "missing.txt"), "", True)