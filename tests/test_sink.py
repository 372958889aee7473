import io

import pytest

from qrsolid.errors import ExportFailed
from qrsolid.io.sink import DirectorySink, MemorySink, StreamSink


def test_directory_sink_writes_file(tmp_path):
    sink = DirectorySink(tmp_path / "out")
    sink.write(b"abc", "QR Code.stl")
    assert (tmp_path / "out" / "QR Code.stl").read_bytes() == b"abc"
    assert sink.last_path == tmp_path / "out" / "QR Code.stl"


def test_directory_sink_refuses_to_overwrite(tmp_path):
    (tmp_path / "a.stl").write_bytes(b"old")
    with pytest.raises(ExportFailed):
        DirectorySink(tmp_path).write(b"new", "a.stl")
    DirectorySink(tmp_path, overwrite=True).write(b"new", "a.stl")
    assert (tmp_path / "a.stl").read_bytes() == b"new"


def test_directory_sink_strips_directories_from_name(tmp_path):
    DirectorySink(tmp_path).write(b"x", "../escape.stl")
    assert (tmp_path / "escape.stl").exists()


def test_directory_sink_reports_os_errors(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_bytes(b"")
    with pytest.raises(ExportFailed):
        DirectorySink(blocker / "sub").write(b"x", "a.stl")


def test_stream_and_memory_sinks():
    stream = io.BytesIO()
    StreamSink(stream).write(b"data", "ignored.stl")
    assert stream.getvalue() == b"data"

    memory = MemorySink()
    memory.write(b"data", "QR Code.stl")
    assert memory.files == {"QR Code.stl": b"data"}
