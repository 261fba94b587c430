import io
from pathlib import Path

import pytest

from bitio import CompressorBitio
from huff import compress_file, expand_file

PYTHON_DIR = Path(__file__).resolve().parents[1] / "Python"


def compress_bytes(data: bytes, debug_level: int = 0) -> bytes:
	source = CompressorBitio.BitFile.from_stream(io.BytesIO(data), True)
	sink = io.BytesIO()
	compress_file(source, CompressorBitio.BitFile.from_stream(sink, False), debug_level)
	return sink.getvalue()


def expand_bytes(data: bytes, sink: io.BytesIO = None, debug_level: int = 0) -> bytes:
	if sink is None:
		sink = io.BytesIO()
	source = CompressorBitio.BitFile.from_stream(io.BytesIO(data), True)
	expand_file(source, CompressorBitio.BitFile.from_stream(sink, False), debug_level)
	return sink.getvalue()


@pytest.fixture
def python_dir():
	return PYTHON_DIR
