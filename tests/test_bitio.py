import io

import pytest

from bitio import CompressorBitio

BitFile = CompressorBitio.BitFile


def _reader(data: bytes):
	return BitFile.from_stream(io.BytesIO(data), True)


def test_output_bits_msb_first_and_zero_padded_on_close():
	sink = io.BytesIO()
	out = BitFile.from_stream(sink, False)
	out.output_bits(0b101, 3)
	out.close_bit_file()
	assert sink.getvalue() == b"\xa0"
	assert out.bits_written == 3


def test_output_bits_spanning_bytes():
	sink = io.BytesIO()
	out = BitFile.from_stream(sink, False)
	out.output_bit(1)
	out.output_bits(0x1ff, 9)
	out.output_bits(0, 6)
	out.close_bit_file()
	assert sink.getvalue() == b"\xff\xc0"


def test_zero_length_code_writes_nothing():
	sink = io.BytesIO()
	out = BitFile.from_stream(sink, False)
	out.output_bits(0, 0)
	out.close_bit_file()
	assert sink.getvalue() == b""
	assert out.bits_written == 0


def test_read_bits_msb_first():
	bits = _reader(b"\x81\x80")
	assert bits.read_bits(9) == 0b100000011
	assert bits.bits_read == 9


def test_read_bits_signals_end_when_short():
	bits = _reader(b"\xff")
	assert bits.read_bits(9) == CompressorBitio.END_OF_DATA


def test_input_bit_on_empty_stream():
	assert _reader(b"").input_bit() == CompressorBitio.END_OF_DATA


def test_reset_rewinds_to_start():
	bits = _reader(b"\x12\x34")
	assert bits.read_bits(4) == 0x1
	assert bits.read_bits(8) == 0x23
	bits.reset()
	assert bits.read_bits(16) == 0x1234
	assert bits.read_bits(8) == CompressorBitio.END_OF_DATA


def test_reset_rewinds_to_where_the_stream_started():
	stream = io.BytesIO(b"\xaa\x55")
	stream.read(1)
	bits = BitFile.from_stream(stream, True)
	assert bits.read_bits(8) == 0x55
	bits.reset()
	assert bits.read_bits(8) == 0x55


def test_reset_on_output_is_rejected():
	out = BitFile.from_stream(io.BytesIO(), False)
	with pytest.raises(ValueError):
		out.reset()


def test_from_stream_leaves_stream_open():
	sink = io.BytesIO()
	out = BitFile.from_stream(sink, False)
	out.output_bits(0xab, 8)
	out.close_bit_file()
	assert not sink.closed


def test_named_files_are_closed(tmp_path):
	path = tmp_path / "bits.bin"
	out = BitFile.open_output_bit_file(str(path))
	out.output_bits(0x3, 2)
	out.close_bit_file()
	assert out.file_stream.closed
	assert path.read_bytes() == b"\xc0"

	bits = BitFile.open_input_bit_file(str(path))
	assert bits.read_bits(2) == 0x3
	bits.close_bit_file()
	assert bits.file_stream.closed


def test_pacifier_prints_dots(capsys):
	out = BitFile(io.BytesIO(), False, owns_stream=False, pacifier=True)
	for _ in range(CompressorBitio.PACIFIER_COUNT + 1):
		out.output_bits(0, 8)
	assert capsys.readouterr().out == "."
