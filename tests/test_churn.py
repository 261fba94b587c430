import pytest

import churn
from churn import ChurnProgram


@pytest.fixture
def churn_tree(tmp_path, monkeypatch):
	data = tmp_path / "data"
	(data / "nested").mkdir(parents=True)
	(data / "empty.bin").write_bytes(b"")
	(data / "text.txt").write_bytes(b"churn compresses and expands every file\n" * 20)
	(data / "nested" / "all.bin").write_bytes(bytes(range(256)) * 2)
	(data / "skip.zip").write_bytes(b"PK\x03\x04")
	work = tmp_path / "work"
	work.mkdir()
	monkeypatch.chdir(work)
	return data, work


def test_churn_passes_every_file(churn_tree):
	data, work = churn_tree

	program = ChurnProgram()
	program.main([str(data)])

	assert program.total_files == 3
	assert program.total_passed == 3
	assert program.total_failed == 0
	log = (work / ChurnProgram.LOG_NAME).read_text(encoding="utf-8")
	assert log.count("Passed") == 3
	assert "skip.zip" not in log
	assert "Total passed:  3" in log
	assert f"Tree bits:     {program.total_tree_bits}" in log


def test_round_trip_measures_tree_and_body():
	result = ChurnProgram().round_trip(b"AAB")
	assert result.passed
	assert result.packed_size == 9
	assert result.tree_bits == 32
	assert result.body_bits == 6


def test_round_trip_of_empty_input():
	result = ChurnProgram().round_trip(b"")
	assert result.passed
	assert result.tree_bits == 10
	assert result.body_bits == 0


def test_format_error_is_logged_per_file(churn_tree, monkeypatch):
	data, work = churn_tree
	monkeypatch.setattr(churn, "compress_bytes", lambda data: b"not a container")

	program = ChurnProgram()
	program.main([str(data)])

	assert program.total_failed == 3
	assert program.total_passed == 0
	log = (work / ChurnProgram.LOG_NAME).read_text(encoding="utf-8")
	assert log.count("Failed: BadMagicError: illegal header starts with") == 3
	assert "Total failed:  3" in log


def test_undetected_truncation_fails():
	real_compress = churn.compress_bytes
	program = ChurnProgram()
	with pytest.MonkeyPatch.context() as patch:
		# a spare trailing byte means dropping one byte still decodes
		patch.setattr(churn, "compress_bytes", lambda data: real_compress(data) + b"\x00")
		result = program.round_trip(b"abc")
	assert result.error == "truncation not detected"


def test_churn_usage_exits():
	with pytest.raises(SystemExit):
		ChurnProgram().main([])
