import io
import os
import sys
from datetime import datetime
from pathlib import Path

from bitio import CompressorBitio
from huff import BITS_PER_INT, FormatError, TruncatedBodyError, TruncatedHeaderError, compress_file, expand_file, input_tree, new_nodes

BitFile = CompressorBitio.BitFile


class ChurnResult:
    def __init__(self, original_size: int, packed_size: int = 0, tree_bits: int = 0, body_bits: int = 0):
        self.original_size = original_size
        self.packed_size = packed_size
        self.tree_bits = tree_bits
        self.body_bits = body_bits
        self.error = None

    @property
    def passed(self) -> bool:
        return self.error is None

    @property
    def ratio(self) -> int:
        return 100 - (self.packed_size * 100 // max(self.original_size, 1))


class ChurnProgram:
    """Round trips every file under a directory through the codec and logs the result."""

    LOG_NAME = "CHURN.LOG"
    COMPRESSED_EXTENSIONS = {".zip", ".ice", ".lzh", ".arc", ".gif", ".pak", ".arj", ".gz", ".cmp"}

    def __init__(self):
        self.total_files = 0
        self.total_passed = 0
        self.total_failed = 0
        self.total_tree_bits = 0
        self.total_body_bits = 0
        self.log_file = None

    def main(self, args):
        if len(args) != 1:
            self.usage_exit()
            return

        root_dir = os.path.normpath(args[0]) + os.sep

        try:
            with open(self.LOG_NAME, "w", encoding="utf-8") as self.log_file:
                self.write_log_header()

                start_time = datetime.now()
                self.churn_files(root_dir)
                stop_time = datetime.now()

                self.write_log_summary(start_time, stop_time)
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
        finally:
            self.log_file = None

    def churn_files(self, path):
        try:
            for entry in sorted(os.scandir(path), key=lambda e: e.name):
                if entry.is_dir(follow_symlinks=False):
                    self.churn_files(entry.path)
                elif entry.is_file(follow_symlinks=False) and not self.file_is_already_compressed(entry.path):
                    print(f"Testing {entry.path}", file=sys.stderr)
                    if not self.churn_file(entry.path):
                        print("Comparison failed!", file=sys.stderr)
        except PermissionError as ex:
            print(f"Access denied to {path}: {ex}", file=sys.stderr)

    def file_is_already_compressed(self, name):
        return Path(name).suffix.lower() in self.COMPRESSED_EXTENSIONS

    def churn_file(self, file_name) -> bool:
        try:
            with open(file_name, "rb") as f:
                original = f.read()
        except OSError as ex:
            result = ChurnResult(0)
            result.error = f"unreadable: {ex}"
        else:
            result = self.round_trip(original)

        self.total_files += 1
        if result.passed:
            self.total_passed += 1
            self.total_tree_bits += result.tree_bits
            self.total_body_bits += result.body_bits
        else:
            self.total_failed += 1
        self.write_log_line(file_name, result)
        return result.passed

    def round_trip(self, original: bytes) -> ChurnResult:
        """Compress, measure, expand and compare one buffer."""
        packed = compress_bytes(original)
        result = ChurnResult(len(original), len(packed))

        source = BitFile.from_stream(io.BytesIO(packed), True)
        sink = io.BytesIO()
        try:
            expand_file(source, BitFile.from_stream(sink, False))
            result.tree_bits = measure_tree_bits(packed)
            result.body_bits = source.bits_read - BITS_PER_INT - result.tree_bits
            if sink.getvalue() != original:
                result.error = "expanded data differs"
                return result
        except FormatError as ex:
            result.error = f"{type(ex).__name__}: {ex}"
            return result

        # dropping the last byte always loses part of the END_OF_STREAM code
        try:
            expand_bytes(packed[:-1])
        except (TruncatedHeaderError, TruncatedBodyError):
            pass
        except FormatError as ex:
            result.error = f"truncation reported as {type(ex).__name__}: {ex}"
        else:
            result.error = "truncation not detected"
        return result

    def write_log_header(self):
        self.log_file.write("                                          Original    Packed      Tree      Body\n")
        self.log_file.write("            File Name                         Size      Size      Bits      Bits  Ratio  Result\n")
        self.log_file.write("-------------------------------------     --------  --------  --------  --------  -----  ------\n")

    def write_log_line(self, file_name, result: ChurnResult):
        self.log_file.write(f"{file_name:<40} ")
        self.log_file.write(f" {result.original_size:8}  {result.packed_size:8}  {result.tree_bits:8}  {result.body_bits:8}  {result.ratio:4}%  ")
        if result.passed:
            self.log_file.write("Passed\n")
        else:
            self.log_file.write(f"Failed: {result.error}\n")

    def write_log_summary(self, start_time, stop_time):
        elapsed_time = (stop_time - start_time).total_seconds()
        self.log_file.write(f"\nTotal elapsed time: {elapsed_time:.2f} seconds\n")
        self.log_file.write(f"Total files:   {self.total_files}\n")
        self.log_file.write(f"Total passed:  {self.total_passed}\n")
        self.log_file.write(f"Total failed:  {self.total_failed}\n")
        self.log_file.write(f"Tree bits:     {self.total_tree_bits}\n")
        self.log_file.write(f"Body bits:     {self.total_body_bits}\n")

    def usage_exit(self):
        usage = """
CHURN 2.0. Usage: churn.py root-dir

CHURN compresses and expands every file under root-dir with the tree header
Huffman codec, checks that a truncated container is rejected and writes the
results to CHURN.LOG.
"""
        print(usage)
        sys.exit(1)


def compress_bytes(data: bytes) -> bytes:
    sink = io.BytesIO()
    compress_file(BitFile.from_stream(io.BytesIO(data), True), BitFile.from_stream(sink, False))
    return sink.getvalue()


def expand_bytes(packed: bytes) -> bytes:
    sink = io.BytesIO()
    expand_file(BitFile.from_stream(io.BytesIO(packed), True), BitFile.from_stream(sink, False))
    return sink.getvalue()


def measure_tree_bits(packed: bytes) -> int:
    source = BitFile.from_stream(io.BytesIO(packed), True)
    source.read_bits(BITS_PER_INT)
    input_tree(source, new_nodes())
    return source.bits_read - BITS_PER_INT


if __name__ == "__main__":
    churn = ChurnProgram()
    churn.main(sys.argv[1:])
    sys.exit(1 if churn.total_failed else 0)
