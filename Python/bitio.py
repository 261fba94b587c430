#Bradford Arrington 2025
import sys
from io import SEEK_SET
from typing import BinaryIO


class CompressorBitio:
    PACIFIER_COUNT = 2047
    END_OF_DATA = -1

    class BitFile:
        def __init__(self, stream: BinaryIO, input_mode: bool, owns_stream: bool = True, pacifier: bool = False):
            self.is_input = input_mode
            self.file_stream: BinaryIO = stream
            self.owns_stream = owns_stream
            self.pacifier = pacifier
            self.rack: int = 0
            self.mask: int = 0x80
            self.pacifier_counter: int = 0
            self.bits_read: int = 0
            self.bits_written: int = 0
            self.start_position: int = stream.tell() if input_mode else 0

        @staticmethod
        def open_output_bit_file(name: str, pacifier: bool = False) -> 'CompressorBitio.BitFile':
            return CompressorBitio.BitFile(open(name, "wb"), False, True, pacifier)

        @staticmethod
        def open_input_bit_file(name: str, pacifier: bool = False) -> 'CompressorBitio.BitFile':
            return CompressorBitio.BitFile(open(name, "rb"), True, True, pacifier)

        @staticmethod
        def from_stream(stream: BinaryIO, input_mode: bool) -> 'CompressorBitio.BitFile':
            """Wrap an already open binary stream. close_bit_file() leaves it open."""
            return CompressorBitio.BitFile(stream, input_mode, owns_stream=False)

        def _pacify(self):
            self.pacifier_counter += 1
            if self.pacifier and (self.pacifier_counter & CompressorBitio.PACIFIER_COUNT) == 0:
                sys.stdout.write(".")
                sys.stdout.flush()

        def _write_rack(self):
            try:
                self.file_stream.write(bytes([self.rack]))
            except OSError as e:
                raise OSError(f"Fatal error in OutputBit! {e}") from e
            self._pacify()
            self.rack = 0
            self.mask = 0x80

        def close_bit_file(self):
            """Flush a partially filled last byte, zero padded, and release the file."""
            if not self.is_input and self.mask != 0x80:
                try:
                    self.file_stream.write(bytes([self.rack]))
                except OSError as e:
                    raise OSError(f"Fatal error in CloseBitFile! {e}") from e
                self.rack = 0
                self.mask = 0x80
            if self.owns_stream:
                self.file_stream.close()
            elif not self.is_input:
                self.file_stream.flush()

        def reset(self):
            """Rewind an input bit file to where it started."""
            if not self.is_input:
                raise ValueError("reset() is only supported on input bit files")
            self.file_stream.seek(self.start_position, SEEK_SET)
            self.rack = 0
            self.mask = 0x80

        def output_bit(self, bit: int):
            if bit != 0:
                self.rack |= self.mask
            self.mask >>= 1
            self.bits_written += 1
            if self.mask == 0:
                self._write_rack()

        def output_bits(self, code: int, count: int):
            # a zero length code writes nothing
            mask_code: int = 1 << (count - 1) if count > 0 else 0
            while mask_code != 0:
                if (mask_code & code) != 0:
                    self.rack |= self.mask
                self.mask >>= 1
                self.bits_written += 1
                if self.mask == 0:
                    self._write_rack()
                mask_code >>= 1

        def input_bit(self) -> int:
            if self.mask == 0x80:
                read = self.file_stream.read(1)
                if not read:
                    return CompressorBitio.END_OF_DATA
                self.rack = read[0]
                self._pacify()
            value = self.rack & self.mask
            self.mask >>= 1
            if self.mask == 0:
                self.mask = 0x80
            self.bits_read += 1
            return 1 if value != 0 else 0

        def read_bits(self, bit_count: int) -> int:
            """Return the next bit_count bits, MSB first, or END_OF_DATA if fewer remain."""
            return_value: int = 0
            for _ in range(bit_count):
                bit = self.input_bit()
                if bit == CompressorBitio.END_OF_DATA:
                    return CompressorBitio.END_OF_DATA
                return_value = (return_value << 1) | bit
            return return_value
