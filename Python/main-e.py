# Bradford Arrington 2025
import sys

from bitio import CompressorBitio
from driver import parse_debug_level, short_program_name, track_performance
from huff import COMPRESSION_NAME, USAGE, expand_file

bitio = CompressorBitio()

if __name__ == '__main__':
    arguments = sys.argv
    if len(arguments) < 3:
        print(f"\nUsage:  {short_program_name(arguments[0])} {USAGE}")
        sys.exit(0)

    debug_level = parse_debug_level(arguments[3:])
    try:
        input_file = bitio.BitFile.open_input_bit_file(arguments[1])
        try:
            output_file = bitio.BitFile.open_output_bit_file(arguments[2], True)

            print(f"\nDecompressing {arguments[1]} to {arguments[2]}")
            print(f"Using {COMPRESSION_NAME}\n")

            track_performance("ExpandFile", expand_file, input_file, output_file, debug_level)
        finally:
            input_file.close_bit_file()
    except FileNotFoundError as e:
        print(f"Error: File '{e.filename}' not found.")
        sys.exit(1)
    except Exception as e:
        print(f"An error occurred: {e}")
        sys.exit(1)
