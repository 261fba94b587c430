#Bradford Arrington 2025
from bitio import CompressorBitio

BITS_PER_WORD = 8
BITS_PER_INT = 32
ALPH_SIZE = 1 << BITS_PER_WORD
END_OF_STREAM = ALPH_SIZE
SYMBOL_COUNT = ALPH_SIZE + 1
# a full tree over SYMBOL_COUNT leaves has one fewer internal node
MAX_INTERNAL_NODES = SYMBOL_COUNT - 1

HUFF_NUMBER = 0xface8200
HUFF_TREE = HUFF_NUMBER | 1

DEBUG_LOW = 1
DEBUG_HIGH = 4

END_OF_DATA = CompressorBitio.END_OF_DATA

COMPRESSION_NAME = "static order 0 model with Huffman coding and a tree header"
USAGE = "infile outfile [-d|-D]\n\nSpecifying -d will print a summary, -D will also dump the modeling data\n"


class FormatError(Exception):
    """The compressed stream is not a valid tree-header Huffman container."""


class BadMagicError(FormatError):
    pass


class TruncatedHeaderError(FormatError):
    pass


class TruncatedBodyError(FormatError):
    pass


class Node:
    def __init__(self):
        self.count = 0
        self.saved_count = 0
        self.child_0 = 0
        self.child_1 = 0


class Code:
    def __init__(self):
        self.code = 0
        self.code_bits = 0


def is_leaf(node: int) -> bool:
    return node <= END_OF_STREAM


def new_nodes() -> list[Node]:
    # leaves live at their symbol's index, internal nodes are appended after them
    return [Node() for _ in range(SYMBOL_COUNT)]


def compress_file(input_bit_file: 'CompressorBitio.BitFile', output_bit_file: 'CompressorBitio.BitFile', debug_level: int = 0):
    """Compress input_bit_file into output_bit_file and close the output.

    The input is read twice, so it must support reset(). The output gets the
    HUFF_TREE magic number, the tree header and the encoded body.
    """
    counts = count_bytes(input_bit_file)
    nodes = new_nodes()
    load_counts(counts, nodes)
    root_node = build_tree(nodes)
    codes = [Code() for _ in range(SYMBOL_COUNT)]
    convert_tree_to_code(nodes, codes, 0, 0, root_node)

    output_bit_file.output_bits(HUFF_TREE, BITS_PER_INT)
    output_tree(output_bit_file, nodes, root_node)
    header_bits = output_bit_file.bits_written

    input_bit_file.reset()
    compress_data(input_bit_file, output_bit_file, codes)

    if debug_level >= DEBUG_LOW:
        active = sum(1 for count in counts if count != 0)
        print(f"symbols={active}  tree bits={header_bits - BITS_PER_INT}  body bits={output_bit_file.bits_written - header_bits}")
    if debug_level >= DEBUG_HIGH:
        print_model(nodes, codes, root_node)

    output_bit_file.close_bit_file()


def expand_file(input_bit_file: 'CompressorBitio.BitFile', output_bit_file: 'CompressorBitio.BitFile', debug_level: int = 0):
    """Decompress a HUFF_TREE container into output_bit_file and close the output.

    Raises BadMagicError, TruncatedHeaderError or TruncatedBodyError. The
    output is closed either way, so bytes decoded before a body error stay
    written.
    """
    try:
        magic = input_bit_file.read_bits(BITS_PER_INT)
        if magic == END_OF_DATA:
            raise TruncatedHeaderError("truncated header, no magic number")
        if magic != HUFF_TREE:
            raise BadMagicError(f"illegal header starts with {magic:#010x}")

        nodes = new_nodes()
        root_node = input_tree(input_bit_file, nodes)
        header_bits = input_bit_file.bits_read

        if debug_level >= DEBUG_HIGH:
            print_model(nodes, None, root_node)

        written = expand_data(input_bit_file, output_bit_file, nodes, root_node)

        if debug_level >= DEBUG_LOW:
            print(f"tree bits={header_bits - BITS_PER_INT}  body bits={input_bit_file.bits_read - header_bits}  bytes written={written}")
    finally:
        output_bit_file.close_bit_file()


def count_bytes(input_bit_file: 'CompressorBitio.BitFile') -> list[int]:
    """Count every 8 bit symbol until end of data. The stream is left at its end."""
    counts = [0] * SYMBOL_COUNT
    while True:
        c = input_bit_file.read_bits(BITS_PER_WORD)
        if c == END_OF_DATA:
            break
        counts[c] += 1

    counts[END_OF_STREAM] = 1
    return counts


def load_counts(counts: list[int], nodes: list[Node]):
    for i in range(SYMBOL_COUNT):
        nodes[i].count = counts[i]


def build_tree(nodes: list[Node]) -> int:
    """Merge the two lightest nodes until one is left and return its index.

    The first node picked becomes child_0. Equal counts go to the lowest
    index, so leaves are taken by symbol value before any internal node.
    """
    while True:
        min_1 = None
        min_2 = None

        for i in range(len(nodes)):
            if nodes[i].count != 0:
                if min_1 is None or nodes[i].count < nodes[min_1].count:
                    min_2 = min_1
                    min_1 = i
                elif min_2 is None or nodes[i].count < nodes[min_2].count:
                    min_2 = i

        if min_2 is None:
            break  # only min_1 is left

        parent = Node()
        parent.count = nodes[min_1].count + nodes[min_2].count
        parent.child_0 = min_1
        parent.child_1 = min_2

        # saved and zeroed so they are not selected again
        nodes[min_1].saved_count = nodes[min_1].count
        nodes[min_1].count = 0
        nodes[min_2].saved_count = nodes[min_2].count
        nodes[min_2].count = 0

        nodes.append(parent)

    # a lone sentinel leaf is returned as the root
    nodes[min_1].saved_count = nodes[min_1].count
    nodes[min_1].count = 0
    return min_1


def convert_tree_to_code(nodes: list[Node], codes: list[Code], code_so_far: int, bits: int, node: int):
    if is_leaf(node):
        codes[node].code = code_so_far
        codes[node].code_bits = bits
        return

    code_so_far <<= 1
    bits = bits + 1
    convert_tree_to_code(nodes, codes, code_so_far, bits, nodes[node].child_0)
    convert_tree_to_code(nodes, codes, code_so_far | 1, bits, nodes[node].child_1)


def output_tree(output_bit_file: 'CompressorBitio.BitFile', nodes: list[Node], node: int):
    """Pre-order: 0 for an internal node, 1 plus a 9 bit symbol for a leaf."""
    if is_leaf(node):
        output_bit_file.output_bit(1)
        output_bit_file.output_bits(node, BITS_PER_WORD + 1)
        return

    output_bit_file.output_bit(0)
    output_tree(output_bit_file, nodes, nodes[node].child_0)
    output_tree(output_bit_file, nodes, nodes[node].child_1)


def input_tree(input_bit_file: 'CompressorBitio.BitFile', nodes: list[Node], depth: int = 0) -> int:
    bit = input_bit_file.input_bit()
    if bit == END_OF_DATA:
        raise TruncatedHeaderError("truncated header, tree is incomplete")

    if bit == 1:
        value = input_bit_file.read_bits(BITS_PER_WORD + 1)
        if value == END_OF_DATA:
            raise TruncatedHeaderError("truncated header, leaf value is incomplete")
        if value > END_OF_STREAM:
            raise FormatError(f"leaf value {value} is out of range")
        return value

    if depth >= MAX_INTERNAL_NODES or len(nodes) - SYMBOL_COUNT >= MAX_INTERNAL_NODES:
        raise FormatError(f"tree header has more than {MAX_INTERNAL_NODES} internal nodes")

    node = len(nodes)
    nodes.append(Node())
    nodes[node].child_0 = input_tree(input_bit_file, nodes, depth + 1)
    nodes[node].child_1 = input_tree(input_bit_file, nodes, depth + 1)
    return node


def compress_data(input_bit_file: 'CompressorBitio.BitFile', output_bit_file: 'CompressorBitio.BitFile', codes: list[Code]):
    while True:
        c = input_bit_file.read_bits(BITS_PER_WORD)
        if c == END_OF_DATA:
            break
        output_bit_file.output_bits(codes[c].code, codes[c].code_bits)

    output_bit_file.output_bits(codes[END_OF_STREAM].code, codes[END_OF_STREAM].code_bits)


def expand_data(input_bit_file: 'CompressorBitio.BitFile', output_bit_file: 'CompressorBitio.BitFile', nodes: list[Node], root_node: int) -> int:
    """Walk the tree one bit at a time until the END_OF_STREAM leaf.

    Returns the number of bytes written.
    """
    if is_leaf(root_node):
        # single leaf tree, the sentinel's code is empty
        if root_node == END_OF_STREAM:
            return 0
        raise FormatError("tree header has no END_OF_STREAM leaf")

    written = 0
    node = root_node
    while True:
        bit = input_bit_file.input_bit()
        if bit == END_OF_DATA:
            raise TruncatedBodyError("truncated body, no END_OF_STREAM found")

        if bit:
            node = nodes[node].child_1
        else:
            node = nodes[node].child_0

        if is_leaf(node):
            if node == END_OF_STREAM:
                return written
            output_bit_file.output_bits(node, BITS_PER_WORD)
            written += 1
            node = root_node


def print_char(c):
    if 0x20 <= c < 127:
        print(f"'{chr(c)}'", end="")
    else:
        print(f"{c:3d}", end="")


def code_to_string(code: int, bits: int) -> str:
    return format(code, f"0{bits}b") if bits > 0 else ""


def print_model(nodes: list[Node], codes, node: int):
    """Dump the tree in pre-order, one line per node."""
    print("node=", end="")
    print_char(node)
    if codes is not None:
        print(f"  count={nodes[node].saved_count:3d}", end="")

    if is_leaf(node):
        if codes is not None:
            print(f"  Huffman code=<{code_to_string(codes[node].code, codes[node].code_bits)}>", end="")
        print()
        return

    print("  child_0=", end="")
    print_char(nodes[node].child_0)
    print("  child_1=", end="")
    print_char(nodes[node].child_1)
    print()
    print_model(nodes, codes, nodes[node].child_0)
    print_model(nodes, codes, nodes[node].child_1)
