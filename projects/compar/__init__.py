from compar.comparison import (
    ClassificationResult,
    HaystackIndex,
    build_index,
    classify,
    classify_lines,
    comparison_key,
    index_lines,
    split_lines,
)
from compar.decoding import decode, decode_bytes, detect_bom, read_bytes

__version__ = "0.1.0"
