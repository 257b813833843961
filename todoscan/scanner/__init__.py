from .blocks import BlockAccumulator, iter_blocks, strip_line_ending
from .comments import match_title, parse_comment
from .metadata import parse_estimate, parse_metadata
from .records import build_record

__all__ = [
    "BlockAccumulator",
    "iter_blocks",
    "strip_line_ending",
    "match_title",
    "parse_comment",
    "parse_estimate",
    "parse_metadata",
    "build_record",
]
