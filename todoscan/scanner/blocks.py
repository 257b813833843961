"""
Per-file state machine that groups comment lines into task blocks.

A block is a run of contiguous comment lines that starts with a recognized
title (``TODO: ...``). It ends at the next title, at the first line that is
not a comment, or at the end of the file. Empty comment lines such as a
bare ``//`` stay inside the block as empty continuation lines.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from .comments import match_title, parse_comment
from .models import RawBlock


class BlockAccumulator:
    """Feed lines one at a time; finished blocks are returned as they close."""

    def __init__(self) -> None:
        self.line_number = 0
        self._current: Optional[RawBlock] = None

    @property
    def in_block(self) -> bool:
        return self._current is not None

    def feed(self, line: str) -> Optional[RawBlock]:
        self.line_number += 1
        text = parse_comment(line)

        if text is None:
            return self._close()

        match = match_title(text)
        if match is not None:
            finished = self._close()
            tag, title = match
            # Recorded as the 0-based index of the title line.
            self._current = RawBlock(tag=tag, start_line=self.line_number - 1, lines=[title])
            return finished

        if self._current is not None:
            self._current.lines.append(text)
        return None

    def finish(self) -> Optional[RawBlock]:
        return self._close()

    def _close(self) -> Optional[RawBlock]:
        block, self._current = self._current, None
        return block


def strip_line_ending(line: str) -> str:
    """Drop a trailing ``\\n`` and then a trailing ``\\r``; a lone ``\\r`` is content."""
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def iter_blocks(lines: Iterable[str]) -> Iterator[RawBlock]:
    accumulator = BlockAccumulator()
    for line in lines:
        block = accumulator.feed(strip_line_ending(line))
        if block is not None:
            yield block
    block = accumulator.finish()
    if block is not None:
        yield block
