"""Line buffer accumulating the output of one delta."""

from __future__ import annotations

from collections.abc import Iterator

from .models import Line


class LineBuffer:
    """Ordered, growing sequence of `Line` nodes plus the line cursor.

    Lines past the cursor never exist, and every index before the cursor
    holds a line (possibly empty).
    """

    def __init__(self) -> None:
        self.lines: list[Line] = []
        self.cursor = 0

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[Line]:
        return iter(self.lines)

    def __getitem__(self, index: int) -> Line:
        return self.lines[index]

    def ensure(self) -> Line:
        """Return the line under the cursor, creating empty lines as needed."""
        while len(self.lines) <= self.cursor:
            self.lines.append(Line())
        return self.lines[self.cursor]

    def append(self, text: str, overwrite: bool = False) -> None:
        """Append `text` to the current line, or replace its content."""
        line = self.ensure()
        line.content = text if overwrite else line.content + text

    def advance(self, count: int = 1) -> None:
        """Complete `count` lines, leaving empty ones behind when nothing was written."""
        for _ in range(count):
            self.ensure()
            self.cursor += 1

    def push(self, line: Line) -> Line:
        """Move the cursor to a new line holding `line`."""
        self.ensure()
        self.cursor += 1
        self.lines.append(line)
        return line

    def close_block(self) -> bool:
        """Step off the current block line.

        Text waiting on the block line moves onto a line of its own, which
        becomes current.

        Returns:
            bool: True when pending text opened a new line, False when the
                cursor simply moved past the block.
        """
        line = self.ensure()
        pending, line.content = line.content, ""
        if pending:
            self.push(Line(content=pending))
            return True
        self.cursor += 1
        return False
