"""Console progress bar for long renders.

Example:
    >>> bar = ProgressBar(displayed_steps=10)
    >>> bar.set_completed(40)
    >>> bar.format()
    '[====      ] 40 %'
"""

import sys
from dataclasses import dataclass
from typing import TextIO


@dataclass(frozen=True)
class BarCharacters:
    """Characters used to draw a progress bar."""

    left_delimiter: str = "["
    right_delimiter: str = "]"
    filled: str = "="
    empty: str = " "


DEFAULT_CHARACTERS = BarCharacters()


class ProgressBar:
    """A fixed-width text progress bar.

    Attributes:
        displayed_steps: Number of cells drawn between the delimiters.
        total: Value that counts as complete (100 for percentages).
        finished: Current progress, between 0 and total.
        print_percent: Append the finished value followed by " %".
        single_line: Redraw in place with a carriage return instead of
            printing one line per update.
        characters: Characters used to draw the bar.
    """

    def __init__(
        self,
        displayed_steps: int,
        total: int = 100,
        finished: int = 0,
        print_percent: bool = True,
        single_line: bool = True,
        characters: BarCharacters = DEFAULT_CHARACTERS,
    ) -> None:
        if displayed_steps <= 0:
            raise ValueError(f"displayed_steps must be positive, got {displayed_steps}")
        if total <= 0:
            raise ValueError(f"total must be positive, got {total}")

        self.displayed_steps = displayed_steps
        self.total = total
        self.finished = 0
        self.print_percent = print_percent
        self.single_line = single_line
        self.characters = characters
        self.set_completed(finished)

    def set_completed(self, steps: int) -> None:
        """Set the progress, clamped to [0, total]."""
        self.finished = max(0, min(steps, self.total))

    @property
    def filled_steps(self) -> int:
        """Number of cells drawn as filled."""
        return self.finished * self.displayed_steps // self.total

    def format(self) -> str:
        """Render the bar as a string, without the line control character."""
        chars = self.characters
        filled = self.filled_steps
        bar = chars.filled * filled + chars.empty * (self.displayed_steps - filled)
        text = f"{chars.left_delimiter}{bar}{chars.right_delimiter}"
        if self.print_percent:
            text += f" {self.finished} %"
        return text

    def print(self, stream: TextIO | None = None) -> None:
        """Draw the bar on a stream (stdout by default)."""
        out = sys.stdout if stream is None else stream
        if self.single_line:
            out.write("\r" + self.format())
        else:
            out.write(self.format() + "\n")
        out.flush()

    def __repr__(self) -> str:
        return (
            f"ProgressBar(displayed_steps={self.displayed_steps}, total={self.total}, "
            f"finished={self.finished})"
        )
