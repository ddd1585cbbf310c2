"""A minimal command-line option lookup."""

from __future__ import annotations

import sys
from typing import Sequence


class InputParser:
    """Looks up ``-x value`` pairs in a list of arguments."""

    def __init__(self, argv: Sequence[str] | None = None) -> None:
        self.arguments = list(sys.argv[1:] if argv is None else argv)

    def get_option(self, option: str) -> str:
        """Return the argument after the first ``option``, or an empty string."""
        try:
            index = self.arguments.index(option)
        except ValueError:
            return ""
        if index + 1 < len(self.arguments):
            return self.arguments[index + 1]
        return ""

    def has_option(self, option: str) -> bool:
        """Tell whether ``option`` appears among the arguments."""
        return option in self.arguments