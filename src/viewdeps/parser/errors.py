"""Parser error handling for embedded code.

Provides ParseError with source context. tree-sitter recovers from syntax
errors on its own, so ParseError is never raised out of ``Parser.parse()``;
each ERROR or MISSING node it reports is kept on ``Parser.errors``.
"""

from __future__ import annotations

from viewdeps.environment.exceptions import ErrorCode


class ParseError(Exception):
    """Parser error with source context.

    Displays errors with a source snippet and a pointer, e.g.::

        Parse Error: Missing ')'
          --> messages/_message:3:18
           |
         3 | render("form", a: 1
           |                   ^

    """

    def __init__(
        self,
        message: str,
        lineno: int,
        col_offset: int,
        source: str | None = None,
        filename: str | None = None,
        code: ErrorCode = ErrorCode.SYNTAX_ERROR,
    ):
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.source = source
        self.filename = filename
        self.code = code
        super().__init__(self._format())

    def _format(self) -> str:
        location = self.filename or "<template>"
        header = (
            f"Parse Error: {self.message}\n"
            f"  --> {location}:{self.lineno}:{self.col_offset}"
        )

        if self.source:
            lines = self.source.splitlines()
            if 0 < self.lineno <= len(lines):
                error_line = lines[self.lineno - 1]
                pointer = " " * self.col_offset + "^"
                return f"""
{header}
   |
{self.lineno:>3} | {error_line}
   | {pointer}
[{self.code.value}]"""

        return f"\n{header}\n[{self.code.value}]"
