"""
Command Line Tokenizer
======================

Splits one raw console line into its argument tokens.

Rules
-----
- Runs of spaces and tabs separate tokens.
- A token that starts with an unescaped ``"`` is a quoted span. The
  span runs to the next ``"`` that is not preceded by a backslash, or
  to the end of the line when the quote is never closed.
- Escaped quotes inside a span are kept exactly as typed. Nothing is
  unescaped: ``say "a\\"b"`` gives ``['say', 'a\\"b']``.
- An unterminated quote is tolerated. The remainder of the line
  (without the opening quote) becomes the last token.

Examples
--------
    spawn cube 5 10 0     →  ['spawn', 'cube', '5', '10', '0']
    say "hello world"     →  ['say', 'hello world']
    say "abc              →  ['say', 'abc']
"""

from __future__ import annotations

WHITESPACE = " \t"
QUOTE = '"'
ESCAPE = "\\"

# Upper bound on tokens produced from a single line
MAX_TOKENS = 10000


def _skip_white(line: str, pos: int) -> int:
    while pos < len(line) and line[pos] in WHITESPACE:
        pos += 1
    return pos


def _parse_quoted(line: str, pos: int) -> tuple[str, int]:
    """Read a quoted span starting at the opening quote at ``pos``."""
    pos += 1
    start = pos
    while pos < len(line):
        if line[pos] == QUOTE and line[pos - 1] != ESCAPE:
            return line[start:pos], pos + 1
        pos += 1
    return line[start:], pos


def _parse_bare(line: str, pos: int) -> tuple[str, int]:
    start = pos
    while pos < len(line) and line[pos] not in WHITESPACE:
        pos += 1
    return line[start:pos], pos


def tokenize(line: str, max_tokens: int = MAX_TOKENS) -> list[str]:
    """Split ``line`` into tokens.

    Parameters
    ----------
    line : str
        The raw command line.
    max_tokens : int
        Tokenizing stops once this many tokens have been collected;
        whatever was collected so far is returned.

    Returns
    -------
    list[str]
        Tokens in input order. Empty for an empty or blank line.
    """
    tokens: list[str] = []
    pos = 0
    while pos < len(line) and len(tokens) < max_tokens:
        pos = _skip_white(line, pos)
        if pos == len(line):
            break

        if line[pos] == QUOTE and (pos == 0 or line[pos - 1] != ESCAPE):
            token, pos = _parse_quoted(line, pos)
        else:
            token, pos = _parse_bare(line, pos)
        tokens.append(token)
    return tokens
