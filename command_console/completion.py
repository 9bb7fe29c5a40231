"""
Tab Completion
==============

Prefix completion over command names and variable names.

    complete("sp")   {spawn}        → "spawn "   single match, ready for args
    complete("s")    {spawn, say}   → "s"        choices printed, nothing shared
    complete("wa")   {wait, waitload} → "wait"   extended to the shared prefix

Matching is case-insensitive. The typed prefix keeps the user's casing;
the appended part is taken from the first candidate.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional


def common_prefix_length(a: str, b: str) -> int:
    """Length of the longest case-insensitive common prefix of ``a`` and ``b``."""
    limit = min(len(a), len(b))
    for i in range(limit):
        if a[i].lower() != b[i].lower():
            return i
    return limit


class TabCompleter:
    """Completes a prefix against one or more name sources.

    Parameters
    ----------
    sources : iterable of callables
        Each returns the names it currently offers. They are consulted
        in order, and candidates keep that enumeration order.
    show : callable, optional
        Receives one line per candidate when several match.
    """

    def __init__(self, sources: Iterable[Callable[[], Iterable[str]]],
                 show: Optional[Callable[[str], None]] = None):
        self._sources = list(sources)
        self._show = show

    def candidates(self, prefix: str) -> list[str]:
        lowered = prefix.lower()
        return [name
                for source in self._sources
                for name in source()
                if name.lower().startswith(lowered)]

    def complete(self, prefix: str) -> str:
        matches = self.candidates(prefix)
        if not matches:
            return prefix

        lcp = len(matches[0])
        for current, following in zip(matches, matches[1:]):
            lcp = min(lcp, common_prefix_length(current, following))

        completed = prefix + matches[0][len(prefix):lcp]

        if len(matches) == 1:
            return completed + " "

        if self._show is not None:
            for match in matches:
                self._show(" " + match)
        return completed
