# zones.py
"""
Markup regions the keyword scan must not look into.

A zone opens on one of a small, ordered set of delimiters and stays open
until its terminator is consumed. An opener whose terminator never shows up
later in the text is not a zone; it is scanned like any other characters.
"""
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

# order matters: first opener that matches at a position wins
SYMMETRIC_ZONES: List[Tuple[str, str]] = [
    ("[[", "]]"),    # wiki link
    ("((", "))"),    # block reference
    ("{{", "}}"),    # embed
    ("```", "```"),  # fenced code
]

IMAGE_OPEN = "!["


@dataclass(frozen=True)
class Scanning:
    pass


@dataclass(frozen=True)
class InZone:
    terminator: str


SCANNING = Scanning()
ZoneState = Union[Scanning, InZone]


class Lookahead:
    """
    Forward lookups over one text, so a scan stays linear however many
    openers it meets.
      - last occurrence of every terminator, computed once
      - next "]" cached; valid while callers move left to right
    """

    def __init__(self, text: str):
        self.text = text
        self._last = {closer: text.rfind(closer) for _, closer in SYMMETRIC_ZONES}
        self._last[")"] = text.rfind(")")
        self._bracket_from = len(text) + 1
        self._bracket = -1

    def has(self, marker: str, start: int) -> bool:
        """True if `marker` occurs at or after `start`."""
        return self._last[marker] >= start

    def next_bracket(self, start: int) -> int:
        if self._bracket_from <= start and (self._bracket == -1 or self._bracket >= start):
            return self._bracket
        self._bracket_from = start
        self._bracket = self.text.find("]", start)
        return self._bracket


def open_zone(text: str, i: int, look: Optional[Lookahead] = None) -> Optional[Tuple[InZone, int]]:
    """Zone starting at text[i] and the index just past its opener, or None."""
    if look is None:
        look = Lookahead(text)
    for opener, closer in SYMMETRIC_ZONES:
        if text.startswith(opener, i):
            after = i + len(opener)
            if look.has(closer, after):
                return InZone(closer), after

    if text.startswith(IMAGE_OPEN, i):
        # ![alt](url): alt text and url are hidden together, closed by ")"
        close_bracket = look.next_bracket(i + len(IMAGE_OPEN))
        if close_bracket != -1 and text[close_bracket + 1:close_bracket + 2] == "(":
            after = close_bracket + 2
            if look.has(")", after):
                return InZone(")"), after
    return None


def close_zone(state: InZone, text: str, i: int) -> Tuple[ZoneState, int]:
    """Consume one step inside a zone: the whole terminator or a single char."""
    if text.startswith(state.terminator, i):
        return SCANNING, i + len(state.terminator)
    return state, i + 1


def masked_spans(text: str) -> List[Tuple[int, int]]:
    """
    Half-open [start, end) spans hidden from keyword matching, openers and
    terminators included, in text order.
    """
    spans: List[Tuple[int, int]] = []
    state: ZoneState = SCANNING
    look = Lookahead(text)
    start = i = 0
    while i < len(text):
        if isinstance(state, InZone):
            state, i = close_zone(state, text, i)
            if isinstance(state, Scanning):
                spans.append((start, i))
            continue
        opened = open_zone(text, i, look)
        if opened:
            start = i
            state, i = opened
            continue
        i += 1
    return spans
