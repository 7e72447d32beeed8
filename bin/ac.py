#AHO CORASICK


# ac.py
from collections import deque
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Tuple

from zones import SCANNING, InZone, Lookahead, ZoneState, close_zone, open_zone

_LETTERS = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")


@dataclass(frozen=True)
class Match:
    keyword: str
    start: int
    end: int          # inclusive


def _is_letter_word(keyword: str) -> bool:
    return all(ch in _LETTERS for ch in keyword)


def _is_boundary(text: str, pos: int) -> bool:
    # outside the text, or anything that is not an ASCII letter
    return pos < 0 or pos >= len(text) or text[pos] not in _LETTERS


class Automaton:
    """
    Aho-Corasick automaton over a keyword dictionary.

    Nodes live in parallel arrays addressed by index, root = 0:
      goto[s]  char -> child index
      fail[s]  failure link (fail[0] == 0)
      out[s]   keywords ending at s, own first, inherited after
    Nothing is mutated once built, so one instance can serve any number of
    searches at the same time.
    """

    def __init__(self, keywords: Iterable[str]):
        self.keywords: Tuple[str, ...] = tuple(dict.fromkeys(k for k in keywords if k))
        goto: List[Dict[str, int]] = [dict()]
        out:  List[List[str]]      = [[]]
        for kw in self.keywords:
            self._insert(goto, out, kw)
        fail = self._link(goto, out)

        self.goto: Tuple[Dict[str, int], ...] = tuple(goto)
        self.fail: Tuple[int, ...]            = tuple(fail)
        self.out:  Tuple[Tuple[str, ...], ...] = tuple(tuple(o) for o in out)

    def __len__(self) -> int:
        return len(self.goto)

    @staticmethod
    def _insert(goto: List[Dict[str, int]], out: List[List[str]], keyword: str) -> None:
        s = 0
        for ch in keyword:
            if ch not in goto[s]:
                goto[s][ch] = len(goto)
                goto.append(dict())
                out.append([])
            s = goto[s][ch]
        out[s].append(keyword)

    @staticmethod
    def _link(goto: List[Dict[str, int]], out: List[List[str]]) -> List[int]:
        fail = [0] * len(goto)
        q = deque(goto[0].values())   # depth 1 fails to root
        while q:
            r = q.popleft()
            for ch, s in goto[r].items():
                q.append(s)
                f = fail[r]
                while f and ch not in goto[f]:
                    f = fail[f]
                fail[s] = goto[f].get(ch, 0)
                # BFS order: out[fail[s]] is already complete here
                out[s].extend(out[fail[s]])
        return fail

    def finditer(self, text: str, whole_word_only: bool = True) -> Iterator[Match]:
        goto, fail, out = self.goto, self.fail, self.out
        s = 0
        zone: ZoneState = SCANNING
        look = Lookahead(text)
        i, n = 0, len(text)
        while i < n:
            if isinstance(zone, InZone):
                zone, i = close_zone(zone, text, i)
                continue
            opened = open_zone(text, i, look)
            if opened:
                zone, i = opened
                continue

            ch = text[i]
            while s and ch not in goto[s]:
                s = fail[s]
            s = goto[s].get(ch, 0)
            for kw in out[s]:
                start = i - len(kw) + 1
                if (not whole_word_only or not _is_letter_word(kw)
                        or (_is_boundary(text, start - 1) and _is_boundary(text, i + 1))):
                    yield Match(kw, start, i)
            i += 1

    def search(self, text: str, whole_word_only: bool = True) -> List[Match]:
        return list(self.finditer(text, whole_word_only))
