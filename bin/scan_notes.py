#!/usr/bin/env python3
# scan_notes.py
import argparse
import logging
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
from ac import Automaton, Match
from normalize import (
    TEXT_COLS, ensure_unique_columns, normalize_headers, pick_col, read_any, write_any
)
from zones import masked_spans

log = logging.getLogger(__name__)

MATCH_COLS = ["_ROW_ID", "KEYWORD", "CATEGORY", "START", "END"]

# ---- helpers -----------------------------------------------------------------
def _longest_non_overlapping(hits: List[Match]) -> List[Match]:
    # END is inclusive
    hits = sorted(hits, key=lambda m: (m.start, -(m.end - m.start)))
    out, cur_end = [], -1
    for m in hits:
        if m.start > cur_end:
            out.append(m)
            cur_end = m.end
    return out

def _as_text(v) -> str:
    return v if isinstance(v, str) else ""

def load_dictionary(path: Path) -> Dict[str, str]:
    """keyword -> category, in file order."""
    kw = ensure_unique_columns(normalize_headers(read_any(path)))
    kw_col  = pick_col(kw, ["KEYWORD"], must=True, label="keyword")
    cat_col = pick_col(kw, ["CATEGORY"], must=False)
    cats = kw[cat_col].map(_as_text) if cat_col else [""] * len(kw)
    out: Dict[str, str] = {}
    for k, c in zip(kw[kw_col].map(_as_text), cats):
        if k:
            out.setdefault(k, c)
    return out

# ---- scanning ----------------------------------------------------------------
def scan_frame(notes: pd.DataFrame, automaton: Automaton, text_col: str, *,
               categories: Optional[Dict[str, str]] = None,
               whole_word_only: bool = True,
               longest_only: bool = False) -> pd.DataFrame:
    """One row per match; _ROW_ID is the note's position in `notes`."""
    categories = categories or {}
    rows = []
    for row_id, text in enumerate(notes[text_col].map(_as_text)):
        hits = automaton.search(text, whole_word_only=whole_word_only)
        if longest_only:
            hits = _longest_non_overlapping(hits)
        for m in hits:
            rows.append({
                "_ROW_ID": row_id,
                "KEYWORD": m.keyword,
                "CATEGORY": categories.get(m.keyword, ""),
                "START": m.start,
                "END": m.end,
            })
    return pd.DataFrame(rows, columns=MATCH_COLS)

def add_match_features(notes: pd.DataFrame, matches: pd.DataFrame, text_col: str) -> pd.DataFrame:
    """
    Per-note columns:
      - _KW_HAS_MATCH     0/1
      - _KW_COUNT         number of matches
      - _KW_TERMS         unique keywords, "|"-joined in discovery order
      - _KW_MASKED_CHARS  characters hidden inside markup zones
    """
    out = notes.reset_index(drop=True).copy()
    ids = pd.RangeIndex(len(out))
    if matches.empty:
        out["_KW_COUNT"] = 0
        out["_KW_TERMS"] = ""
    else:
        grouped = matches.groupby("_ROW_ID", sort=False)["KEYWORD"]
        out["_KW_COUNT"] = grouped.size().reindex(ids, fill_value=0).astype(int).to_numpy()
        terms = grouped.agg(lambda s: "|".join(dict.fromkeys(s)))
        out["_KW_TERMS"] = terms.reindex(ids, fill_value="").to_numpy()
    out["_KW_HAS_MATCH"] = (out["_KW_COUNT"] > 0).astype(int)
    out["_KW_MASKED_CHARS"] = [
        sum(e - s for s, e in masked_spans(t)) for t in out[text_col].map(_as_text)
    ]
    return out

def main(argv=None):
    ap = argparse.ArgumentParser(description="Scan a notes table for dictionary keywords, skipping markup zones.")
    ap.add_argument("--notes-in", required=True)
    ap.add_argument("--keywords-in", required=True, help="Prepared keyword table (KEYWORD[,CATEGORY])")
    ap.add_argument("--notes-out", required=True)
    ap.add_argument("--matches-out", required=True)
    ap.add_argument("--text-candidates", nargs="*", default=TEXT_COLS)
    ap.add_argument("--substring", action="store_true", help="Disable whole-word filtering for alphabetic keywords")
    ap.add_argument("--longest-only", action="store_true", help="Keep only the longest non-overlapping matches per note")
    ap.add_argument("--verbose", "-v", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s %(levelname)s %(message)s")

    notes = ensure_unique_columns(normalize_headers(read_any(args.notes_in)))
    text_col = pick_col(notes, args.text_candidates, must=True, label="note text")

    categories = load_dictionary(Path(args.keywords_in))
    automaton = Automaton(categories)
    log.debug("automaton: %d keywords, %d nodes", len(automaton.keywords), len(automaton))

    matches = scan_frame(notes, automaton, text_col,
                         categories=categories,
                         whole_word_only=not args.substring,
                         longest_only=args.longest_only)
    out = add_match_features(notes, matches, text_col)

    write_any(matches, args.matches_out)
    write_any(out, args.notes_out)
    print(f"✅ Notes scanned -> {args.notes_out} | rows={len(out):,} matches={len(matches):,} "
          f"rows_with_match={int(out['_KW_HAS_MATCH'].sum()):,}")

if __name__ == "__main__":
    main()
