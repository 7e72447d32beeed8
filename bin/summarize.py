#!/usr/bin/env python3
import argparse
from pathlib import Path
import pandas as pd
from normalize import read_any

SUMMARY_COLS = ["keyword", "category", "hits", "rows"]

def keyword_summary(matches: pd.DataFrame) -> pd.DataFrame:
    """Hits and distinct notes per keyword, most frequent first."""
    if matches.empty:
        return pd.DataFrame(columns=SUMMARY_COLS)
    m = matches.copy()
    m["CATEGORY"] = m["CATEGORY"].fillna("").astype(str)
    g = m.groupby(["KEYWORD", "CATEGORY"], sort=False)
    summary = pd.DataFrame({
        "hits": g.size(),
        "rows": g["_ROW_ID"].nunique(),
    }).reset_index().rename(columns={"KEYWORD": "keyword", "CATEGORY": "category"})
    summary = summary.sort_values(["hits", "keyword"], ascending=[False, True], kind="stable")
    return summary[SUMMARY_COLS].reset_index(drop=True)

def render_markdown(summary: pd.DataFrame, *, total_rows: int, matched_rows: int) -> str:
    try:
        tbl_md = summary.to_markdown(index=False)
    except ImportError:
        # to_markdown needs tabulate
        tbl_md = summary.to_string(index=False)

    pct = round(matched_rows / total_rows * 100.0, 2) if total_rows else 0.0
    return "\n".join([
        "# Keyword Scan Summary",
        "",
        f"- Notes scanned: **{total_rows:,}**",
        f"- Notes with at least one match: **{matched_rows:,}** ({pct}%)",
        f"- Distinct keywords hit: **{len(summary):,}**",
        "",
        "## Keywords",
        tbl_md,
    ])

def main(argv=None):
    ap = argparse.ArgumentParser(description="Per-keyword hit counts for a scan run.")
    ap.add_argument("--matches-in", required=True)
    ap.add_argument("--notes-in", required=True, help="Notes table enriched by scan_notes.py")
    ap.add_argument("--out-dir", required=True)
    args = ap.parse_args(argv)

    out_dir = Path(args.out_dir); out_dir.mkdir(parents=True, exist_ok=True)
    matches = read_any(args.matches_in)
    notes = read_any(args.notes_in)
    if not matches.empty:
        matches["_ROW_ID"] = pd.to_numeric(matches["_ROW_ID"])

    summary = keyword_summary(matches)
    has_match = pd.to_numeric(notes.get("_KW_HAS_MATCH", pd.Series(dtype=int)), errors="coerce").fillna(0)

    summary.to_csv(out_dir / "summary_keywords.csv", index=False)
    (out_dir / "summary_keywords.md").write_text(
        render_markdown(summary, total_rows=len(notes), matched_rows=int(has_match.sum())),
        encoding="utf-8",
    )

    print("\nSummary:")
    print(summary.to_string(index=False))
    print(f"✅ Summary -> {out_dir/'summary_keywords.csv'} | {out_dir/'summary_keywords.md'}")

if __name__ == "__main__":
    main()
