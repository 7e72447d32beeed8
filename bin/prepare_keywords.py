#!/usr/bin/env python3
import argparse
from pathlib import Path
from normalize import KEYWORD_COLS, CATEGORY_COLS, VARIANT_SEP, load_keywords, write_any

def main(argv=None):
    ap = argparse.ArgumentParser(description="Clean a keyword dictionary: split multi-valued cells, drop empties, dedupe.")
    ap.add_argument("--in", dest="inp", required=True)
    ap.add_argument("--out", required=True)
    ap.add_argument("--keyword-candidates", nargs="+", default=KEYWORD_COLS)
    ap.add_argument("--category-candidates", nargs="+", default=CATEGORY_COLS)
    ap.add_argument("--no-split", action="store_true", help="Treat every cell as one keyword (no ; or | splitting)")
    args = ap.parse_args(argv)

    kw = load_keywords(
        Path(args.inp),
        keyword_candidates=args.keyword_candidates,
        category_candidates=args.category_candidates,
        sep=None if args.no_split else VARIANT_SEP,
    )
    write_any(kw, args.out)
    print(f"✅ Keywords prepared -> {args.out} | keywords={len(kw):,}")

if __name__ == "__main__":
    main()
