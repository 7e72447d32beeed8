#!/usr/bin/env python3
"""
Runner for the notescan pipeline.

Usage: python run.py --keywords keywords.csv --notes notes.csv
"""

import argparse
import subprocess
import sys
import shlex
import logging
from pathlib import Path

BIN = Path(__file__).resolve().parent / "bin"

def run(cmd_list):
    """Run a command (list form). Log and raise on failure."""
    nxt = " ".join(shlex.quote(str(p)) for p in cmd_list)
    logging.info("▶ %s", nxt)
    try:
        subprocess.run(cmd_list, check=True)
    except subprocess.CalledProcessError as e:
        logging.error("Command failed (exit %s): %s", e.returncode, nxt)
        raise

def ensure_path_exists(p: Path):
    if not p.exists():
        raise FileNotFoundError(f"Required file not found: {p}")

def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Run the keyword scan pipeline.")
    ap.add_argument("--keywords", default="keywords.csv", help="Keyword dictionary CSV")
    ap.add_argument("--notes", default="notes.csv", help="Notes CSV to scan")
    ap.add_argument("--python", default=sys.executable, help="Python executable to run scripts (defaults to current interpreter)")
    ap.add_argument("--workdir", default="work", help="Working directory")
    ap.add_argument("--outdir", default="out", help="Deliverables directory")
    ap.add_argument("--substring", action="store_true", help="Match alphabetic keywords inside words too")
    ap.add_argument("--longest-only", action="store_true", help="Keep only the longest non-overlapping matches per note")
    ap.add_argument("--no-split", action="store_true", help="Do not split keyword cells on ; or |")
    ap.add_argument("--clean", action="store_true", help="Remove and recreate work/out directories before running")
    ap.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    return ap.parse_args(argv)

def build_steps(args, work: Path, out: Path):
    py = args.python
    prepare = [py, str(BIN / "prepare_keywords.py"), "--in", str(args.keywords), "--out", str(work / "keywords.csv")]
    if args.no_split:
        prepare.append("--no-split")

    scan = [py, str(BIN / "scan_notes.py"),
            "--notes-in", str(args.notes),
            "--keywords-in", str(work / "keywords.csv"),
            "--notes-out", str(out / "notes_scanned.csv"),
            "--matches-out", str(out / "matches.csv")]
    if args.substring:
        scan.append("--substring")
    if args.longest_only:
        scan.append("--longest-only")
    if args.verbose:
        scan.append("--verbose")

    summarize = [py, str(BIN / "summarize.py"),
                 "--matches-in", str(out / "matches.csv"),
                 "--notes-in", str(out / "notes_scanned.csv"),
                 "--out-dir", str(out)]
    return [prepare, scan, summarize]

def main(argv=None):
    args = parse_args(argv)

    # logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")

    # Validate inputs early
    for p in (Path(args.keywords), Path(args.notes)):
        logging.debug("Checking input %s", p)
        ensure_path_exists(p)

    work = Path(args.workdir)
    out  = Path(args.outdir)

    if args.clean:
        import shutil
        for d in (work, out):
            if d.exists():
                logging.info("Cleaning directory: %s", d)
                shutil.rmtree(d)

    for d in (work, out):
        d.mkdir(parents=True, exist_ok=True)

    try:
        for cmd in build_steps(args, work, out):
            run(cmd)
    except Exception as exc:
        logging.exception("Pipeline failed: %s", exc)
        sys.exit(2)

    logging.info("✅ Done! Matches at %s, summary at %s", out / "matches.csv", out / "summary_keywords.md")

if __name__ == "__main__":
    main()
