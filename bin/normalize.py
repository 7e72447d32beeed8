# normalize.py
from typing import List, Optional
import csv
import re
import pandas as pd
from pathlib import Path

# ---------- Column candidates ----------
KEYWORD_COLS  = ["KEYWORD", "KEYWORDS", "TERM", "TERMS", "NAME", "ALIAS"]
CATEGORY_COLS = ["CATEGORY", "TYPE", "GROUP", "TAG", "SOURCE"]
TEXT_COLS     = ["TEXT", "BODY", "CONTENT", "NOTE", "NOTES", "DESCRIPTION"]

# multi-valued keyword cells: "cat; kitten | feline"
VARIANT_SEP = r"[;|]+"

# ---------- IO ----------
_SEP_BY_SUFFIX = {".csv": ",", ".tsv": "\t"}
SNIFF_DELIMITERS = ",;\t|"

def sniff_delimiter(path: Path, *, encoding: Optional[str]=None) -> str:
    """
    Sniff the header line the way read_csv(sep=None) does, but only among
    real delimiters: a one-column header falls back to the extension's.
    """
    with open(path, encoding=encoding or "utf-8", newline="") as fh:
        header = fh.readline().rstrip("\r\n")
    try:
        return csv.Sniffer().sniff(header, delimiters=SNIFF_DELIMITERS).delimiter
    except csv.Error:
        return _SEP_BY_SUFFIX.get(Path(path).suffix.lower(), ",")

def load_csv_any(path: Path, *, delimiter: Optional[str]=None, encoding: Optional[str]=None) -> pd.DataFrame:
    """Sniff delimiter if not provided; cells stay strings so keywords like "007" survive."""
    if delimiter is None:
        delimiter = sniff_delimiter(path, encoding=encoding)
    return pd.read_csv(
        path,
        sep=delimiter,
        encoding=encoding or "utf-8",
        engine="python",
        dtype=str,
        keep_default_na=False,
    )

def read_any(path) -> pd.DataFrame:
    p = Path(path)
    if p.suffix.lower() == ".parquet":
        return pd.read_parquet(p)
    return load_csv_any(p)

def write_any(df: pd.DataFrame, path) -> None:
    p = Path(path); p.parent.mkdir(parents=True, exist_ok=True)
    if p.suffix.lower() == ".parquet":
        df.to_parquet(p, index=False)
    else:
        df.to_csv(p, index=False)

# ---------- Columns / headers ----------
def _header_key(col) -> str:
    return re.sub(r"[^\w\s]", "", str(col)).strip().upper().replace(" ", "_")

def normalize_headers(df: pd.DataFrame) -> pd.DataFrame:
    """Canonicalize headers: trim, uppercase, spaces->underscores, strip punctuation."""
    df = df.copy()
    df.columns = [_header_key(col) for col in df.columns]
    return df

def ensure_unique_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Disambiguate duplicate column names by suffixing _1, _2, ..."""
    df = df.copy()
    seen, new_cols = {}, []
    for col in df.columns:
        n = seen.get(col, -1) + 1
        seen[col] = n
        new_cols.append(f"{col}_{n}" if n else col)
    df.columns = new_cols
    return df

def pick_col(df: pd.DataFrame, candidates: List[str], *, must=False, label=""):
    """First column among candidate aliases (case/spacing tolerant), else None."""
    cmap = {_header_key(c): c for c in df.columns}
    for cand in candidates:
        hit = cmap.get(_header_key(cand))
        if hit is not None:
            return hit
    if must:
        raise KeyError(f"[pick_col] Missing required column for {label}: tried {candidates}")
    return None

# ---------- Keywords ----------
def split_variants(cell, sep: Optional[str] = VARIANT_SEP) -> List[str]:
    """Split a multi-valued cell into stripped, non-empty keywords. Case is kept."""
    if not isinstance(cell, str) or not cell:
        return []
    parts = re.split(sep, cell) if sep else [cell]
    return [p.strip() for p in parts if p.strip()]

def load_keywords(path: Path, *, keyword_candidates: Optional[List[str]] = None,
                  category_candidates: Optional[List[str]] = None,
                  sep: Optional[str] = VARIANT_SEP) -> pd.DataFrame:
    """
    Load a keyword dictionary into a two-column frame KEYWORD, CATEGORY.
    - duplicate keywords keep their first row (and category)
    - empty cells are dropped
    """
    df = ensure_unique_columns(normalize_headers(load_csv_any(path)))
    kw_col  = pick_col(df, keyword_candidates or KEYWORD_COLS, must=True, label="keyword")
    cat_col = pick_col(df, category_candidates or CATEGORY_COLS, must=False)

    rows = {}
    for _, r in df.iterrows():
        cat = str(r[cat_col]).strip() if cat_col else ""
        for kw in split_variants(r[kw_col], sep):
            rows.setdefault(kw, cat)
    return pd.DataFrame({"KEYWORD": list(rows.keys()), "CATEGORY": list(rows.values())})
