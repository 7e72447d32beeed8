import sys

import pandas as pd
import pytest

import run


def test_missing_input_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        run.main(["--keywords", str(tmp_path / "nope.csv"), "--notes", str(tmp_path / "nope2.csv")])


def test_build_steps_flags(tmp_path):
    args = run.parse_args(["--substring", "--longest-only", "--no-split"])
    prepare, scan, summarize = run.build_steps(args, tmp_path / "work", tmp_path / "out")
    assert prepare[1].endswith("prepare_keywords.py") and "--no-split" in prepare
    assert "--substring" in scan and "--longest-only" in scan
    assert summarize[-2:] == ["--out-dir", str(tmp_path / "out")]


def test_failed_step_exits_2(tmp_path):
    kw = tmp_path / "kw.csv"; kw.write_text("foo\nx\n", encoding="utf-8")
    notes = tmp_path / "notes.csv"; notes.write_text("text\nx\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        run.main(["--keywords", str(kw), "--notes", str(notes),
                  "--workdir", str(tmp_path / "work"), "--outdir", str(tmp_path / "out")])
    assert exc.value.code == 2


def test_full_pipeline(tmp_path):
    kw = tmp_path / "kw.csv"
    kw.write_text("term,type\nhe;she,pronoun\ncat,pet\n", encoding="utf-8")
    notes = tmp_path / "notes.csv"
    pd.DataFrame({"note": ["she has a cat", "see [[cat]]", "```he```"]}).to_csv(notes, index=False)
    out = tmp_path / "out"
    run.main(["--keywords", str(kw), "--notes", str(notes), "--python", sys.executable,
              "--workdir", str(tmp_path / "work"), "--outdir", str(out), "--clean"])

    m = pd.read_csv(out / "matches.csv", dtype=str, keep_default_na=False)
    assert m["KEYWORD"].tolist() == ["she", "cat"]
    assert m["CATEGORY"].tolist() == ["pronoun", "pet"]
    assert (out / "summary_keywords.md").exists()
