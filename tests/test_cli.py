import json
from pathlib import Path

import matplotlib
import pytest

matplotlib.use("Agg")

from scripts import pa_cli, run_batch


def test_preparse_verbosity_anywhere():
    argv = ["absence", "estimate", "7", "-v", "2", "--digits", "3"]
    assert pa_cli._preparse_global_flags(argv) == 2
    assert argv == ["absence", "estimate", "7", "--digits", "3"]

    argv = ["absence", "--verbosity=0", "curve", "7"]
    assert pa_cli._preparse_global_flags(argv) == 0
    assert argv == ["absence", "curve", "7"]

    assert pa_cli._preparse_global_flags(["absence", "estimate", "7"]) == 1


def test_estimate_prints_probability(capsys):
    pa_cli.main(["estimate", "11", "--digits", "2"])
    out = capsys.readouterr().out
    assert "P(absent)        : 0.99" in out
    assert "1.0000%" in out
    assert "expected wait    : 110 digits" in out


def test_estimate_letters_mode(capsys):
    pa_cli.main(["estimate", "Hi", "--letters", "--letter-base", "1", "--digits", "10"])
    out = capsys.readouterr().out
    assert "pattern          : 0809" in out


def test_estimate_rejects_bad_input():
    with pytest.raises(SystemExit) as exc:
        pa_cli.main(["estimate", "12x", "--digits", "10"])
    assert exc.value.code == 2
    with pytest.raises(SystemExit) as exc:
        pa_cli.main(["estimate", "12", "--digits", "-1"])
    assert exc.value.code == 2


def test_curve_writes_csv_and_figure(tmp_path: Path):
    out_csv = tmp_path / "csv"
    out_fig = tmp_path / "figs"
    pa_cli.main([
        "curve", "7", "--n-max", "100", "--points", "5",
        "--out-csv", str(out_csv), "--out-dir", str(out_fig), "--style", "acm",
    ])
    csv_path = out_csv / "absence_curve_7.csv"
    assert csv_path.exists()
    lines = csv_path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "pattern,m,n,p_absent,p_found"
    assert len(lines) == 1 + 5
    assert (out_fig / "absence_curve_7.png").exists()


def _batch_args(argv):
    return run_batch.build_parser().parse_args(argv)


def test_run_batch_cli_patterns(tmp_path: Path):
    args = _batch_args([
        "--pattern", "11",
        "--pattern", "12a",
        "--digits", "2",
        "--out-dir", str(tmp_path),
        "--run-tag", "unit",
        "--heartbeat", "0.01",
    ])
    results = run_batch.run_batch(args)

    assert len(results) == 2
    ok, bad = results
    assert ok["pattern"] == "11"
    assert ok["p_absent"] == pytest.approx(0.99)
    assert ok["expected_wait"] == pytest.approx(110.0)
    assert ok["error"] == ""
    assert bad["error"]
    assert "p_absent" not in bad

    run_dir = tmp_path / "unit"
    csv_text = (run_dir / "summary.csv").read_text(encoding="utf-8")
    assert csv_text.splitlines()[0].startswith("run_tag,name,query,pattern")
    first = json.loads((run_dir / "summary.jsonl").read_text(encoding="utf-8").splitlines()[0])
    assert first["query"] == "11"
    assert first["backend"] == "numpy"


def test_run_batch_json_config(tmp_path: Path):
    cfg = {
        "patterns": [{"query": "HELLO", "letters": True, "name": "hello"}, "314"],
        "digits": 1000,
        "letter_base": 1,
        "backend": "exact",
        "run_tag": "cfg",
        "out_dir": str(tmp_path),
    }
    cfg_path = tmp_path / "batch.json"
    cfg_path.write_text(json.dumps(cfg), encoding="utf-8")

    results = run_batch.run_batch(_batch_args(["--config", str(cfg_path)]))
    assert [r["pattern"] for r in results] == ["0805121215", "314"]
    assert results[0]["name"] == "hello"
    assert results[1]["backend"] == "exact"
    assert 0.0 < results[1]["p_absent"] < 1.0
    assert (tmp_path / "cfg" / "summary.csv").exists()


def test_run_batch_yaml_config(tmp_path: Path):
    pytest.importorskip("yaml")
    cfg_path = tmp_path / "batch.yaml"
    cfg_path.write_text(
        "patterns:\n  - '7'\n  - pattern: '11'\ndigits: '1e2'\nrun_tag: yml\nout_dir: " + str(tmp_path) + "\n",
        encoding="utf-8",
    )
    results = run_batch.run_batch(_batch_args(["--config", str(cfg_path)]))
    assert [r["n"] for r in results] == [100, 100]
    assert results[0]["p_absent"] == pytest.approx(0.9 ** 100)


def test_run_batch_requires_patterns(tmp_path: Path):
    with pytest.raises(ValueError):
        run_batch.run_batch(_batch_args(["--out-dir", str(tmp_path)]))


def test_estimate_rejects_unknown_device():
    with pytest.raises(SystemExit) as exc:
        pa_cli.main(["estimate", "12", "--digits", "10", "--backend", "torch", "--device", "bogus"])
    assert exc.value.code == 2


def test_estimate_prints_large_expected_wait(capsys):
    pa_cli.main(["estimate", "0704111114" * 4, "--digits", "100"])
    out = capsys.readouterr().out
    assert "expected wait    : 1e+40 digits" in out


def test_run_batch_records_bad_letter_base_per_entry(tmp_path: Path):
    cfg = {
        "patterns": ["11", {"query": "HI", "letters": True, "letter_base": 5}],
        "digits": 2,
        "run_tag": "badbase",
        "out_dir": str(tmp_path),
    }
    cfg_path = tmp_path / "batch.json"
    cfg_path.write_text(json.dumps(cfg), encoding="utf-8")

    results = run_batch.run_batch(_batch_args(["--config", str(cfg_path)]))
    assert len(results) == 2
    assert results[0]["p_absent"] == pytest.approx(0.99)
    assert "letter_base" in results[1]["error"]
    lines = (tmp_path / "badbase" / "summary.jsonl").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
