"""
Batch runner: evaluate many patterns against one digit budget and persist
the results.

Features
- Accept JSON/YAML config files plus CLI overrides.
- Reuse absence.logging_setup for consistent logs.
- Progress reporting via tqdm when available (fallback: heartbeat logs).
- Persist results to CSV + JSONL under <out-dir>/<run-tag>/.
"""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
import time
from typing import Any, Dict, Iterable, List, Optional

from absence import config as absence_config
from absence import logging_setup
from absence.encoding import normalize_query
from absence.estimator import expected_waiting_time, not_found_probability
from absence.utils_io import ensure_dir, make_run_tag, slugify, write_csv, write_jsonl

try:  # optional YAML
    import yaml
except Exception:  # pragma: no cover - optional dependency
    yaml = None

try:  # optional progress bar
    from tqdm import tqdm
except Exception:  # pragma: no cover - optional dependency
    tqdm = None


LOGGER = logging.getLogger("run_batch")
DEFAULT_OUT_ROOT = absence_config.RESULTS_ROOT / "batch"

_CSV_FIELDS = [
    "run_tag", "name", "query", "pattern", "m", "n", "backend",
    "p_absent", "p_found", "percent_found", "expected_wait", "error",
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_config(path: Optional[str]) -> Dict[str, Any]:
    if path is None:
        return {}
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    suffix = Path(path).suffix.lower()
    if suffix in {".yaml", ".yml"}:
        if yaml is None:
            raise RuntimeError("PyYAML not installed; cannot parse YAML config")
        return yaml.safe_load(text) or {}
    if suffix == ".json":
        return json.loads(text or "{}")
    # fallback: try YAML then JSON
    if yaml is not None:
        try:
            return yaml.safe_load(text) or {}
        except yaml.YAMLError:
            pass
    return json.loads(text or "{}")


def _heartbeat_logger(iteration: int, total: int, last: float, interval: float) -> float:
    now = time.time()
    if now - last >= interval:
        LOGGER.info("progress %s/%s (%.1f%%)", iteration, total, 100 * iteration / max(1, total))
        return now
    return last


def _pattern_specs(args: argparse.Namespace, cfg: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Merge ``--pattern`` flags and config ``patterns[]`` (plain strings or dicts)."""
    specs: List[Dict[str, Any]] = []
    for p in args.pattern or []:
        specs.append({"query": p})
    for entry in cfg.get("patterns") or []:
        if isinstance(entry, dict):
            if "query" not in entry and "pattern" in entry:
                entry = {**entry, "query": entry["pattern"]}
            specs.append(dict(entry))
        else:
            specs.append({"query": str(entry)})
    if not specs:
        raise ValueError("no patterns provided; use --pattern or config patterns[]")
    return specs


def _evaluate(spec: Dict[str, Any], n: int, backend: str, device: str,
              letters: bool, letter_base: int) -> Dict[str, Any]:
    query = str(spec["query"])
    digits = normalize_query(
        query,
        letters=bool(spec.get("letters", letters)),
        letter_base=spec.get("letter_base", letter_base),
    )
    p = not_found_probability(digits, n, backend=backend, device=device)
    return {
        "pattern": digits,
        "m": len(digits),
        "p_absent": p,
        "p_found": 1.0 - p,
        "percent_found": 100.0 * (1.0 - p),
        "expected_wait": expected_waiting_time(digits),
        "error": "",
    }


def run_batch(args: argparse.Namespace) -> List[Dict[str, Any]]:
    cfg = _load_config(args.config)
    logging_setup.setup_logging(level=args.log_level or cfg.get("log_level", "INFO"))

    specs = _pattern_specs(args, cfg)
    n = args.digits if args.digits is not None else cfg.get("digits", absence_config.DEFAULT_DIGITS)
    if not isinstance(n, int):
        n = int(float(n))
    backend = absence_config.normalize_backend(args.backend or cfg.get("backend"))
    device = args.device or cfg.get("device") or absence_config.DEFAULT_DEVICE
    letters = bool(args.letters) if args.letters is not None else bool(cfg.get("letters", False))
    letter_base = absence_config.normalize_letter_base(
        args.letter_base if args.letter_base is not None else cfg.get("letter_base"))
    out_dir = Path(args.out_dir or cfg.get("out_dir") or DEFAULT_OUT_ROOT)

    run_tag = args.run_tag or cfg.get("run_tag") or make_run_tag("batch", n)
    run_dir = ensure_dir(out_dir / slugify(run_tag))
    LOGGER.info("batch start | n=%s backend=%s patterns=%s", n, backend, len(specs))

    results: List[Dict[str, Any]] = []
    iterator: Iterable[Dict[str, Any]]
    if tqdm is not None:
        iterator = tqdm(specs, desc="patterns", unit="pattern")
    else:
        iterator = specs
    last_log = time.time()
    heartbeat = float(args.heartbeat or cfg.get("heartbeat", 10.0))

    for idx, spec in enumerate(iterator, start=1):
        last_log = _heartbeat_logger(idx, len(specs), last_log, heartbeat) if tqdm is None else last_log
        label = spec.get("name") or spec.get("label") or f"pattern_{idx}"
        base_row: Dict[str, Any] = {
            "run_tag": run_tag,
            "name": label,
            "query": str(spec["query"]),
            "n": n,
            "backend": backend,
        }
        try:
            info = _evaluate(spec, n, backend, device, letters, letter_base)
        except ValueError as exc:  # InvalidPattern / InvalidExponent 也是 ValueError
            LOGGER.warning("skipping %s: %s", label, exc)
            info = {"error": str(exc)}
        results.append({**base_row, **info})

    # persist outputs
    csv_path = run_dir / "summary.csv"
    jsonl_path = run_dir / "summary.jsonl"
    if args.save_csv or cfg.get("save_csv", True):
        write_csv(csv_path, results, fieldnames=_CSV_FIELDS)
    if args.save_jsonl or cfg.get("save_jsonl", True):
        write_jsonl(jsonl_path, results)

    LOGGER.info("batch finished -> %s entries (csv=%s, jsonl=%s)", len(results), csv_path, jsonl_path)
    return results


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="pattern-absence batch runner")
    parser.add_argument("--config", type=str, help="JSON/YAML config path", default=None)
    parser.add_argument("--pattern", action="append", help="pattern (digits, or letters with --letters); can be repeated", default=None)
    parser.add_argument("--digits", type=int, help="digit count N", default=None)
    parser.add_argument("--backend", type=str, help="loop|numpy|torch|exact", default=None)
    parser.add_argument("--device", type=str, help="torch device for the torch backend", default=None)
    parser.add_argument("--letters", action="store_true", help="encode letters as two-digit numbers", default=None)
    parser.add_argument("--letter-base", type=int, dest="letter_base", help="code of letter A (0 or 1)", default=None)
    parser.add_argument("--run-tag", type=str, help="run tag for output dir", default=None)
    parser.add_argument("--out-dir", type=str, help="output root directory", default=None)
    parser.add_argument("--heartbeat", type=float, help="seconds between progress heartbeats", default=None)
    parser.add_argument("--log-level", type=str, help="logging level (INFO/DEBUG)", default=None)
    parser.add_argument("--save-csv", action="store_true", help="force write CSV summary", default=None)
    parser.add_argument("--save-jsonl", action="store_true", help="force write JSONL summary", default=None)
    return parser


def main(argv: Optional[Iterable[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        run_batch(args)
    except Exception as exc:  # pragma: no cover - CLI guard
        LOGGER.error("batch failed: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
