# -*- coding: utf-8 -*-
"""Command-line front end for the pattern-absence estimator.
Commands: estimate, curve.
"""
from __future__ import annotations
import sys, argparse, logging, os
from pathlib import Path

# Ensure in-repo execution works without PYTHONPATH tweaks.
_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from absence.bootstrap import ensure_repo_on_path

ROOT = ensure_repo_on_path()

from absence import config as _config


def _setup_logging(verbosity: int = 1):
    level = logging.WARNING if verbosity <= 0 else (logging.INFO if verbosity == 1 else logging.DEBUG)
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

# --verbosity/-v may appear anywhere, including after the subcommand
def _preparse_global_flags(argv: list[str]) -> int:
    """Pull --verbosity/-v out of argv (in place) and return the level clamped to 0..2."""
    v = None
    i = 1
    while i < len(argv):
        tok = argv[i]
        if tok.startswith("--verbosity="):
            try:
                v = int(tok.split("=", 1)[1])
            except ValueError:
                v = 1
            argv.pop(i)
            continue
        if tok in ("--verbosity", "-v"):
            argv.pop(i)
            if i < len(argv):
                try:
                    v = int(argv[i])
                    argv.pop(i)
                except ValueError:
                    v = 1
            else:
                v = 1
            continue
        i += 1
    if v is None:
        v = 1
    return max(0, min(2, v))


def _fmt_wait(wait: int) -> str:
    # 超过 float 范围的整数不能走 "g" 格式
    if wait < 10 ** 300:
        return f"{wait:.6g}"
    return f"~1e{len(str(wait)) - 1}"


def _resolve_pattern(args) -> str:
    from absence.encoding import normalize_query
    return normalize_query(args.pattern, letters=args.letters, letter_base=args.letter_base)


# ---------------- commands ----------------
def cmd_estimate(args):
    from absence.estimator import not_found_probability, expected_waiting_time
    try:
        digits = _resolve_pattern(args)
        p = not_found_probability(digits, args.digits, backend=args.backend, device=args.device)
        wait = expected_waiting_time(digits)
    except ValueError as exc:
        logging.error(f"[estimate] {exc}"); sys.exit(2)
    logging.info(f"[estimate] pattern={digits} m={len(digits)} N={args.digits} backend={args.backend}")
    print(f"pattern          : {digits}")
    print(f"digits searched  : {args.digits}")
    print(f"P(absent)        : {p:.10g}")
    print(f"chance of finding: {(1.0 - p) * 100:.4f}%")
    print(f"expected wait    : {_fmt_wait(wait)} digits")


def cmd_curve(args):
    from absence.estimator import absence_curve, log_grid
    from absence.utils_io import ensure_dir, write_csv, slugify
    from absence.viz import plot_absence_curve
    try:
        digits = _resolve_pattern(args)
        grid = log_grid(args.n_max, args.points)
        rows = absence_curve(digits, grid, backend=args.backend, device=args.device)
    except ValueError as exc:
        logging.error(f"[curve] {exc}"); sys.exit(2)
    out_csv = ensure_dir(args.out_csv)
    csv_path = write_csv(out_csv / f"absence_curve_{slugify(digits)[:32]}.csv", rows,
                         fieldnames=["pattern", "m", "n", "p_absent", "p_found"])
    print("[curve] CSV:", os.path.abspath(csv_path))
    if not args.no_plot:
        try:
            fig = plot_absence_curve(rows, out_dir=str(ensure_dir(args.out_dir)), style=args.style,
                                     digits_mark=args.n_max, fname=f"absence_curve_{slugify(digits)[:32]}.png")
            print("[curve] fig:", os.path.abspath(fig))
        except Exception:
            logging.exception("[curve] plot failed"); sys.exit(1)


def _add_pattern_args(sp):
    sp.add_argument("pattern", help="digit string, or a phrase together with --letters")
    sp.add_argument("--letters", action="store_true", help="encode letters as two-digit numbers first")
    sp.add_argument("--letter-base", type=int, default=_config.LETTER_BASE, choices=[0, 1],
                    help="code of letter A (0 -> A=00, 1 -> A=01)")
    sp.add_argument("--backend", default=_config.DEFAULT_BACKEND, choices=["numpy", "loop", "torch", "exact"])
    sp.add_argument("--device", default=_config.DEFAULT_DEVICE, help="torch device for --backend torch")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="pattern-absence CLI",
                                     formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # --- estimate ---
    sp = subparsers.add_parser("estimate", help="probability that a pattern is absent from N random digits")
    _add_pattern_args(sp)
    sp.add_argument("--digits", type=int, default=_config.DEFAULT_DIGITS, help="digit count N")
    sp.set_defaults(func=cmd_estimate)

    # --- curve ---
    sp = subparsers.add_parser("curve", help="absence probability over a log-spaced grid of N (CSV + PNG)")
    _add_pattern_args(sp)
    sp.add_argument("--n-max", type=int, default=_config.DEFAULT_DIGITS)
    sp.add_argument("--points", type=int, default=_config.CURVE_POINTS)
    sp.add_argument("--out-csv", default=str(_config.OUT_CSV_DEFAULT))
    sp.add_argument("--out-dir", default=str(_config.OUT_FIG_DEFAULT))
    sp.add_argument("--style", default=_config.DEFAULT_STYLE, choices=["default", "ieee", "acm", "nature"])
    sp.add_argument("--no-plot", action="store_true")
    sp.set_defaults(func=cmd_curve)
    return parser


def main(argv: list[str] | None = None):
    argv = list(sys.argv if argv is None else ["absence", *argv])
    verbosity = _preparse_global_flags(argv)
    _setup_logging(verbosity)
    args = build_parser().parse_args(argv[1:])
    args.func(args)

if __name__ == "__main__":
    main()
