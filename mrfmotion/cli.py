"""Command-line entrypoints for mrfmotion."""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from .bench import run_bench, write_bench
from .config import load_config, resolve_settings
from .engine import DimensionMismatch, ThresholdEngine
from .utils import changed_fraction, load_frame_pair, save_mask
from .version import get_version_string

METHODS = ("abs", "fixed", "mrf1", "mrf2")
OUTPUT_NAMES = {
    "abs": "abs_difference.png",
    "fixed": "fixed.png",
    "mrf1": "mrf1.png",
    "mrf2": "mrf2.png",
}
TITLES = {
    "abs": "Absolute difference",
    "fixed": "Fixed threshold",
    "mrf1": "Variable threshold - MRF1",
    "mrf2": "Variable threshold - MRF2",
}


def _parse_methods(value: str) -> list[str]:
    methods = [m.strip() for m in value.split(",") if m.strip()]
    if "all" in methods:
        return list(METHODS)
    unknown = [m for m in methods if m not in METHODS]
    if unknown or not methods:
        raise argparse.ArgumentTypeError(
            f"unknown method(s) {', '.join(unknown) or '<empty>'}; choose from {', '.join(METHODS)} or all"
        )
    return methods


def _parse_size(value: str) -> tuple[int, int]:
    try:
        h, w = (int(v) for v in value.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError("size must look like HxW, e.g. 288x352") from None
    if h <= 0 or w <= 0:
        raise argparse.ArgumentTypeError("size must be positive")
    return h, w


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _add_param_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", type=str, default=None, help="YAML file with theta/sigma_s/T/iterations")
    p.add_argument("--theta", type=float, default=None, help="Prior odds factor")
    p.add_argument("--sigma-s", type=float, default=None, help="Static-pixel noise standard deviation")
    p.add_argument("--temperature", "-T", type=float, default=None, help="MRF temperature T")
    p.add_argument("--iterations", type=int, default=None, help="Adaptive threshold rounds")


def run_detect(args: argparse.Namespace) -> dict:
    cfg = load_config(args.config) if args.config else {}
    params, iterations = resolve_settings(
        cfg, theta=args.theta, sigma_s=args.sigma_s, T=args.temperature, iterations=args.iterations
    )
    engine = ThresholdEngine.from_parameters(params)
    img1, img2 = load_frame_pair(args.frame1, args.frame2)

    operations = {
        "abs": lambda: engine.abs_difference(img1, img2),
        "fixed": lambda: engine.fixed_threshold(img1, img2),
        "mrf1": lambda: engine.variable_threshold1(img1, img2, iterations),
        "mrf2": lambda: engine.variable_threshold2(img1, img2, iterations),
    }
    # compute everything before touching the output directory
    results = {method: operations[method]() for method in args.methods}

    out_dir = Path(args.output)
    out_dir.mkdir(parents=True, exist_ok=True)
    for method, result in results.items():
        save_mask(result, str(out_dir / OUTPUT_NAMES[method]))
        if method == "abs":
            print(f"{TITLES[method]}: max={int(result.max(initial=0))}, mean={float(result.mean()):.3f}")
        else:
            print(f"{TITLES[method]}: {changed_fraction(result) * 100:.2f}% moving")

    if args.plot or args.show:
        from .viz import render_results

        plot_path = str(out_dir / "results.png") if args.plot else None
        render_results({TITLES[m]: r for m, r in results.items()}, output=plot_path, show=args.show)
    return results


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="MRF motion detection between two grayscale frames")
    parser.add_argument("--version", action="version", version=f"mrfmotion {get_version_string()}")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for INFO, -vv for DEBUG logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_det = sub.add_parser("detect", help="Detect motion between two frames")
    p_det.add_argument("frame1", help="Frame at time t_k")
    p_det.add_argument("frame2", help="Frame at time t_k+1")
    p_det.add_argument("output", help="Output directory for masks")
    p_det.add_argument(
        "--methods", type=_parse_methods, default=list(METHODS), help="Comma list of abs,fixed,mrf1,mrf2 or all"
    )
    p_det.add_argument("--plot", action="store_true", help="Also write results.png with all outputs")
    p_det.add_argument("--show", action="store_true", help="Display the outputs and wait until closed")
    _add_param_args(p_det)

    p_bench = sub.add_parser("bench", help="Time the detector on a synthetic frame pair")
    p_bench.add_argument("--size", type=_parse_size, default=(288, 352), help="Frame size HxW")
    p_bench.add_argument("--seed", type=int, default=0)
    p_bench.add_argument("--out", type=Path, default=None, help="Write JSON results to this file")
    _add_param_args(p_bench)

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.cmd == "detect":
        try:
            run_detect(args)
        except DimensionMismatch as exc:
            p_det.error(str(exc))
    elif args.cmd == "bench":
        cfg = load_config(args.config) if args.config else {}
        params, iterations = resolve_settings(
            cfg, theta=args.theta, sigma_s=args.sigma_s, T=args.temperature, iterations=args.iterations
        )
        h, w = args.size
        res = run_bench(ThresholdEngine.from_parameters(params), h, w, iterations, args.seed)
        if args.out is not None:
            write_bench(res, args.out)
        print(json.dumps(res, indent=2))
    else:
        parser.error("Unknown command")


if __name__ == "__main__":
    main()
