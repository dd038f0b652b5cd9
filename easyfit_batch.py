"""
Batch fitting script for EasyFit.

Usage:
    python easyfit_batch.py "data/*.txt" --model polynomial --degree 3 \
        --lower a=0,0,0 --nbest 5 --seed 42

Notes:
- Preprocessing: optional cropping (--x_min/--x_max).
- Models:
    linear:      y = a x + b
    quadratic:   y = a x^2 + b x + c
    cubic:       y = a x^3 + b x^2 + c x + d
    polynomial:  --degree n, y = sum(a[i] x^i) + d
    exponential: --terms n, y = sum(a[i] exp(b[i] x)) + c
- Bounds: --lower/--upper take NAME=V for scalars and NAME=V1,V2,... for vector
  parameters, and may be repeated. --constant holds the model constant fixed.
- Outputs: for each file, writes <base>_fit.txt and <base>_fitdata.txt alongside the input file.
"""

import argparse
import glob
import logging
import os
import sys

import numpy as np

from easyfit.data_import import load_data_file
from easyfit.data_preprocessing import crop_roi
from easyfit.fitting import CurveFitter, Options
from easyfit.fitting.statistics import format_statistics
from easyfit.utils.logger import log_error, log_info, setup_logger


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Batch curve fitting")
    p.add_argument("pattern", help="Glob pattern for data files, e.g. 'data/*.txt'")

    # Model
    p.add_argument("--model", default="linear", choices=["linear", "quadratic", "cubic", "polynomial", "exponential"], help="Model to fit")
    p.add_argument("--degree", type=int, default=1, help="Polynomial degree")
    p.add_argument("--terms", type=int, default=1, help="Number of exponential terms")
    p.add_argument("--constant", type=float, default=None, help="Hold the model constant (intercept) at this value")
    p.add_argument("--lower", action="append", default=[], help="Lower bound, NAME=V or NAME=V1,V2,...")
    p.add_argument("--upper", action="append", default=[], help="Upper bound, NAME=V or NAME=V1,V2,...")

    # Range
    p.add_argument("--x_min", type=float, default=None, help="Crop data min X")
    p.add_argument("--x_max", type=float, default=None, help="Crop data max X")

    # Options
    p.add_argument("--nbest", type=int, default=5, help="Times the best solution must be found")
    p.add_argument("--besttol", type=float, default=1e-4, help="Tolerance for equal objective values")
    p.add_argument("--maxtrials", type=int, default=100, help="Maximum number of trials")
    p.add_argument("--solver", default="spg", choices=["spg", "lm"], help="Local solver")
    p.add_argument("--seed", type=int, default=None, help="Random seed")
    p.add_argument("--debug", action="store_true", help="Log failed trials and debug messages")

    return p.parse_args(argv)


def parse_list(arg):
    return [float(x) for x in arg.split(",")]


def parse_bounds(items, vector_names=()):
    """
    Parse NAME=V[,V...] items into a bound mapping.

    Vector parameters always map to arrays, scalars to floats.
    """
    bounds = {}
    for item in items:
        if "=" not in item:
            raise ValueError(f"Bound must have the form NAME=VALUE, got '{item}'")
        name, value = item.split("=", 1)
        name = name.strip()
        values = parse_list(value)
        if name in vector_names:
            bounds[name] = np.array(values)
        elif len(values) == 1:
            bounds[name] = values[0]
        else:
            raise ValueError(f"Parameter '{name}' takes a single value, got {len(values)}")
    return bounds


def build_fitter(x, y, args):
    fitter = CurveFitter(x, y)
    if args.model == "polynomial":
        fitter.set_model("polynomial", n=args.degree)
    elif args.model == "exponential":
        fitter.set_model("exponential", n=args.terms)
    else:
        fitter.set_model(args.model)

    vector_names = [v.name for v in fitter.model.variables if v.kind == "vector"]
    fitter.set_bounds(parse_bounds(args.lower, vector_names), parse_bounds(args.upper, vector_names))
    if args.constant is not None:
        fitter.fix_constant(args.constant)
    return fitter


def build_options(args):
    return Options(
        nbest=args.nbest,
        besttol=args.besttol,
        maxtrials=args.maxtrials,
        solver=args.solver,
        debug=args.debug,
    )


def export_results(base_path, fitter, result):
    results_file = f"{base_path}_fit.txt"
    data_file = f"{base_path}_fitdata.txt"

    with open(results_file, "w") as f:
        f.write(fitter.get_fit_report())
        f.write("\n\n")
        f.write(format_statistics(fitter.get_statistics()))
        f.write("\n")

    header = "X\tY_Exp\tY_Fit\tResidue"
    with open(data_file, "w") as f:
        f.write(header + "\n")
        for xi, yi, fi, ri in zip(fitter.x, fitter.y, result.ypred, result.residues):
            f.write(f"{xi:.6e}\t{yi:.6e}\t{fi:.6e}\t{ri:.6e}\n")


def main(argv=None):
    args = parse_args(argv)
    setup_logger(log_level=logging.DEBUG if args.debug else logging.INFO)

    files = sorted(glob.glob(args.pattern))
    if not files:
        log_error(f"No files matched pattern: {args.pattern}")
        sys.exit(1)

    options = build_options(args)
    rng = np.random.default_rng(args.seed)

    for fname in files:
        try:
            x, y = load_data_file(fname)
            if args.x_min is not None or args.x_max is not None:
                x, y = crop_roi(x, y, x_min=args.x_min, x_max=args.x_max)
            fitter = build_fitter(x, y, args)
            result = fitter.fit(options=options, rng=rng)

            base, _ = os.path.splitext(fname)
            export_results(base, fitter, result)
            log_info(f"Processed {fname}")
            print(f"Processed {fname}")
        except (OSError, ValueError, RuntimeError) as e:
            log_error(f"Error processing {fname}", e)


if __name__ == "__main__":
    main()
