"""
Batch fitting of data files.

Usage:
    funfit-batch "data/*.dat" --model sas_sphere --params 1,50,6.4e-6,0,0.01 \
        --vary 1,1,0,0,1 --plot

Notes:
- Data files: columns x, y and optionally sy (whitespace, comma, semicolon or tab separated).
- Parameters follow the positional layout of the model (see --list-models).
- --vary takes one 0/1 flag per parameter; omitted means all parameters vary.
- Minimizer options come from --config (JSON) and are overridden by --damping/--max-iterations.
- Outputs: for each file, writes <base>_results.txt and <base>_data.txt (and <base>_fit.png
  with --plot) alongside the input file.
"""

import argparse
import glob
import logging
import os
import sys

import numpy as np

from .api import fit
from .config import load_config, resolve_options
from .data_import import load_data_file
from .exceptions import InvalidArgument
from .functions import get_function, is_registered, list_functions, load_custom_function
from .utils.logger import log_error, log_info, log_warning, setup_logger


def parse_args(argv=None):
    p = argparse.ArgumentParser(prog="funfit-batch", description="Batch model fitting")
    p.add_argument("pattern", nargs="?", help="Glob pattern for data files, e.g. 'data/*.dat'")

    # Model
    p.add_argument("--model", default="linear", help="Model name (see --list-models)")
    p.add_argument("--params", type=str, default=None, help="Comma-separated initial parameters")
    p.add_argument("--vary", type=str, default=None, help="Comma-separated 0/1 vary flags, one per parameter")
    p.add_argument("--custom", action="append", default=[],
                   help="Custom model definition file (.json or .txt); may be repeated")
    p.add_argument("--list-models", action="store_true", help="List available models and exit")

    # Minimizer
    p.add_argument("--config", type=str, default=None, help="JSON file with minimizer options")
    p.add_argument("--damping", type=float, default=None, help="Initial damping factor")
    p.add_argument("--max-iterations", type=int, default=None, help="Maximum number of iterations")

    # Output
    p.add_argument("--plot", action="store_true", help="Save a plot of each fit")
    p.add_argument("--log-dir", type=str, default=None, help="Directory for log files")
    p.add_argument("--verbose", action="store_true", help="Log every iteration")

    return p.parse_args(argv)


def parse_list(arg, n=None, cast=float):
    if arg is None:
        return None
    parts = [cast(x) for x in arg.split(",") if x.strip()]
    if n is not None and len(parts) != n:
        raise InvalidArgument(f"Expected {n} values, got {len(parts)}")
    return parts


def format_models():
    lines = []
    for name in list_functions():
        func = get_function(name)
        params = ", ".join(func.param_names) if func.param_names is not None else "any"
        lines.append(f"{name:<12} [{params}]  {func.description}")
    return "\n".join(lines)


def initial_parameters(args):
    func = get_function(args.model)
    params = parse_list(args.params)
    if params is None:
        if func.n_params is None:
            raise InvalidArgument(f"Model '{args.model}' needs --params")
        params = [1.0] * func.n_params
    vary = parse_list(args.vary, n=len(params), cast=int)
    if vary is None:
        vary = [1] * len(params)
    return params, vary


def export_results(base_path, x, y, sy, result, param_names=None):
    results_file = f"{base_path}_results.txt"
    data_file = f"{base_path}_data.txt"

    with open(results_file, "w") as f:
        f.write(result.fit_report(param_names))
        f.write("\n")

    residuals = y - result.fitted_model
    data = np.column_stack([x, y, sy, result.fitted_model, residuals])
    np.savetxt(data_file, data, fmt="%.6e", delimiter="\t", header="X\tY\tsY\tY_Fit\tResidual")

    return results_file, data_file


def process_file(fname, args, params, vary, options):
    x, y, sy = load_data_file(fname)
    result = fit(args.model, params, x, y, sy, vary, config=options)

    base, _ = os.path.splitext(fname)
    export_results(base, x, y, sy, result, get_function(args.model).param_names)
    if args.plot:
        from .plotting import plot_fit
        plot_fit(x, y, sy, result, f"{base}_fit.png")

    log_info(f"Processed {fname}: {result.convergence_message}")
    return result


def main(argv=None):
    args = parse_args(argv)
    setup_logger(log_dir=args.log_dir, log_level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        for path in args.custom:
            load_custom_function(path, register=True)
    except (OSError, ValueError) as e:
        print(f"Error loading custom model: {e}", file=sys.stderr)
        return 2

    if args.list_models:
        print(format_models())
        return 0

    if not args.pattern:
        print("A data file pattern is required", file=sys.stderr)
        return 2

    if not is_registered(args.model):
        log_warning(f"Model '{args.model}' is not registered; fitting the zero model")

    try:
        config = load_config(args.config) if args.config else None
        options = resolve_options(config, damping=args.damping, max_iterations=args.max_iterations)
        params, vary = initial_parameters(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    files = sorted(glob.glob(args.pattern))
    if not files:
        print(f"No files matched pattern: {args.pattern}", file=sys.stderr)
        return 1

    failures = 0
    for fname in files:
        try:
            result = process_file(fname, args, params, vary, options)
            print(f"Processed {fname}: {result.convergence_message}")
        except (OSError, ValueError) as e:
            failures += 1
            log_error(f"Error processing {fname}", e)

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
