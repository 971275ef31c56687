#!/usr/bin/env python3
"""
Predict the minimum free energy RNA secondary structure from the command line.

Examples:
  - python -m rna_mfe_fold "GGGAAACCCAAAGGGUUUCCC"
  - python -m rna_mfe_fold --json --max-loop 20 "GCGCUUCGCC"
  - python -m rna_mfe_fold -v --fasta sequences.fa --workers 4
"""

# --- Standard Library Imports ---
from __future__ import annotations
import argparse
import json
import sys
import logging
from typing import Any, Dict, List, Optional, Tuple

# --- Local Application Imports ---
from rna_mfe_fold.utils.logging_utils import setup_loggers, cleanup_old_logs, DEFAULT_LOG_DIR
from rna_mfe_fold.utils.nucleotide_utils import normalize_sequence, find_non_canonical
from rna_mfe_fold.utils.fasta_utils import read_fasta
from rna_mfe_fold.energies import EnergyParamsLoader, SimpleEnergyParams
from rna_mfe_fold.folding import (
    MfeFoldingConfig,
    MfeResult,
    TracebackConsistencyError,
    load_folding_config,
    predict_mfe,
    predict_batch,
)

logger = logging.getLogger(__name__)

LOGGERS_TO_CONFIGURE = [
    __name__,
    "rna_mfe_fold.folding.recurrences",
    "rna_mfe_fold.folding.traceback",
    "rna_mfe_fold.folding.predictor",
]


# --------------------------
# Logging Configuration
# --------------------------
def setup_cli_logging(verbose_level: int, log_file: Optional[str] = None, keep_logs_days: int = 7) -> None:
    """
    Configures the package loggers from the `-v` count and `--log-file`.

    Console logging goes to stderr so stdout carries only the results.

    0 -> WARNING, 1 -> INFO, 2+ -> DEBUG. A timestamped file under `var/log`
    is created when verbose and no explicit file is given; files there older
    than `keep_logs_days` are removed first.
    """
    level_map = {
        0: logging.WARNING,
        1: logging.INFO,
        2: logging.DEBUG,
    }
    log_level = level_map.get(min(verbose_level, 2), logging.INFO)
    should_log_to_file = (verbose_level > 0) or (log_file is not None)

    if should_log_to_file and log_file is None:
        removed = cleanup_old_logs(DEFAULT_LOG_DIR, days_to_keep=keep_logs_days)
    else:
        removed = 0

    setup_loggers(
        LOGGERS_TO_CONFIGURE,
        level=log_level,
        log_file=log_file,
        enable_file_logging=should_log_to_file,
        stream=sys.stderr,
    )

    if should_log_to_file and log_file is None:
        logger.info(f"Logs will be saved to: {DEFAULT_LOG_DIR.resolve()} (removed {removed} old log file(s))")


# --------------------------
# Helpers
# --------------------------
def validate_and_normalize_seq(raw_sequence: str, strict: bool = False) -> str:
    """
    Canonicalizes a sequence for folding.

    Whitespace is removed, letters upper-cased and T mapped to U. Symbols
    outside {A, C, G, U} are kept (they never pair) unless `strict` is set.

    Raises
    ------
    ValueError
        If the sequence is empty, or contains a non-canonical symbol in strict mode.
    """
    normalized_sequence = normalize_sequence(raw_sequence)

    if not normalized_sequence:
        raise ValueError("Sequence is empty.")

    invalid = list(find_non_canonical(normalized_sequence))
    if invalid:
        pos, char = invalid[0]
        if strict:
            raise ValueError(f"Invalid character at position {pos} ('{char}'). Only A,C,G,U (or T) are allowed.")
        logger.warning(f"{len(invalid)} non-canonical symbol(s), first '{char}' at position {pos}; they will not pair.")

    logger.debug(f"Sequence validated: length={len(normalized_sequence)}")
    return normalized_sequence


def build_config(cli_args: argparse.Namespace) -> Tuple[MfeFoldingConfig, SimpleEnergyParams]:
    """
    Builds the folding config and energy coefficients from YAML plus CLI overrides.

    Raises
    ------
    InvalidFoldingConfigError
        If the resulting configuration is malformed.
    ValueError
        If the parameter file cannot be parsed.
    """
    verbose = cli_args.verbose > 0 and not cli_args.quiet
    if cli_args.yaml is not None:
        config = load_folding_config(cli_args.yaml, verbose=verbose)
    else:
        config = MfeFoldingConfig(verbose=verbose)

    params = EnergyParamsLoader().load(yaml_path=cli_args.yaml)

    if cli_args.min_loop is not None:
        config.min_loop_size = cli_args.min_loop
    if cli_args.max_loop is not None:
        config.max_loop_size = cli_args.max_loop
    if cli_args.tolerance is not None:
        config.tolerance = cli_args.tolerance

    config.validate()
    logger.info(f"Config: min_loop={config.min_loop_size}, max_loop={config.max_loop_size}, "
                f"tolerance={config.tolerance:g}")
    return config, params


def collect_inputs(cli_args: argparse.Namespace) -> List[Tuple[str, str]]:
    """Returns `(name, raw_sequence)` tuples from the positional argument or the FASTA file."""
    if cli_args.fasta is not None:
        return [(record.name, record.sequence) for record in read_fasta(cli_args.fasta)]
    return [("input", cli_args.sequence)]


def result_to_dict(name: str, result: MfeResult) -> Dict[str, Any]:
    return {
        "name": name,
        "sequence": result.sequence,
        "dot_bracket": result.structure,
        "delta_G_kcal_per_mol": result.energy,
        "pairs": [list(pair.as_tuple()) for pair in result.pairs],
        "length": len(result.sequence),
    }


def format_result(name: str, result: MfeResult) -> str:
    return "\n".join([
        f"Name : {name}",
        f"Sequence Length : {len(result.sequence)}",
        f"Sequence : {result.sequence}",
        f"Dot-Bracket Notation: {result.structure}",
        f"ΔG (kcal/mol): {result.energy:.2f}",
    ])


# --------------------------
# Command-Line Interface
# --------------------------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Predict RNA MFE structure (dot-bracket) and ΔG.")
    parser.add_argument("sequence", nargs="?", default=None,
                        help="RNA sequence (A,C,G,U; T will be converted to U)")
    parser.add_argument("--fasta", default=None,
                        help="Fold every record of a FASTA file instead of a single sequence.")
    parser.add_argument("--yaml", default=None,
                        help="Path to parameter YAML (defaults to package data).")
    parser.add_argument("--min-loop", type=int, default=None,
                        help="Minimum hairpin loop size (default: 3).")
    parser.add_argument("--max-loop", type=int, default=None,
                        help="Maximum interior loop unpaired budget (default: 30).")
    parser.add_argument("--tolerance", type=float, default=None,
                        help="Traceback comparison tolerance (default: 1e-6).")
    parser.add_argument("--strict", action="store_true",
                        help="Reject symbols other than A,C,G,U,T instead of leaving them unpaired.")
    parser.add_argument("--workers", type=int, default=None,
                        help="Worker count for folding several FASTA records.")
    parser.add_argument("--processes", action="store_true",
                        help="Use a process pool instead of threads for batches.")
    parser.add_argument("--json", action="store_true",
                        help="Emit JSON instead of human-readable text.")

    # Logging arguments
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase verbosity (-v=INFO, -vv=DEBUG)")
    parser.add_argument("--log-file", default=None,
                        help="Path to log file (default: var/log/<logger>_TIMESTAMP.log if verbose)")
    parser.add_argument("--quiet", action="store_true",
                        help="Suppress all output except final result")
    parser.add_argument("--keep-logs", type=int, default=7, metavar="DAYS",
                        help="Delete log files in var/log older than DAYS (default: 7)")
    return parser


def main(argv=None) -> int:
    """
    Parses command-line arguments and runs the prediction.

    Returns 0 on success, 2 for invalid input or configuration, 1 when the
    prediction itself fails.
    """
    parser = build_parser()
    cli_args = parser.parse_args(argv)

    if (cli_args.sequence is None) == (cli_args.fasta is None):
        parser.error("Provide exactly one of a sequence argument or --fasta.")

    verbose_level = 0 if cli_args.quiet else cli_args.verbose
    setup_cli_logging(verbose_level, cli_args.log_file, cli_args.keep_logs)

    try:
        config, params = build_config(cli_args)
        inputs = collect_inputs(cli_args)
        names = [name for name, _ in inputs]
        sequences = [validate_and_normalize_seq(raw, strict=cli_args.strict) for _, raw in inputs]
    except (ValueError, OSError) as e:
        # InvalidFoldingConfigError is a ValueError.
        logger.error(f"Invalid input: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        if len(sequences) == 1:
            results = [predict_mfe(sequences[0], config, params=params)]
        else:
            results = predict_batch(
                sequences, config, params=params,
                max_workers=cli_args.workers,
                executor="process" if cli_args.processes else "thread",
            )
    except TracebackConsistencyError as e:
        logger.error(f"Prediction failed: {e}", exc_info=True)
        print(f"Prediction failed: {e}", file=sys.stderr)
        return 1

    if cli_args.json:
        payload = [result_to_dict(name, result) for name, result in zip(names, results)]
        # A single sequence prints one object, a FASTA batch prints a list.
        print(json.dumps(payload if cli_args.fasta is not None else payload[0], indent=2))
    else:
        print("\n\n".join(format_result(name, result) for name, result in zip(names, results)))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
