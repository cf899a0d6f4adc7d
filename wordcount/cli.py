"""
Command line entry point.

  wordcount 100000 data/words.txt
  wordcount 50000 corpus.txt --mode words --fix-text --output counts.tsv
  wordcount 2000 big.txt --fanin 64 --workers 4 --tmpdir data/tmp_runs

Exit status: 0 ok, 1 I/O failure, 2 bad configuration.
"""

from __future__ import annotations

import argparse
import sys

from wordcount import profkit
from wordcount.config import CountConfig
from wordcount.errors import ConfigurationError
from wordcount.parser import MODES
from wordcount.paths import OUTPUT_PATH
from wordcount.pipeline import count_file


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="wordcount",
        description="Exact token counts with bounded memory (spill to sorted runs, then k-way merge).",
    )
    ap.add_argument("max_words_in_memory", help="Max distinct tokens held in memory at once (B).")
    ap.add_argument("input", help="Input text file, one token per line ('-' for stdin).")
    ap.add_argument("--output", default=OUTPUT_PATH, help=f"Output TSV path (default: {OUTPUT_PATH}).")
    ap.add_argument("--fanin", type=int, default=None, help="Runs merged per group (default: max(B, 2)).")
    ap.add_argument("--buffer-size", type=int, default=None, help="Merge output buffer size in tokens (default: B).")
    ap.add_argument("--tmpdir", default=None, help="Directory for temp runs (default: system temp).")
    ap.add_argument("--workers", type=int, default=1, help="Parallel merge processes per round.")
    ap.add_argument("--mode", default="line", choices=list(MODES), help="line: one token per line; words: split lines into words.")
    ap.add_argument("--fix-text", action="store_true", help="Repair mojibake / HTML entities before counting (line mode).")
    ap.add_argument("--quiet", action="store_true", help="Less logging.")
    return ap


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        args.max_words_in_memory = CountConfig.parse_bound(args.max_words_in_memory)
        config = CountConfig.from_args(args)
        if args.workers < 1:
            raise ConfigurationError(f"workers must be >= 1, got {args.workers}")
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    try:
        count_file(
            args.input,
            config,
            args.output,
            mode=args.mode,
            fix_text=args.fix_text,
            tmpdir=args.tmpdir,
            workers=args.workers,
            verbose=not args.quiet,
        )
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if profkit.ENABLED:
        profkit.report()
    return 0


if __name__ == "__main__":
    sys.exit(main())
