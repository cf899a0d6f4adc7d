# wordcount/runio.py
"""
Utilities for writing and reading *sorted* count runs
in a simple TSV format:  token<TAB>count

One record per line, newline-terminated, count in decimal. The same format is
used for leaf runs, merged runs and the final output file.

Parsing splits on the LAST tab so a token that itself contains a tab still
reads back intact.
"""

from __future__ import annotations

import re
import sys
from typing import Iterator, Optional, TextIO, Tuple

from wordcount import profkit
from wordcount.errors import MalformedRecordError
from wordcount.paths import ENCODING, ENCODING_ERRORS

_COUNT_RE = re.compile(r"[0-9]+", re.ASCII)


def format_record(token: str, count: int) -> str:
    return f"{token}\t{count}\n"


def parse_record(line: str) -> Tuple[str, int]:
    """
    Parse one run line into (token, count).
    Raises MalformedRecordError on a missing tab or a non-numeric count.
    """
    if line.endswith("\n"):
        line = line[:-1]
    token, sep, count_s = line.rpartition("\t")
    if not sep:
        raise MalformedRecordError(line, "wrong field count")
    if not _COUNT_RE.fullmatch(count_s):
        raise MalformedRecordError(line, "non-numeric count")
    return token, int(count_s)


class RunWriter:
    """
    Writes a single *sorted* run.

    Records must arrive in strictly ascending token order; anything else
    raises ValueError, since a run that is not sorted would silently break
    every merge downstream.
    """

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __init__(self, name: str, stream: Optional[TextIO] = None):
        self.name = name
        if stream is None:
            stream = open(name, "w", encoding=ENCODING, errors=ENCODING_ERRORS, newline="\n")
        self._f = stream
        self._last: Optional[str] = None
        self._closed = False
        self.records = 0

    def write(self, token: str, count: int) -> None:
        if self._last is not None and token <= self._last:
            raise ValueError(
                f"{self.name}: run records out of order ({self._last!r} then {token!r})"
            )
        self._f.write(format_record(token, count))
        self._last = token
        self.records += 1

    def write_sorted(self, pairs) -> int:
        """Append already-sorted (token, count) pairs. Returns how many were written."""
        n = 0
        for token, count in pairs:
            self.write(token, count)
            n += 1
        profkit.tick("records_written", n)
        return n

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._f.close()


class RunReader:
    """
    Sequentially reads a run written by RunWriter.

    Yields tuples: (token: str, count: int)

    Malformed lines are skipped (they contribute nothing) and counted in
    ``malformed``; the first one is reported on stderr.
    """

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __init__(self, name: str, stream: Optional[TextIO] = None):
        self.name = name
        if stream is None:
            stream = open(name, "r", encoding=ENCODING, errors=ENCODING_ERRORS, newline="\n")
        self._f = stream
        self._closed = False
        self.malformed = 0

    def __iter__(self) -> Iterator[Tuple[str, int]]:
        return self

    def __next__(self) -> Tuple[str, int]:
        while True:
            if self._closed:
                raise StopIteration
            line = self._f.readline()
            if not line:
                self.close()
                raise StopIteration
            try:
                record = parse_record(line)
            except MalformedRecordError as e:
                self.malformed += 1
                profkit.tick("malformed_records")
                if self.malformed == 1:
                    print(f"[runio] {self.name}: skipping malformed record ({e})", file=sys.stderr)
                continue
            profkit.tick("records_read")
            return record

    def read_next(self) -> Optional[Tuple[str, int]]:
        """Next record, or None once the run is exhausted."""
        return next(self, None)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._f.close()
        if self.malformed > 1:
            print(f"[runio] {self.name}: {self.malformed} malformed records skipped", file=sys.stderr)
