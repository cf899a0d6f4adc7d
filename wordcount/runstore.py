# wordcount/runstore.py
"""
Run storage backends.

A store hands out opaque run handles and owns their lifecycle:

    create(prefix) -> handle      new empty run
    writer(handle) -> RunWriter   append records in ascending order
    open(handle)   -> RunReader   forward cursor over the records
    delete(handle)                drop a consumed run
    export(handle, dest)          place the final run at `dest`

DiskRunStore keeps runs as temp files (what the CLI uses).
MemoryRunStore is an in-process arena with the same interface; it also
refuses to open a run twice, which makes run ownership checkable in tests.
"""

from __future__ import annotations

import errno
import io
import os
import shutil
import tempfile
from collections import Counter
from typing import Dict, Iterable, List, Optional, Tuple

from wordcount.paths import ENCODING, ENCODING_ERRORS, RUN_PREFIX, RUN_SUFFIX
from wordcount.runio import RunReader, RunWriter, parse_record


def _check_dest(dest: str) -> None:
    # moving onto a directory would drop the result inside it under its temp name
    if os.path.isdir(dest):
        raise IsADirectoryError(errno.EISDIR, "output path is a directory", dest)


def _write_empty(dest: str) -> None:
    with open(dest, "w", encoding=ENCODING, errors=ENCODING_ERRORS, newline="\n"):
        pass


class DiskRunStore:
    """
    Runs are `<prefix>XXXX.tmp` files under `tmpdir` (system temp dir by default).

    Used as a context manager, any run still alive on exit is removed, so an
    aborted job does not leave temp files behind.
    """

    # Handles are plain paths, so merges may run in worker processes.
    process_safe = True

    def __init__(self, tmpdir: Optional[str] = None):
        self.tmpdir = tmpdir
        if tmpdir:
            os.makedirs(tmpdir, exist_ok=True)
        self._live: set = set()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.cleanup()
        return False

    def create(self, prefix: str = RUN_PREFIX) -> str:
        fd, path = tempfile.mkstemp(prefix=prefix, suffix=RUN_SUFFIX, dir=self.tmpdir)
        os.close(fd)
        self._live.add(path)
        return path

    def adopt(self, handle: str) -> None:
        """Track a run created by a worker process."""
        self._live.add(handle)

    def writer(self, handle: str) -> RunWriter:
        return RunWriter(handle)

    def open(self, handle: str) -> RunReader:
        return RunReader(handle)

    def delete(self, handle: str) -> None:
        os.remove(handle)
        self._live.discard(handle)

    def export(self, handle: Optional[str], dest: str) -> None:
        _check_dest(dest)
        if handle is None:
            _write_empty(dest)
            return
        parent = os.path.dirname(os.path.abspath(dest))
        os.makedirs(parent, exist_ok=True)
        # shutil.move falls back to copy+unlink across filesystems
        shutil.move(handle, dest)
        self._live.discard(handle)

    def live(self) -> List[str]:
        return sorted(self._live)

    def cleanup(self) -> None:
        for path in list(self._live):
            try:
                os.remove(path)
            except FileNotFoundError:
                pass
            self._live.discard(path)


class _ArenaWriter(RunWriter):
    """RunWriter that commits its text into a MemoryRunStore on close."""

    def __init__(self, store: "MemoryRunStore", handle: int):
        super().__init__(store.name(handle), stream=io.StringIO())
        self._store = store
        self._handle = handle

    def close(self) -> None:
        if self._closed:
            return
        text = self._f.getvalue()
        super().close()
        self._store._commit(self._handle, text)


class MemoryRunStore:
    """
    In-memory arena of runs keyed by integer handles.

    Records are kept in their encoded TSV form so readers go through the same
    parsing path as on disk. Each run may be opened once; a second open
    raises RuntimeError and opening a deleted run raises FileNotFoundError.
    """

    process_safe = False

    def __init__(self):
        self._runs: Dict[int, List[str]] = {}
        self._names: Dict[int, str] = {}
        self._next = 0
        self.opens: Counter = Counter()
        self.created: List[int] = []
        self.deleted: List[int] = []

    def name(self, handle: int) -> str:
        return self._names.get(handle, f"mem:{handle}")

    def create(self, prefix: str = RUN_PREFIX) -> int:
        handle = self._next
        self._next += 1
        self._runs[handle] = []
        self._names[handle] = f"mem:{prefix}{handle}"
        self.created.append(handle)
        return handle

    def load(self, lines: Iterable[str], prefix: str = RUN_PREFIX) -> int:
        """Create a run from raw text lines (no validation)."""
        handle = self.create(prefix)
        self._runs[handle] = [l if l.endswith("\n") else l + "\n" for l in lines]
        return handle

    def _commit(self, handle: int, text: str) -> None:
        self._check(handle)
        # lines end at "\n" only, same as the disk reader (not str.splitlines)
        self._runs[handle] = io.StringIO(text, newline="\n").readlines()

    def _check(self, handle: int) -> None:
        if handle not in self._runs:
            raise FileNotFoundError(errno.ENOENT, "no such run", self.name(handle))

    def writer(self, handle: int) -> RunWriter:
        self._check(handle)
        return _ArenaWriter(self, handle)

    def open(self, handle: int) -> RunReader:
        self._check(handle)
        if self.opens[handle]:
            raise RuntimeError(f"{self.name(handle)}: run already consumed")
        self.opens[handle] += 1
        return RunReader(self.name(handle), stream=io.StringIO("".join(self._runs[handle]), newline="\n"))

    def delete(self, handle: int) -> None:
        self._check(handle)
        del self._runs[handle]
        self.deleted.append(handle)

    def export(self, handle: Optional[int], dest: str) -> None:
        _check_dest(dest)
        if handle is None:
            _write_empty(dest)
            return
        self._check(handle)
        with open(dest, "w", encoding=ENCODING, errors=ENCODING_ERRORS, newline="\n") as f:
            f.writelines(self._runs.pop(handle))

    def live(self) -> List[int]:
        return sorted(self._runs)

    # --- inspection helpers (do not count as a read) ---

    def lines(self, handle: int) -> List[str]:
        self._check(handle)
        return list(self._runs[handle])

    def records(self, handle: int) -> List[Tuple[str, int]]:
        return [parse_record(l) for l in self.lines(handle)]
