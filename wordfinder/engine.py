from __future__ import annotations

import enum
import logging
import queue
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from wordfinder.errors import (
    InvalidExecutionConfigError,
    NonLetterCharacterError,
    NullInputError,
    RaggedOrInvalidRowError,
    RowCountOutOfRangeError,
)
from wordfinder.metrics import StageTimer
from wordfinder.prefix_index import PrefixIndex
from wordfinder.settings import settings
from wordfinder.top_k import BoundedTopK

logger = logging.getLogger("wordfinder")


class ExecutionMode(str, enum.Enum):
    SEQUENTIAL = "sequential"
    POOLED = "pooled"


def _parse_mode(mode) -> ExecutionMode:
    if isinstance(mode, ExecutionMode):
        return mode
    if isinstance(mode, str):
        try:
            return ExecutionMode(mode.strip().lower())
        except ValueError:
            pass
    choices = ", ".join(m.value for m in ExecutionMode)
    raise InvalidExecutionConfigError(f"Execution mode must be one of {choices}, got {mode!r}")


def validate_grid(grid, max_side: int) -> list[str]:
    """Check grid shape and contents. Returns the rows as a list."""
    if grid is None:
        raise NullInputError()

    if isinstance(grid, str):
        raise RaggedOrInvalidRowError(0, "grid is a single str, expected a sequence of row strings", max_side)

    rows = list(grid)
    if not 1 <= len(rows) <= max_side:
        raise RowCountOutOfRangeError(len(rows), max_side)

    width = None
    for idx, row in enumerate(rows):
        if not isinstance(row, str):
            detail = "row is None" if row is None else f"row is {type(row).__name__}, not str"
            raise RaggedOrInvalidRowError(idx, detail, max_side)
        if not 1 <= len(row) <= max_side:
            raise RaggedOrInvalidRowError(idx, f"length is {len(row)}", max_side)
        if width is None:
            width = len(row)
        elif len(row) != width:
            raise RaggedOrInvalidRowError(idx, f"length is {len(row)}, expected {width}", max_side)

    cells = np.array([list(row) for row in rows], dtype="<U1")
    is_letter = ((cells >= "a") & (cells <= "z")) | ((cells >= "A") & (cells <= "Z"))
    if not is_letter.all():
        r, c = np.argwhere(~is_letter)[0]
        raise NonLetterCharacterError(int(r), int(c), str(cells[r, c]))

    return rows


class SearchEngine:
    """Counts horizontal and vertical occurrences of query words in a letter grid.

    The prefix index is built once here and is read-only afterwards. The top-k
    ranking belongs to the engine and accumulates across find() calls until
    reset() is called.
    """

    def __init__(self, grid: Iterable[str], capacity: int | None = None, max_side: int | None = None):
        timer = StageTimer("engine")
        max_side = settings.MAX_GRID_SIDE if max_side is None else max_side

        with timer.stage("validate"):
            rows = validate_grid(grid, max_side)

        self._rows = tuple(row.lower() for row in rows)
        cells = np.array([list(row) for row in self._rows], dtype="<U1")
        self._columns = tuple("".join(col) for col in cells.T)

        self._index = PrefixIndex()
        with timer.stage("index_build"):
            for line in self._rows + self._columns:
                self._index.add_suffixes(line)

        self._top_k = BoundedTopK(settings.TOP_K if capacity is None else capacity)
        self.build_timings = timer.summary()
        self.last_timings: dict[str, float] = {}
        logger.info(
            "Indexed %dx%d grid: %d prefix nodes in %.3fms",
            len(self._rows), len(self._columns), self._index.node_count, self.build_timings["total"],
        )

    @property
    def rows(self) -> tuple[str, ...]:
        return self._rows

    @property
    def columns(self) -> tuple[str, ...]:
        return self._columns

    @property
    def shape(self) -> tuple[int, int]:
        return len(self._rows), len(self._columns)

    def count(self, word: str) -> int:
        return self._index.count_with_prefix(word.lower())

    def evaluate(self, word: str, top_k: BoundedTopK) -> int:
        word = word.lower()
        occurrences = self._index.count_with_prefix(word)
        logger.debug("word=%s occurrences=%d", word, occurrences)
        if occurrences > 0:
            top_k.offer(word, occurrences)
        return occurrences

    def find(self, words: Iterable[str], mode=ExecutionMode.SEQUENTIAL, workers: int = 1) -> list[str]:
        """Return the most frequent matching words, highest count first."""
        return [word for word, _ in self.find_with_counts(words, mode, workers)]

    def find_with_counts(
        self, words: Iterable[str], mode=ExecutionMode.SEQUENTIAL, workers: int = 1
    ) -> list[tuple[str, int]]:
        mode = _parse_mode(mode)
        if isinstance(workers, bool) or not isinstance(workers, int):
            raise InvalidExecutionConfigError(f"Worker count must be an integer, got {workers!r}")
        if not settings.MIN_WORKERS <= workers <= settings.MAX_WORKERS:
            raise InvalidExecutionConfigError(
                f"Worker count must be between {settings.MIN_WORKERS} and {settings.MAX_WORKERS}, got {workers}"
            )

        timer = StageTimer("find")
        with timer.stage(mode.value):
            if mode is ExecutionMode.SEQUENTIAL:
                for word in words:
                    self.evaluate(word, self._top_k)
            else:
                self._find_pooled(words, workers)

        ranking = self._top_k.snapshot()
        self.last_timings = timer.summary()
        logger.info("find mode=%s workers=%d returned %d words", mode.value, workers, len(ranking))
        return ranking

    def _find_pooled(self, words: Iterable[str], workers: int):
        pending: queue.SimpleQueue[str] = queue.SimpleQueue()
        for word in words:
            pending.put(word)

        def drain() -> BoundedTopK:
            local = BoundedTopK(self._top_k.capacity)
            while True:
                try:
                    word = pending.get_nowait()
                except queue.Empty:
                    return local
                self.evaluate(word, local)

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="wordfinder") as pool:
            futures = [pool.submit(drain) for _ in range(workers)]

        # Nothing is merged unless every worker finished cleanly
        partials = [future.result() for future in futures]
        for partial in partials:
            self._top_k.merge(partial)

    def reset(self):
        self._top_k.clear()
