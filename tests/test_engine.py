import random
import time

import pytest

from wordfinder.engine import ExecutionMode, SearchEngine, validate_grid
from wordfinder.errors import (
    GridValidationError,
    InvalidExecutionConfigError,
    NonLetterCharacterError,
    NullInputError,
    RaggedOrInvalidRowError,
    RowCountOutOfRangeError,
)

SAMPLE_GRID = ["abcdc", "fgwio", "chill", "pqnsd", "uvdxy", "chill", "chill"]
SAMPLE_WORDS = ["cold", "wind", "snow", "chill", "wind"]


def test_sample_grid():
    engine = SearchEngine(SAMPLE_GRID)
    # "wind" runs down column 2 (c-w-i-n-d-i-i)
    assert engine.find_with_counts(SAMPLE_WORDS) == [("chill", 3), ("wind", 1)]
    assert engine.columns[2] == "cwindii"


def test_single_cell_grid():
    engine = SearchEngine(["a"])
    assert engine.find_with_counts(["a"]) == [("a", 1)]


def test_word_longer_than_grid_excluded():
    engine = SearchEngine(["abc", "def", "ghi"])
    assert engine.find(["abcd", "adgx", "abc"]) == ["abc"]


def test_vertical_and_horizontal_counted():
    board = [
        "CAT",
        "AXA",
        "TAT",
    ]
    engine = SearchEngine(board)
    # row 0 and column 0
    assert engine.count("cat") == 2
    # "at" in row 0, row 2, column 0 and column 2
    assert engine.count("at") == 4
    # no diagonal matching: "cxt" runs corner to corner
    assert engine.count("cxt") == 0


def test_case_insensitive():
    engine = SearchEngine(["ChIlL", "aBcDe"])
    assert engine.rows == ("chill", "abcde")
    assert engine.find(["CHILL", "Chill"]) == ["chill"]


def test_columns_and_shape():
    engine = SearchEngine(["ab", "cd", "ef"])
    assert engine.columns == ("ace", "bdf")
    assert engine.shape == (3, 2)


def test_ranking_by_count():
    engine = SearchEngine(["aaab", "aabb", "abbb"])
    words = engine.find(["b", "a", "ab", "zz", "aaa"])
    assert words[:2] in (["a", "b"], ["b", "a"])
    counts = dict(engine.find_with_counts([]))
    assert counts == {"a": 12, "b": 12, "ab": 5, "aaa": 2}
    assert "zz" not in counts


def test_result_capped_at_ten():
    grid = ["abcdefghij", "klmnopqrst", "uvwxyzabcd"]
    engine = SearchEngine(grid)
    words = engine.find(list("abcdefghijklmnopqrstuvwxyz"))
    assert len(words) == 10
    # a-d fill two cells each, every other letter one
    assert set(words[:4]) == {"a", "b", "c", "d"}


def test_repeated_word_not_duplicated():
    engine = SearchEngine(SAMPLE_GRID)
    result = engine.find_with_counts(["chill"] * 20 + ["CHILL"])
    assert result == [("chill", 3)]


def test_empty_stream():
    engine = SearchEngine(SAMPLE_GRID)
    assert engine.find([]) == []


def test_results_accumulate_until_reset():
    engine = SearchEngine(SAMPLE_GRID)
    engine.find(["chill"])
    assert engine.find(["abc"]) == ["chill", "abc"]
    engine.reset()
    assert engine.find(["abc"]) == ["abc"]


@pytest.mark.parametrize("workers", range(1, 11))
def test_pooled_matches_sequential(workers):
    grid = ["thequick", "brownfox", "jumpsove", "rthelazy", "dogthequ", "ickbrown", "foxjumps", "overthel"]
    # at most ten distinct matches so count ties cannot change which words survive
    words = ["the", "fox", "quick", "brown", "dog", "lazy", "t", "o", "cat", "jumps", "ox"] * 5

    sequential = SearchEngine(grid).find_with_counts(words, ExecutionMode.SEQUENTIAL)
    pooled = SearchEngine(grid).find_with_counts(words, ExecutionMode.POOLED, workers)

    assert dict(pooled) == dict(sequential)
    counts = [c for _, c in pooled]
    assert counts == sorted(counts, reverse=True)


def _distinct_count_queries(engine: SearchEngine, rng: random.Random) -> list[str]:
    """Random words over "ab", keeping one word per distinct nonzero count."""
    by_count: dict[int, str] = {}
    for _ in range(400):
        word = "".join(rng.choice("ab") for _ in range(rng.randint(1, 6)))
        occurrences = engine.count(word)
        if occurrences > 0:
            by_count.setdefault(occurrences, word)
    return list(by_count.values())


@pytest.mark.parametrize("workers", range(1, 11))
def test_pooled_matches_sequential_when_workers_drop_words(workers):
    rng = random.Random(1234)
    grid = ["".join(rng.choice("ab") for _ in range(12)) for _ in range(12)]
    queries = _distinct_count_queries(SearchEngine(grid), rng)
    # well past capacity so every worker evicts
    assert len(queries) > 15
    words = queries * 3
    rng.shuffle(words)

    sequential = SearchEngine(grid).find_with_counts(words, ExecutionMode.SEQUENTIAL)
    pooled = SearchEngine(grid).find_with_counts(words, ExecutionMode.POOLED, workers)

    assert len(sequential) == 10
    assert pooled == sequential


def test_failed_worker_leaves_ranking_untouched():
    engine = SearchEngine(SAMPLE_GRID)
    words = ["chill", "wind"] * 50 + [None]
    with pytest.raises(AttributeError):
        engine.find(words, ExecutionMode.POOLED, 4)
    assert engine.find([]) == []


def test_mode_accepts_names():
    engine = SearchEngine(SAMPLE_GRID)
    assert engine.find(SAMPLE_WORDS, "pooled", 3) == ["chill", "wind"]
    assert engine.find(SAMPLE_WORDS, "SEQUENTIAL") == ["chill", "wind"]


@pytest.mark.parametrize("mode", ["thread", "task", 2, None])
def test_invalid_mode(mode):
    engine = SearchEngine(SAMPLE_GRID)
    with pytest.raises(InvalidExecutionConfigError):
        engine.find(SAMPLE_WORDS, mode)


@pytest.mark.parametrize("workers", [0, 11, -1, 2.5, True, "3"])
def test_invalid_worker_count(workers):
    engine = SearchEngine(SAMPLE_GRID)
    with pytest.raises(InvalidExecutionConfigError):
        engine.find(SAMPLE_WORDS, ExecutionMode.POOLED, workers)


def test_str_grid_rejected():
    with pytest.raises(RaggedOrInvalidRowError, match="single str"):
        SearchEngine("abc")


def test_null_grid():
    with pytest.raises(NullInputError, match="grid is None"):
        SearchEngine(None)


def test_empty_grid():
    with pytest.raises(RowCountOutOfRangeError, match="but it is 0"):
        SearchEngine([])


def test_too_many_rows():
    with pytest.raises(RowCountOutOfRangeError, match="but it is 65"):
        SearchEngine(["a"] * 65)


def test_max_size_grid():
    engine = SearchEngine(["ab" * 32] * 64)
    assert engine.shape == (64, 64)
    assert engine.count("ab") == 64 * 32


@pytest.mark.parametrize("grid", [
    ["abcdc", "abcdcef"],
    [""],
    ["abcdc", None],
    ["a" * 65],
    ["abc", 123],
])
def test_ragged_or_invalid_rows(grid):
    with pytest.raises(RaggedOrInvalidRowError):
        SearchEngine(grid)


@pytest.mark.parametrize("grid", [["abc99dc"], ["abc", "a-c"], ["ab c"], ["abé"]])
def test_non_letter_characters(grid):
    with pytest.raises(NonLetterCharacterError):
        SearchEngine(grid)


def test_non_letter_reports_position():
    with pytest.raises(NonLetterCharacterError) as exc_info:
        validate_grid(["abc", "d7f"], 64)
    assert exc_info.value.row_index == 1
    assert exc_info.value.col_index == 1
    assert exc_info.value.char == "7"


def test_validation_errors_share_base():
    for grid in (None, [], ["ab", "a"], ["1"]):
        with pytest.raises(GridValidationError):
            SearchEngine(grid)


def test_build_timings_recorded():
    engine = SearchEngine(SAMPLE_GRID)
    assert "index_build" in engine.build_timings
    engine.find(SAMPLE_WORDS, ExecutionMode.POOLED, 2)
    assert "pooled" in engine.last_timings


def test_performance_full_grid_large_stream():
    """Index a 64x64 grid and run a large query stream through the pool."""
    letters = "abcdefghijklmnopqrstuvwxyz"
    grid = ["".join(letters[(r * 7 + c) % 26] for c in range(64)) for r in range(64)]
    words = [grid[i % 64][i % 50:i % 50 + 5] for i in range(20000)]

    start = time.perf_counter()
    engine = SearchEngine(grid)
    result = engine.find(words, ExecutionMode.POOLED, 4)
    elapsed = time.perf_counter() - start

    assert elapsed < 10, f"Search took {elapsed:.3f}s"
    assert 0 < len(result) <= 10
