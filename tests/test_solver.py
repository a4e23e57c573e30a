import itertools
import logging
import time

from wordgrid.dictionary import Dictionary, ProbeOracle, RangeOracle, TrieOracle, load_dictionary
from wordgrid.grid import Grid
from wordgrid.solver import SolveResult, Solver, find_words

BOARD = "catsrepobonedigs"
# c a t s
# r e p o
# b o n e
# d i g s
WORDS = sorted(["cat", "cats", "car", "care", "bone", "bones", "rep", "pen", "pone",
                "dig", "digs", "one", "ones", "ape", "nod", "nog", "son", "repo",
                "open", "nope", "peon", "sing", "sign"])


def _dictionary(words) -> Dictionary:
    return Dictionary(sorted(words))


def _assert_paths_valid(grid: Grid, result: SolveResult):
    for word in result.words:
        path = result.paths[word]
        assert grid.spell(path) == word
        assert len(set(path)) == len(path), f"{word} reuses a cell"
        for a, b in zip(path, path[1:]):
            assert b in grid.adjacent(a), f"{word}: cells {a} and {b} are not adjacent"


def test_basic_solve():
    result = Solver(BOARD, RangeOracle(_dictionary(WORDS))).solve()
    assert "cat" in result.words
    assert "cats" in result.words
    assert "bone" in result.words
    # Every word found must be in the dictionary
    assert result.words <= set(WORDS)
    assert result.complete


def test_found_words_follow_adjacent_unused_cells():
    grid = Grid(BOARD)
    for oracle in (ProbeOracle(_dictionary(WORDS)), RangeOracle(_dictionary(WORDS))):
        result = Solver(BOARD, oracle).solve()
        _assert_paths_valid(grid, result)


def test_trie_and_range_oracles_find_same_words():
    dictionary = _dictionary(WORDS)
    by_range = Solver(BOARD, RangeOracle(dictionary)).solve()
    by_trie = Solver(BOARD, TrieOracle(dictionary)).solve()
    assert by_range.words == by_trie.words


def test_probe_finds_subset_of_complete_search():
    dictionary = _dictionary(WORDS)
    by_probe = Solver(BOARD, ProbeOracle(dictionary)).solve()
    by_range = Solver(BOARD, RangeOracle(dictionary)).solve()
    assert by_probe.words <= by_range.words


def test_no_revisit():
    """A word requiring revisiting a cell should not be found."""
    # "aba" would need cell 0 twice
    oracle = RangeOracle(_dictionary(["ab", "aba", "abc"]))
    result = Solver("abcd", oracle, min_length=2).solve()
    assert "aba" not in result.words
    assert "ab" in result.words
    assert "abc" in result.words


def test_min_length_filters_short_words():
    dictionary = _dictionary(WORDS)
    words_3 = Solver(BOARD, RangeOracle(dictionary), min_length=3).solve().words
    words_5 = Solver(BOARD, RangeOracle(dictionary), min_length=5).solve().words
    assert any(len(w) < 5 for w in words_3)
    assert all(len(w) >= 5 for w in words_5)
    assert words_5 < words_3


def test_word_lengths_within_bounds():
    dictionary = _dictionary(WORDS)
    result = Solver(BOARD, ProbeOracle(dictionary), min_length=4).solve()
    assert all(4 <= len(w) <= len(BOARD) for w in result.words)


def test_empty_results_for_no_matches():
    oracle = RangeOracle(_dictionary(["cat", "dog"]))
    assert Solver("zzzz", oracle).solve().words == set()


def test_letters_are_lowercased():
    oracle = RangeOracle(_dictionary(["ab"]))
    assert Solver("ABCD", oracle, min_length=2).solve().words == {"ab"}


def test_probe_scenario_on_small_grid():
    # "a" is never on the probe trajectory of this four word list, so the
    # branch starting with "a" is pruned and "at" is missed. c-a-t is a
    # legal path because every cell of a 2x2 grid touches every other.
    oracle = ProbeOracle(_dictionary(["at", "ta", "ca", "cat"]))
    result = Solver("atca", oracle, min_length=2).solve()
    assert result.words == {"ta", "ca", "cat"}
    assert result.paths["cat"] == (2, 0, 1)


def test_complete_oracle_scenario_on_small_grid():
    dictionary = _dictionary(["at", "ta", "ca", "cat"])
    for oracle in (RangeOracle(dictionary), TrieOracle(dictionary)):
        result = Solver("atca", oracle, min_length=2).solve()
        assert result.words == {"at", "ta", "ca", "cat"}


def test_non_square_grid_yields_nothing(caplog):
    oracle = RangeOracle(_dictionary(["aeiou", "a"]))
    with caplog.at_level(logging.WARNING, logger="wordgrid"):
        solver = Solver("aeiou", oracle, min_length=1)
        result = solver.solve()
    assert solver.grid is None
    assert result.words == set()
    assert "Not a valid grid" in caplog.text


def test_single_cell_grid():
    assert Solver("a", ProbeOracle(_dictionary(["a"])), min_length=1).solve().words == {"a"}
    assert Solver("a", ProbeOracle(_dictionary(["b"])), min_length=1).solve().words == set()
    # No neighbours, so no multi-letter words
    oracle = RangeOracle(_dictionary(["a", "aa", "ab"]))
    assert Solver("a", oracle, min_length=1).solve().words == {"a"}


def test_word_using_every_cell():
    # a b c
    # d e f
    # g h i
    word = "abcfedghi"
    for oracle in (ProbeOracle(_dictionary([word])), RangeOracle(_dictionary([word]))):
        result = Solver("abcdefghi", oracle).solve()
        assert result.words == {word}
        assert result.paths[word] == (0, 1, 2, 5, 4, 3, 6, 7, 8)


def test_parallel_matches_sequential():
    dictionary = _dictionary(WORDS)
    for oracle in (ProbeOracle(dictionary), RangeOracle(dictionary)):
        solver = Solver(BOARD, oracle)
        sequential = solver.solve()
        parallel = solver.solve(workers=4)
        assert parallel.words == sequential.words
        assert parallel.paths == sequential.paths
        assert parallel.complete


def test_expired_deadline_stops_search(caplog):
    solver = Solver(BOARD, RangeOracle(_dictionary(WORDS)))
    with caplog.at_level(logging.WARNING, logger="wordgrid"):
        result = solver.solve(deadline=time.monotonic() - 1)
    assert not result.complete
    assert result.words == set()
    assert "deadline" in caplog.text


def test_generous_deadline_completes():
    solver = Solver(BOARD, RangeOracle(_dictionary(WORDS)))
    result = solver.solve(deadline=time.monotonic() + 60)
    assert result.complete
    assert result.words == solver.solve().words


def test_find_words():
    oracle = RangeOracle(_dictionary(WORDS))
    assert find_words(BOARD, oracle) == Solver(BOARD, oracle).solve().words
    assert find_words(BOARD, oracle, workers=2, deadline_seconds=60) == find_words(BOARD, oracle)
    assert find_words("aeiou", oracle) == set()


def test_performance_with_generated_dictionary(tmp_path):
    """Solve a 4x4 board against a few thousand words in well under a few seconds."""
    dict_file = tmp_path / "dict.txt"
    words = []
    letters = "abcdefghijklmnoprstue"
    for length in range(3, 5):
        for combo in itertools.combinations(letters, length):
            words.append("".join(combo))
            if len(words) > 5000:
                break
        if len(words) > 5000:
            break
    dict_file.write_text("\n".join(sorted(set(words))))
    dictionary = load_dictionary(dict_file)

    board = "tapeinsoedrlkghm"

    start = time.perf_counter()
    result = Solver(board, RangeOracle(dictionary)).solve()
    elapsed = time.perf_counter() - start

    assert elapsed < 2.0, f"Solver took {elapsed:.3f}s (expected <2s)"
    assert len(result.words) > 0
    _assert_paths_valid(Grid(board), result)


def test_search_stats_count_lookups_and_pruning():
    oracle = ProbeOracle(_dictionary(["at", "ta", "ca", "cat"]))
    stats = Solver("atca", oracle, min_length=2).solve().stats
    assert stats.lookups == 20
    assert stats.pruned == 12
    assert stats.extended == 8
    assert stats.deepest == 3


def test_parallel_stats_match_sequential():
    solver = Solver(BOARD, RangeOracle(_dictionary(WORDS)))
    assert solver.solve(workers=3).stats == solver.solve().stats


def test_solver_accepts_built_grid():
    grid = Grid("ATCA")
    solver = Solver(grid, RangeOracle(_dictionary(["at", "ta", "ca", "cat"])), min_length=2)
    assert solver.grid is grid
    assert solver.solve().words == {"at", "ta", "ca", "cat"}
