import math

import matplotlib.pyplot as plt
import pytest

from mineboard import (
    Difficulty,
    format_cell_analysis,
    hint_map,
    run_bias_level_analysis,
    run_generator_many_tests,
    run_generator_single_test,
    summarize_expected_attempts,
)


def test_format_cell_analysis(fifty_fifty_board):
    text = format_cell_analysis(fifty_fifty_board, hint_map(fifty_fifty_board), show_coords=False)
    assert text.splitlines() == [" ?  ?", " 1  1"]


def test_format_cell_analysis_with_coords_and_flags(fifty_fifty_board):
    fifty_fifty_board.flag_cell(0, 0)
    lines = format_cell_analysis(fifty_fifty_board, {}).splitlines()
    assert lines[0] == "    0  1"
    assert lines[2] == " 0 | F  ."
    assert lines[3] == " 1 | 1  1"


def test_single_test_on_mine_free_board(capsys):
    payload = run_generator_single_test(4, 4, 0, Difficulty.MEDIUM, show_board=True, rng=0)
    assert payload["guesses"] == 0
    assert payload["difficulty"] == Difficulty.EASY
    assert payload["timed_out"] is False
    assert payload["oracle_calls"] >= 1
    assert "Classified as Easy" in capsys.readouterr().out


def test_many_tests_rates_sum_to_one():
    stats = run_generator_many_tests(5, 5, 2, 4, Difficulty.HARD, max_nodes=25, rng=3)
    total = stats["easy_rate"] + stats["medium_rate"] + stats["hard_rate"] + stats["unknown_rate"]
    assert total == pytest.approx(1.0)
    assert stats["avg_nodes"] >= 1.0


def test_many_tests_rejects_zero_runs():
    with pytest.raises(ValueError):
        run_generator_many_tests(4, 4, 0, 0, Difficulty.EASY)


def test_bias_level_analysis_plots(monkeypatch):
    shown = []
    monkeypatch.setattr(plt, "show", lambda: shown.append(True))
    results = run_bias_level_analysis(2, height=4, width=4, mine_count=0, rng=0)
    assert set(results) == set(Difficulty)
    assert all(r["easy_rate"] == 1.0 for r in results.values())
    assert len(shown) == 2
    plt.close("all")


def test_summarize_expected_attempts():
    results = {
        Difficulty.HARD: {"easy_rate": 0.0, "medium_rate": 0.5, "hard_rate": 0.25},
    }
    attempts = summarize_expected_attempts(results)
    assert attempts[(Difficulty.HARD, Difficulty.HARD)] == pytest.approx(4.0)
    assert attempts[(Difficulty.HARD, Difficulty.MEDIUM)] == pytest.approx(2.0)
    assert math.isinf(attempts[(Difficulty.HARD, Difficulty.EASY)])


@pytest.mark.slow
def test_hard_bias_does_not_reduce_hard_share():
    common = dict(max_nodes=300, rng=17)
    hard = run_generator_many_tests(6, 6, 6, 60, Difficulty.HARD, **common)
    medium = run_generator_many_tests(6, 6, 6, 60, Difficulty.MEDIUM, **common)
    assert hard["hard_rate"] + 0.1 >= medium["hard_rate"]
