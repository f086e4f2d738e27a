"""
Quickstart example for the minesweeper board generator.

This script demonstrates basic usage of the generator and the difficulty analyzer.
"""

from mineboard import (
    BoardSize,
    Difficulty,
    format_cell_analysis,
    generate_board_with_difficulty,
    hint_map,
    run_generator_many_tests,
)


def main():
    print("=" * 60)
    print("Minesweeper Board Generator - Quickstart Example")
    print("=" * 60)

    height, width, mines = BoardSize.SMALL.params()
    first_click = (height // 2, width // 2)

    # Example 1: Generate a board of a requested difficulty
    print(f"\n1. Generating a Hard {height}x{width} board with {mines} mines...")
    print("-" * 60)

    result = generate_board_with_difficulty(
        height, width, mines, first_click, Difficulty.HARD, rng=7
    )
    classification = result.classification
    label = classification.difficulty.label if classification.known else "Unknown"
    print(f"Matched target: {result.matched} after {result.attempts} attempt(s)")
    print(f"Classified as: {label} ({classification.guesses} guesses)")
    print(f"Search nodes: {classification.nodes}")

    # Example 2: Hint map after the first click
    print("\n2. Hint map after the first click:")
    print("-" * 60)
    board = result.board.copy()
    board.reveal(*first_click)
    print(format_cell_analysis(board, hint_map(board)))

    # Example 3: Class proportions under each bias
    print("\n3. Classified difficulty by placement bias (10 boards each)...")
    print("-" * 60)
    for bias in Difficulty:
        stats = run_generator_many_tests(height, width, mines, 10, bias, rng=11)
        print(
            f"{bias.label:8s} bias: easy {stats['easy_rate']*100:5.1f}%  "
            f"medium {stats['medium_rate']*100:5.1f}%  "
            f"hard {stats['hard_rate']*100:5.1f}%  "
            f"unknown {stats['unknown_rate']*100:5.1f}%"
        )

    print("\n" + "=" * 60)
    print("Done!")
    print("=" * 60)


if __name__ == "__main__":
    main()
