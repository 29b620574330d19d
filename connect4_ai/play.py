"""
Interactive Connect Four interface for playing against the MCTS agent.

Example usage:
    # Play against the MCTS agent, human moves first
    connect4-play

    # Let the agent open, with a bigger search budget
    connect4-play --first ai --iterations 3000

    # Benchmark the agent against a random player
    connect4-play --self-play 20 --iterations 300
"""
import argparse
import logging
import sys
from typing import Dict, Optional

from rich.console import Console
from rich.text import Text
from tqdm import tqdm

from connect4_ai.agents import RandomAgent
from connect4_ai.core.constants import (
    NUM_COLS, NUM_ROWS, EMPTY_SYMBOL, PLAYER_CELL_VALUES, PLAYER_SYMBOLS, PLAYER_STYLES, Player
)
from connect4_ai.core.game import Board, Game, GameResult
from connect4_ai.mcts.agent import MCTSAgent
from connect4_ai.mcts.config import MCTSConfig

logger = logging.getLogger(__name__)

console = Console()


def parse_args(argv=None):
    """Parse command-line arguments for game configuration."""
    parser = argparse.ArgumentParser(description="Play Connect Four against an MCTS agent")

    parser.add_argument("--first", type=str, default="human", choices=["human", "ai"],
                        help="Who makes the first move")
    parser.add_argument("--iterations", type=int, default=MCTSConfig.iterations,
                        help="Number of MCTS iterations per agent move")
    parser.add_argument("--warmup", type=int, default=MCTSConfig.warmup_iterations,
                        help="Number of MCTS iterations run on reset")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed")
    parser.add_argument("--self-play", type=int, default=0, metavar="GAMES",
                        help="Play GAMES games of the agent against a random player instead")
    parser.add_argument("--debug", action="store_true",
                        help="Show debug information")

    return parser.parse_args(argv)


def render_board(board: Board) -> Text:
    """
    Render the board with coloured discs.

    Args:
        board: Board to render

    Returns:
        Rich text, top row first, with column numbers underneath
    """
    grid = board.to_array()
    owners = {value: player for player, value in PLAYER_CELL_VALUES.items()}
    text = Text()
    for row in reversed(range(NUM_ROWS)):
        for col in range(NUM_COLS):
            owner = owners.get(int(grid[row, col]))
            if owner is None:
                text.append(EMPTY_SYMBOL, style="dim")
            else:
                text.append(PLAYER_SYMBOLS[owner], style=PLAYER_STYLES[owner])
            text.append(" ")
        text.append("\n")
    text.append(" ".join(str(col + 1) for col in range(NUM_COLS)), style="bold")
    return text


def get_human_move(game: Game) -> Optional[str]:
    """
    Ask the human for a column.

    Returns:
        A column index as a string, "r" to reset or "q" to quit
    """
    while True:
        choice = console.input(f"\nYour move (1-{NUM_COLS}, r = reset, q = quit): ").strip().lower()
        if choice in ("r", "q"):
            return choice
        try:
            column = int(choice) - 1
        except ValueError:
            console.print("Invalid input. Please enter a number.")
            continue
        if column in game.legal_moves():
            return str(column)
        console.print(f"Column {choice} is not playable.")


def announce_result(game: Game, human: Player) -> None:
    console.print(render_board(game.board))
    console.print("\n[bold yellow]=== GAME OVER ===[/bold yellow]")
    if game.result is GameResult.DRAW:
        console.print("[bold]It's a draw![/bold]")
    elif game.winner is human:
        console.print("[bold green]You win![/bold green]")
    else:
        console.print("[bold red]The AI wins![/bold red]")


def play_game(args, config: MCTSConfig) -> bool:
    """
    Play one interactive game.

    Returns:
        False if the human asked to quit
    """
    game = Game()
    agent = MCTSAgent(config=config, name="MCTS AI")
    human = Player.A if args.first == "human" else Player.B

    while not game.game_over:
        console.print(render_board(game.board))

        if game.current_player is human:
            choice = get_human_move(game)
            if choice == "q":
                return False
            if choice == "r":
                console.print("Reset")
                game.reset()
                agent.reset()
                continue
            column = int(choice)
            game.play(column)
            if not game.game_over:
                agent.observe_move(column)
        else:
            console.print(f"\n{agent.name} is thinking...")
            column, value = agent.select_move()
            game.play(column)
            console.print(f"Best move: {column + 1}, utility: {value:.3f}")
            if args.debug:
                stats = agent.get_last_statistics()
                console.print(f"Nodes: {stats['node_count']} ({stats['reachable_nodes']} reachable), "
                              f"time: {stats['time_elapsed']:.2f}s")

    announce_result(game, human)
    return True


def run_self_play(num_games: int, config: MCTSConfig, seed: Optional[int] = None) -> Dict[str, int]:
    """
    Play the MCTS agent against a random player.

    The agent opens in even-numbered games and replies in odd-numbered ones.

    Args:
        num_games: Number of games to play
        config: Agent configuration
        seed: Seed for the random player

    Returns:
        Win, draw and loss counts from the agent's point of view
    """
    agent = MCTSAgent(config=config)
    opponent = RandomAgent(seed=seed)
    results = {"wins": 0, "draws": 0, "losses": 0}

    for i in tqdm(range(num_games), desc="Self-play"):
        game = Game()
        agent.reset()
        agent_player = Player.A if i % 2 == 0 else Player.B

        while not game.game_over:
            if game.current_player is agent_player:
                column, _ = agent.select_move()
                game.play(column)
            else:
                column = opponent.select_move(game.board)
                game.play(column)
                if not game.game_over:
                    agent.observe_move(column)

        if game.result is GameResult.DRAW:
            results["draws"] += 1
        elif game.winner is agent_player:
            results["wins"] += 1
        else:
            results["losses"] += 1
        logger.debug("Game %d: %s, moves %s", i + 1, game.result.name, game.moves)

    return results


def main(argv=None):
    """Main function."""
    args = parse_args(argv)

    if args.debug:
        level = logging.DEBUG
    elif args.self_play:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = MCTSConfig(
            warmup_iterations=args.warmup,
            iterations=args.iterations,
            verbose_final_iteration=args.debug,
            seed=args.seed
        )
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if args.self_play:
        results = run_self_play(args.self_play, config, seed=args.seed)
        console.print(f"Wins: {results['wins']}, draws: {results['draws']}, losses: {results['losses']}")
        return

    console.print("[bold yellow]Welcome to Connect Four![/bold yellow]")
    try:
        while play_game(args, config):
            play_again = console.input("\nPlay again? (y/n): ").strip().lower()
            if play_again not in ("y", "yes"):
                break
    except KeyboardInterrupt:
        console.print("\nGame interrupted by user.")
    console.print("Thanks for playing!")


if __name__ == "__main__":
    main()
