"""
Tests for the MCTS engine, node statistics and agent.
"""
import logging

import pytest

from connect4_ai import new_engine
from connect4_ai.agents import RandomAgent
from connect4_ai.core.constants import NUM_COLS, NUM_ROWS, Player
from connect4_ai.core.game import Board, Game, GameResult
from connect4_ai.mcts import DEFAULT_CONFIG
from connect4_ai.mcts.agent import MCTSAgent, MCTSAgentFactory
from connect4_ai.mcts.config import MCTSConfig
from connect4_ai.mcts.node import MCTSNode, ucb, utility
from connect4_ai.mcts.search import MCTS
from connect4_ai.play import parse_args, render_board, run_self_play


def place(board: Board, player: Player, column: int):
    if board.current_player() is not player:
        board.switch_turn()
    return board.drop(column)


def test_ucb():
    parent = MCTSNode(Board())
    node = MCTSNode(Board())
    assert ucb(node, parent) == float('inf')

    parent.visits = 2.0
    node.value = 20.0
    node.visits = 1.0
    assert abs(ucb(node, parent) - 21.67) < 0.01


def test_unvisited_node_beats_any_visited_node():
    parent = MCTSNode(Board())
    parent.visits = 1000.0
    visited = MCTSNode(Board())
    visited.visits = 1.0
    visited.value = 1.0
    assert ucb(MCTSNode(Board()), parent) > ucb(visited, parent)


def test_utility():
    node = MCTSNode(Board())
    node.visits = 4.0
    node.value = -2.0
    assert utility(node) == -0.5


def test_new_engine_has_single_root():
    engine = new_engine(seed=0)
    assert engine.node_count == 1
    assert engine.root == 0
    assert not engine.root_node.is_expanded()


def test_first_iteration_expands_root():
    engine = MCTS(seed=1)
    reward = engine.run_iteration()

    root = engine.root_node
    assert reward in (-1.0, 0.0, 1.0)
    assert [move for move, _ in root.children] == list(range(NUM_COLS))
    assert engine.node_count == 1 + NUM_COLS
    assert root.visits == 1
    assert sum(engine.nodes[child].visits for _, child in root.children) == 1


def test_expanded_children_hold_the_movers_stones():
    engine = MCTS(seed=2)
    engine.expand(engine.root)
    root_state = engine.root_node.state
    for move, index in engine.root_node.children:
        state = engine.nodes[index].state
        assert state.current_player() is root_state.current_player().other
        assert state.num_stones[move] == 1
        assert sum(state.num_stones) == 1
        assert state.owner_of(move, 0) is state.current_player()


def test_expand_terminal_node_is_noop():
    engine = MCTS(seed=3)
    board = Board()
    for _ in range(4):
        board.drop(0)
    engine.nodes[0].state = board
    assert not engine.expand(0)
    assert engine.node_count == 1


def test_select_child_unexpanded():
    engine = MCTS(seed=4)
    assert engine.select_child(engine.root) is None
    assert engine.select() == [engine.root]


def test_select_child_prefers_unvisited():
    engine = MCTS(seed=5)
    engine.expand(engine.root)
    root = engine.root_node
    root.visits = 10.0
    for _, index in root.children[:-1]:
        engine.nodes[index].visits = 1.0
        engine.nodes[index].value = 1.0
    assert engine.select_child(engine.root) == root.children[-1][1]


def test_select_child_breaks_ties_at_random():
    engine = MCTS(seed=6)
    engine.expand(engine.root)
    chosen = {engine.select_child(engine.root) for _ in range(100)}
    assert len(chosen) > 1
    assert chosen <= {index for _, index in engine.root_node.children}


def test_backpropagate_alternates_sign():
    engine = MCTS(seed=7)
    engine.expand(engine.root)
    child = engine.root_node.children[0][1]
    engine.expand(child)
    grandchild = engine.nodes[child].children[0][1]

    engine.backpropagate([engine.root, child, grandchild], 1.0)

    assert engine.root_node.value == 1.0
    assert engine.nodes[child].value == -1.0
    assert engine.nodes[grandchild].value == 1.0
    assert all(engine.nodes[i].visits == 1 for i in (engine.root, child, grandchild))


def test_rollout_from_won_position_returns_winner():
    engine = MCTS(seed=8)
    board = Board()
    place(board, Player.B, 6)
    for _ in range(4):
        place(board, Player.A, 0)
    engine.nodes[0].state = board
    assert engine.rollout(0) is Player.A


def test_rollout_reaches_terminal_state():
    engine = MCTS(seed=9)
    for _ in range(20):
        assert engine.rollout(engine.root) in (Player.A, Player.B, None)


def test_iteration_on_terminal_root():
    engine = MCTS(seed=10)
    board = Board()
    for _ in range(4):
        board.drop(5)
    engine.nodes[0].state = board

    assert engine.run_iteration() == 1.0
    assert engine.root_node.visits == 1
    assert engine.node_count == 1


def test_best_move_requires_search():
    engine = MCTS(seed=11)
    with pytest.raises(ValueError):
        engine.best_move()


def test_apply_move_requires_search():
    engine = MCTS(seed=12)
    with pytest.raises(ValueError):
        engine.apply_move(3)


def test_best_move_on_empty_board():
    engine = MCTS(seed=13)
    engine.search(300)
    move, value = engine.best_move()
    assert 0 <= move < NUM_COLS
    assert engine.root_node.state.num_stones[move] < NUM_ROWS
    assert -1.0 <= value <= 1.0


def test_best_move_skips_full_column():
    engine = MCTS(seed=14)
    board = Board()
    for i in range(NUM_ROWS):
        place(board, Player.A if (i // 2) % 2 == 0 else Player.B, 3)
    engine.nodes[0].state = board
    engine.search(200)
    move, _ = engine.best_move()
    assert move != 3
    assert 3 not in [m for m, _ in engine.root_node.children]


def test_best_move_takes_immediate_win():
    engine = MCTS(seed=15)
    board = Board()
    for _ in range(3):
        place(board, Player.A, 0)
    place(board, Player.B, 1)
    place(board, Player.B, 1)
    engine.nodes[0].state = board

    engine.search(300)
    move, value = engine.best_move()
    assert move == 0
    assert value == 1.0


def test_best_move_ties_go_to_first_column():
    engine = MCTS(seed=16)
    engine.expand(engine.root)
    for _, index in engine.root_node.children:
        engine.nodes[index].visits = 2.0
        engine.nodes[index].value = 1.0
    assert engine.best_move() == (0, 0.5)


def test_apply_move_advances_root():
    engine = MCTS(seed=17)
    engine.search(50)
    previous = engine.root_node.state
    child = engine.root_node.child_for(4)

    engine.apply_move(4)

    assert engine.root == child
    state = engine.root_node.state
    assert state.current_player() is previous.current_player().other
    for column in range(NUM_COLS):
        expected = previous.num_stones[column] + (1 if column == 4 else 0)
        assert state.num_stones[column] == expected


def test_apply_move_keeps_subtree_statistics():
    engine = MCTS(seed=18)
    engine.search(200)
    child = engine.root_node.child_for(2)
    visits = engine.nodes[child].visits
    nodes_before = engine.node_count

    engine.apply_move(2)

    assert engine.root_node.visits == visits
    assert engine.node_count == nodes_before
    assert engine.count_reachable() < engine.node_count


def test_root_reward_sign_follows_root_player():
    engine = MCTS(seed=19)
    engine.search(100)
    root = engine.root_node
    assert root.value == -sum(engine.nodes[i].value for _, i in root.children)


def test_verbose_iteration_logs_path(caplog):
    engine = MCTS(seed=20)
    engine.search(5)
    with caplog.at_level(logging.INFO, logger="connect4_ai.mcts.search"):
        engine.run_iteration(verbose=True)
    assert "Path before expansion" in caplog.text
    assert "Playout result" in caplog.text
    assert "Path after backprop" in caplog.text


def test_action_statistics_and_principal_variation():
    engine = MCTS(seed=21)
    engine.search(200)
    stats = engine.get_action_statistics()
    assert sorted(stats) == list(range(NUM_COLS))
    assert sum(s["visits"] for s in stats.values()) == engine.root_node.visits

    variation = engine.get_principal_variation(max_depth=3)
    assert 1 <= len(variation) <= 3
    assert all(0 <= move < NUM_COLS for move, _ in variation)


def test_format_path():
    engine = MCTS(seed=22)
    engine.run_iteration()
    text = engine.format_path([engine.root])
    assert text.startswith("idx: 0 value:")
    assert "visits: 1" in text


def test_config_validation():
    with pytest.raises(ValueError):
        MCTSConfig(iterations=0)
    with pytest.raises(ValueError):
        MCTSConfig(warmup_iterations=-1)


def test_config_round_trip():
    config = MCTSConfig.from_dict({"iterations": 50, "seed": 3, "unknown": True})
    assert config.iterations == 50
    assert config.seed == 3
    assert config.to_dict() == {
        "warmup_iterations": 20,
        "iterations": 50,
        "verbose_final_iteration": True,
        "seed": 3,
    }
    assert "iterations=50" in str(config)
    assert DEFAULT_CONFIG == MCTSConfig()
    assert MCTSConfig.EXPLORATION_CONSTANT == 2.0


def test_agent_reset_runs_warmup():
    agent = MCTSAgent(MCTSConfig(warmup_iterations=20, iterations=10, seed=0))
    assert agent.engine.root_node.visits == 20
    agent.engine.search(5)
    agent.reset()
    assert agent.engine.root_node.visits == 20
    assert agent.move_history == []


def test_agent_follows_real_game():
    agent = MCTSAgent(MCTSConfig(warmup_iterations=20, iterations=100, seed=1))
    game = Game()

    game.play(3)
    agent.observe_move(3)
    column, value = agent.select_move()
    assert column in game.legal_moves()
    assert -1.0 <= value <= 1.0
    game.play(column)

    assert agent.engine.root_node.state.num_stones == game.board.num_stones
    stats = agent.get_last_statistics()
    assert stats["iterations"] == 100
    assert stats["node_count"] >= stats["reachable_nodes"]


def test_agent_observes_move_on_unexpanded_root():
    agent = MCTSAgent(MCTSConfig(warmup_iterations=0, iterations=10, seed=2))
    assert not agent.engine.root_node.is_expanded()
    agent.observe_move(5)
    assert agent.engine.root_node.state.num_stones[5] == 1


def test_agent_plays_full_game_against_random():
    agent = MCTSAgentFactory.create_fast(seed=3)
    agent.config.iterations = 50
    opponent = RandomAgent(seed=3)
    game = Game()
    while not game.game_over:
        if game.current_player is Player.A:
            column, _ = agent.select_move()
        else:
            column = opponent.select_move(game.board)
        assert game.play(column) is not None
        if game.current_player is Player.A and not game.game_over:
            agent.observe_move(column)
    assert game.result in (GameResult.WINNER, GameResult.DRAW)


def test_random_agent_without_moves():
    board = Board()
    for _ in range(4):
        board.drop(0)
    with pytest.raises(ValueError):
        RandomAgent(seed=0).select_move(board)


def test_self_play_counts_games():
    config = MCTSConfig(warmup_iterations=10, iterations=30, verbose_final_iteration=False, seed=4)
    results = run_self_play(2, config, seed=4)
    assert sum(results.values()) == 2


def test_cli_arguments():
    args = parse_args(["--first", "ai", "--iterations", "50", "--seed", "1"])
    assert args.first == "ai"
    assert args.iterations == 50
    assert args.warmup == 20
    assert args.self_play == 0


def test_render_board():
    board = Board()
    place(board, Player.A, 0)
    place(board, Player.B, 1)
    text = render_board(board).plain
    lines = text.splitlines()
    assert len(lines) == NUM_ROWS + 1
    assert lines[NUM_ROWS - 1].startswith("X O .")


def test_rollout_warns_when_waiting_player_already_won(caplog):
    engine = MCTS(seed=23)
    board = Board()
    for _ in range(4):
        board.drop(0)
    board.switch_turn()
    assert not board.is_terminal()
    engine.nodes[0].state = board

    with caplog.at_level(logging.WARNING, logger="connect4_ai.mcts.search"):
        winner = engine.rollout(0)

    assert winner is Player.A
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "No legal moves in non-terminal state" in warnings[0].getMessage()
    assert "[4, 0, 0, 0, 0, 0, 0]" in warnings[0].getMessage()


def test_rollout_games_end_in_a_terminal_position(monkeypatch):
    engine = MCTS(seed=24)
    finals = []
    original_is_win = Board.is_win

    def recording_is_win(board):
        result = original_is_win(board)
        finals.append((board, result))
        return result

    monkeypatch.setattr(Board, "is_win", recording_is_win)
    for _ in range(10):
        finals.clear()
        winner = engine.rollout(engine.root)
        board = finals[-1][0]
        if winner is None:
            assert board.is_full()
        else:
            assert board.current_player() is winner
            assert original_is_win(board)


def test_verbose_iteration_skips_node_dump_without_debug(caplog, monkeypatch):
    engine = MCTS(seed=25)
    engine.search(20)
    formatted = []
    original_format = engine.format_path

    def recording_format(path):
        path = list(path)
        formatted.append(len(path))
        return original_format(path)

    monkeypatch.setattr(engine, "format_path", recording_format)

    with caplog.at_level(logging.INFO, logger="connect4_ai.mcts.search"):
        engine.run_iteration(verbose=True)
    assert engine.node_count not in formatted
    assert len(formatted) == 2

    formatted.clear()
    with caplog.at_level(logging.DEBUG, logger="connect4_ai.mcts.search"):
        engine.run_iteration(verbose=True)
    assert len(formatted) == 3
    assert "All nodes" in caplog.text


def test_agent_builds_engine_on_construction():
    agent = MCTSAgent(MCTSConfig(warmup_iterations=0, iterations=10, seed=26))
    assert isinstance(agent.engine, MCTS)
    assert agent.engine.node_count == 1
