import unittest
import sys
import os

# --- Path Setup ---
current_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(current_dir)
sys.path.insert(0, project_root)

# --- Project Imports ---
from agent import (create_agent, TuplePlayer, RandomSlider, GreedySlider,
                   RandomPlayer, MctsPlayer, AGENT_TYPES)
from config import config, ConfigError, AgentConfig, parse_properties
from game import BLACK, WHITE, Slide
from fake_boards import SlideBoard, ScriptedBoard, PlacementBoard


class TestAgentConfig(unittest.TestCase):

    def test_later_keys_override_earlier(self):
        meta = parse_properties("name=unknown role=unknown", "name=mcts", "name=mine seed=4")
        self.assertEqual(meta, {"name": "mine", "role": "unknown", "seed": "4"})

    def test_bare_token_maps_to_itself(self):
        self.assertEqual(parse_properties("verbose"), {"verbose": "verbose"})

    def test_typed_fields(self):
        cfg = AgentConfig.parse("seed=12 alpha=0.01 init=65536,65536 timeout=250 simulation=40 save=w.bin")
        self.assertEqual(cfg.seed, 12)
        self.assertAlmostEqual(cfg.alpha, 0.01)
        self.assertEqual(cfg.init, (65536, 65536))
        self.assertEqual(cfg.timeout, 250)
        self.assertEqual(cfg.simulation, 40)
        self.assertEqual(cfg.save, "w.bin")
        self.assertIsNone(cfg.load)

    def test_defaults(self):
        cfg = AgentConfig.parse("")
        self.assertEqual(cfg.name, "unknown")
        self.assertEqual(cfg.role, "unknown")
        self.assertIsNone(cfg.seed)
        self.assertAlmostEqual(cfg.alpha, config.LEARNING_RATE)
        self.assertEqual(cfg.timeout, config.TIME_BUDGET_MS)
        self.assertAlmostEqual(cfg.c, config.EXPLORATION_C)

    def test_coercion_failures_are_parse_errors(self):
        for args in ("seed=abc", "alpha=fast", "timeout=1.5", "init=16,x"):
            with self.assertRaises(ConfigError, msg=args):
                AgentConfig.parse(args)


class TestAgentConstruction(unittest.TestCase):

    def test_factory_builds_every_kind(self):
        self.assertIsInstance(create_agent("slide"), RandomSlider)
        self.assertIsInstance(create_agent("greedy"), GreedySlider)
        self.assertIsInstance(create_agent("random", "role=black"), RandomPlayer)
        self.assertIsInstance(create_agent("mcts", "role=white"), MctsPlayer)
        self.assertIn("tuple", AGENT_TYPES)

    def test_unknown_kind(self):
        with self.assertRaises(ConfigError):
            create_agent("minimax")

    def test_invalid_name(self):
        for name in ("a[b", "x:y", "semi;colon", "(paren)"):
            with self.assertRaises(ConfigError, msg=name):
                create_agent("slide", f"name={name}")

    def test_placement_players_need_a_colour(self):
        for kind in ("random", "mcts"):
            with self.assertRaises(ConfigError):
                create_agent(kind)
            with self.assertRaises(ConfigError):
                create_agent(kind, "role=red")
        self.assertEqual(create_agent("mcts", "role=black").who, BLACK)
        self.assertEqual(create_agent("random", "role=white").who, WHITE)

    def test_tuple_player_needs_weights(self):
        with self.assertRaises(ConfigError):
            TuplePlayer("name=td")

    def test_tuple_player_init_sizes(self):
        player = create_agent("tuple", "init=" + ",".join([str(config.TABLE_SIZE)] * config.NUM_TABLES))
        self.assertEqual(len(player.network), config.NUM_TABLES)
        self.assertEqual(player.name, "tuple")
        self.assertEqual(player.role, "slider")

    def test_notify_sets_property(self):
        agent = create_agent("slide", "name=s1")
        agent.notify("seed=9")
        self.assertEqual(agent.property("seed"), "9")
        self.assertEqual(agent.config.seed, 9)

    def test_every_kind_reports_name_and_role(self):
        args = {
            "tuple": "init=" + ",".join([str(config.TABLE_SIZE)] * config.NUM_TABLES),
            "random": "role=black",
            "mcts": "role=white",
        }
        for kind in AGENT_TYPES:
            agent = create_agent(kind, args.get(kind, "") + " name=p1")
            self.assertEqual(agent.name, "p1", kind)
            self.assertEqual(agent.property("role"), agent.role, kind)

    def test_failed_notify_leaves_agent_unchanged(self):
        agent = create_agent("slide", "name=s1 seed=3")
        with self.assertRaises(ConfigError):
            agent.notify("seed=abc")
        self.assertEqual(agent.property("seed"), "3")
        self.assertEqual(agent.config.seed, 3)
        agent.notify("name=s2")
        self.assertEqual(agent.name, "s2")
        self.assertEqual(agent.config.seed, 3)

    def test_notify_rejects_reserved_name(self):
        agent = create_agent("slide", "name=s1")
        for name in ("bad;name", "a b", "x[1]"):
            with self.assertRaises(ConfigError, msg=name):
                agent.notify(f"name={name}")
        self.assertEqual(agent.name, "s1")
        self.assertEqual(agent.config.name, "s1")


class TestBaselineAgents(unittest.TestCase):

    def test_random_slider_plays_legal_moves(self):
        board = SlideBoard([0, 0, 0, 0,
                            1, 2, 1, 2,
                            2, 1, 2, 1,
                            1, 2, 1, 2])
        slider = RandomSlider("seed=5")
        for _ in range(10):
            self.assertEqual(slider.take_action(board), Slide(0))

    def test_random_slider_is_reproducible(self):
        board = SlideBoard([1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1])
        first = [RandomSlider("seed=11").take_action(board) for _ in range(3)]
        second = [RandomSlider("seed=11").take_action(board) for _ in range(3)]
        self.assertEqual(first, second)

    def test_random_slider_stuck(self):
        self.assertIsNone(RandomSlider().take_action(ScriptedBoard({})))

    def test_greedy_slider_looks_one_move_ahead(self):
        # Up pays 8 and then gets stuck (8 - 1); down pays nothing but sets up 16.
        zeros = [0] * 16
        board = ScriptedBoard({
            0: (8, zeros, {}),
            2: (0, zeros, {1: (16, zeros)}),
        })
        self.assertEqual(GreedySlider().take_action(board), Slide(2))
        self.assertIsNone(GreedySlider().take_action(ScriptedBoard({})))

    def test_greedy_slider_on_merging_board(self):
        # Right and left both merge the 2s, but only right lines up the two 8s.
        board = SlideBoard([0, 0, 0, 0,
                            0, 0, 0, 0,
                            3, 0, 0, 0,
                            1, 1, 0, 3])
        self.assertEqual(GreedySlider().take_action(board), Slide(1))

    def test_random_player_picks_a_legal_cell(self):
        board = PlacementBoard(cells=[BLACK, 0, 0, 0, 0, 0, 0, 0, 0])
        player = RandomPlayer("role=black seed=2")
        for _ in range(10):
            move = player.take_action(board)
            self.assertIn(move.position, board.legal_positions(BLACK))

    def test_random_player_stuck(self):
        board = PlacementBoard(side=2, cells=[BLACK, WHITE, WHITE, BLACK])
        self.assertIsNone(RandomPlayer("role=white").take_action(board))


if __name__ == '__main__':
    unittest.main(verbosity=2)
