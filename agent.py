# agent.py
# The closed set of players. Every variant exposes open_episode, close_episode,
# take_action and notify; the variant is picked once, at construction.

import random
import logging
from abc import ABC, abstractmethod

from config import config, ConfigError, AgentConfig, parse_properties
from game import ROLES, ILLEGAL, Slide, opponent_of, placement_space
from mcts import MCTS
from td_learning import TDTrainer, search_2ply
from tuple_network import FeatureNetwork
from weight_store import load_weights, save_weights


class Agent(ABC):
    defaults = ""

    def __init__(self, args: str = ""):
        self.meta = parse_properties("name=unknown role=unknown", self.defaults, args)
        self.config = AgentConfig.from_meta(self.meta)
        self.logger = logging.getLogger(f"{self.__class__.__name__}-{self.name}")

    def open_episode(self, flag: str = ""):
        pass

    def close_episode(self, flag: str = ""):
        pass

    @abstractmethod
    def take_action(self, board):
        """Returns an action for `board`, or None when there is nothing to play."""

    def notify(self, msg: str):
        key, _, value = msg.partition("=")
        meta = {**self.meta, key: value}
        # Nothing changes unless the new properties parse.
        self.config = AgentConfig.from_meta(meta)
        self.meta = meta

    @property
    def name(self) -> str:
        return self.meta["name"]

    @property
    def role(self) -> str:
        return self.meta["role"]

    def property(self, key: str) -> str:
        return self.meta[key]


class RandomAgent(Agent):
    """Base for agents with their own seeded random engine."""
    def __init__(self, args: str = ""):
        super().__init__(args)
        self.rng = random.Random(self.config.seed)


# =================================================================
#                          Tile game
# =================================================================

class TuplePlayer(Agent):
    """
    Slider driven by an n-tuple value function and trained by backward TD(0)
    at the end of each episode. Weights are saved by close() when `save=` is set.
    """
    defaults = "name=tuple role=slider"

    def __init__(self, args: str = "", network=None):
        super().__init__(args)
        if network is None:
            network = self._build_network()
        self.network = network
        self.trainer = TDTrainer(self.network, self.config.alpha)
        self.episode = []

    def _build_network(self):
        if self.config.load:
            return FeatureNetwork(load_weights(self.config.load))
        if self.config.init:
            self.logger.info(f"Initialized {len(self.config.init)} zero tables.")
            return FeatureNetwork.from_sizes(self.config.init)
        raise ConfigError(f"{self.name}: weight tables need init= or load=")

    def notify(self, msg: str):
        super().notify(msg)
        self.trainer.alpha = self.config.alpha

    def open_episode(self, flag: str = ""):
        self.episode.clear()

    def close_episode(self, flag: str = ""):
        self.trainer.train(self.episode)
        self.episode.clear()

    def take_action(self, before):
        best = search_2ply(self.network, before)
        if best is None:
            return None
        move, step = best
        self.episode.append(step)
        return move

    def close(self):
        if self.config.save:
            save_weights(self.config.save, self.network.tables)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False


class RandomSlider(RandomAgent):
    """Plays a uniformly random legal slide."""
    defaults = "name=slide role=slider"

    def __init__(self, args: str = ""):
        super().__init__(args)
        self.opcode = list(range(config.NUM_DIRECTIONS))

    def take_action(self, before):
        self.rng.shuffle(self.opcode)
        for op in self.opcode:
            if before.copy().slide(op) != ILLEGAL:
                return Slide(op)
        return None


class GreedySlider(Agent):
    """Maximizes the slide reward plus the best follow-up slide reward."""
    defaults = "name=greedy role=slider"

    def take_action(self, before):
        best_op, best_total = None, ILLEGAL
        for op in range(config.NUM_DIRECTIONS):
            after = before.copy()
            reward = after.slide(op)
            if reward == ILLEGAL:
                continue
            follow_up = max(after.copy().slide(s_op) for s_op in range(config.NUM_DIRECTIONS))
            # An illegal follow-up counts as -1.
            total = reward + follow_up
            if best_op is None or total > best_total:
                best_op, best_total = op, total
        return Slide(best_op) if best_op is not None else None


# =================================================================
#                          Placement game
# =================================================================

class PlacementAgent(RandomAgent):
    """Placement players play one colour, given by role=black or role=white."""
    def __init__(self, args: str = ""):
        super().__init__(args)
        if self.role not in ROLES:
            raise ConfigError(f"invalid role: {self.role}")
        self.who = ROLES[self.role]
        self.opponent = opponent_of(self.who)


class RandomPlayer(PlacementAgent):
    """Puts a piece on a random legal cell."""
    defaults = "name=random role=unknown"

    def __init__(self, args: str = ""):
        super().__init__(args)
        self.space = []

    def take_action(self, state):
        if len(self.space) != state.size:
            self.space = placement_space(state.size, self.who)
        self.rng.shuffle(self.space)
        for move in self.space:
            if move.is_legal(move.apply(state.copy())):
                return move
        return None


class MctsPlayer(PlacementAgent):
    """UCB1 tree search bounded by `timeout` milliseconds and, optionally, `simulation` iterations."""
    defaults = "name=mcts role=unknown"

    def __init__(self, args: str = ""):
        super().__init__(args)
        self.engine = MCTS(self.who, rng=self.rng, exploration_c=self.config.c)

    def notify(self, msg: str):
        super().notify(msg)
        self.engine.exploration_c = self.config.c

    def take_action(self, state):
        return self.engine.search(state, self.config.timeout, self.config.simulation)


AGENT_TYPES = {
    "tuple": TuplePlayer,
    "slide": RandomSlider,
    "greedy": GreedySlider,
    "random": RandomPlayer,
    "mcts": MctsPlayer,
}


def create_agent(kind: str, args: str = "") -> Agent:
    if kind not in AGENT_TYPES:
        raise ConfigError(f"unknown agent kind: {kind!r}")
    return AGENT_TYPES[kind](args)
