# td_learning.py
# Move selection and backward TD(0) training over afterstates.

import logging

from config import config
from data_structures import EpisodeStep
from game import ILLEGAL, Slide


def search_2ply(network, before):
    """
    Tries every slide on a private copy of `before` and scores it as
    reward + V(afterstate). Returns (Slide, EpisodeStep) for the first
    maximal move, or None when no slide is legal.
    """
    best, best_score = None, float('-inf')
    for op in range(config.NUM_DIRECTIONS):
        after = before.copy()
        reward = after.slide(op)
        if reward == ILLEGAL:
            continue
        score = reward + network.evaluate(after)
        if score > best_score:
            best, best_score = (Slide(op), EpisodeStep(after, reward)), score
    return best


class TDTrainer:
    """Single backward sweep over a closed episode."""
    def __init__(self, network, alpha=config.LEARNING_RATE):
        self.network = network
        self.alpha = alpha
        self.logger = logging.getLogger("TDTrainer")

    def update(self, after, target: float) -> float:
        return self.network.update(after, target, self.alpha)

    def train(self, episode) -> int:
        """
        The last afterstate is pulled toward 0. Each earlier afterstate is pulled
        toward r_{i+1} + V(s_{i+1}), where V(s_{i+1}) is read after s_{i+1} was
        itself updated in this sweep. Returns the number of updates.
        """
        if not episode:
            return 0
        last = episode[-1]
        self.update(last.after, 0.0)
        for i in range(len(episode) - 2, -1, -1):
            following = episode[i + 1]
            target = following.reward + self.network.evaluate(following.after)
            self.update(episode[i].after, target)
        self.logger.debug(f"Trained {len(episode)} afterstates.")
        return len(episode)
