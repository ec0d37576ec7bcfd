# utils.py

from collections import Counter, deque

import numpy as np


class EpisodeStats:
    """Running summary of the last `window` episodes."""
    def __init__(self, window: int):
        self.window = window
        self.scores = deque(maxlen=window)
        self.steps = deque(maxlen=window)
        self.losers = Counter()
        self.total_episodes = 0

    def update(self, result):
        self.scores.append(result.score)
        self.steps.append(result.steps)
        if result.last_agent is not None:
            self.losers[result.last_agent] += 1
        self.total_episodes += 1

    def mean_score(self) -> float:
        return float(np.mean(self.scores)) if self.scores else 0.0

    def max_score(self) -> float:
        return float(np.max(self.scores)) if self.scores else 0.0

    def mean_steps(self) -> float:
        return float(np.mean(self.steps)) if self.steps else 0.0

    def summary(self) -> str:
        stuck = ", ".join(f"{name}: {count}" for name, count in sorted(self.losers.items()))
        return (f"{self.total_episodes} episodes | mean score {self.mean_score():.1f} | "
                f"max score {self.max_score():.1f} | mean steps {self.mean_steps():.1f} | "
                f"no move: [{stuck}]")
