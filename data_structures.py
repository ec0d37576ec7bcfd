# data_structures.py

from collections import namedtuple

# One move of the TD agent: the board right after its slide and the slide reward.
EpisodeStep = namedtuple('EpisodeStep', [
    'after',     # afterstate board (private copy)
    'reward'     # reward of the slide that produced it (int)
])

# Summary of one episode played by the runner.
EpisodeResult = namedtuple('EpisodeResult', [
    'score',       # sum of rewards returned by legal actions
    'steps',       # number of actions applied
    'last_agent'   # name of the agent that could not act (None if capped)
])
