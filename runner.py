# runner.py
# Drives episodes between agents over an external board.

import logging

from torch.utils.tensorboard import SummaryWriter
from tqdm import tqdm

from config import config
from data_structures import EpisodeResult
from utils import EpisodeStats

logger = logging.getLogger("Runner")


def log_agent_config(agents):
    """Logs the key configuration of every agent at startup."""
    header = "=" * 30
    details = f"\n{header} Agents {header}\n"
    for agent in agents:
        details += f"[{agent.name}] {type(agent).__name__}\n"
        for key, value in sorted(agent.meta.items()):
            details += f"  - {key}: {value}\n"
    details += header + "========" + header
    logger.info(details)


def play_episode(board, agents, max_steps=None) -> EpisodeResult:
    """
    Lets `agents` act in turn on `board` until one of them has no action
    (or plays an illegal one). Every agent sees open_episode/close_episode once.
    """
    for agent in agents:
        agent.open_episode()

    score, steps, last_agent = 0, 0, None
    while max_steps is None or steps < max_steps:
        agent = agents[steps % len(agents)]
        move = agent.take_action(board)
        if move is None:
            last_agent = agent.name
            break
        result = move.apply(board)
        if not move.is_legal(result):
            logger.warning(f"{agent.name} played illegal action {move}. Ending episode.")
            last_agent = agent.name
            break
        if not isinstance(result, bool):
            score += result
        steps += 1

    for agent in agents:
        agent.close_episode()
    return EpisodeResult(score, steps, last_agent)


def run_episodes(board_factory, agents, episodes, log_interval=config.LOG_INTERVAL,
                 log_dir=None, max_steps=None, show_progress=True) -> EpisodeStats:
    """
    Plays `episodes` episodes on fresh boards from `board_factory`. A summary is
    logged every `log_interval` episodes; per-episode scalars go to TensorBoard
    when `log_dir` is given.
    """
    log_agent_config(agents)
    stats = EpisodeStats(log_interval)
    writer = SummaryWriter(log_dir) if log_dir else None
    try:
        progress = tqdm(range(episodes), desc="Episodes", dynamic_ncols=True, disable=not show_progress)
        for episode in progress:
            result = play_episode(board_factory(), agents, max_steps)
            stats.update(result)
            if writer is not None:
                writer.add_scalar('Episode/Score', result.score, episode)
                writer.add_scalar('Episode/Steps', result.steps, episode)
            if (episode + 1) % log_interval == 0:
                logger.info(stats.summary())
                progress.set_postfix(mean_score=f"{stats.mean_score():.1f}")
                if writer is not None:
                    writer.add_scalar('Window/Mean_Score', stats.mean_score(), episode)
                    writer.add_scalar('Window/Max_Score', stats.max_score(), episode)
    finally:
        if writer is not None:
            writer.close()
    return stats
