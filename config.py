# config.py

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


class ConfigError(ValueError):
    """Raised when an agent is constructed from an invalid configuration."""


class Config:
    def __init__(self):
        # ================================================================
        #                      Tuple network (tile game)
        # ================================================================
        self.TUPLE_BASE = 16
        self.TUPLE_LENGTH = 6
        self.NUM_TABLES = 8
        self.TABLE_SIZE = self.TUPLE_BASE ** self.TUPLE_LENGTH
        self.LEARNING_RATE = 0.1 / 64
        self.NUM_DIRECTIONS = 4

        # ================================================================
        #                      MCTS (placement game)
        # ================================================================
        self.EXPLORATION_C = 0.8
        # Score for an unvisited child. Large but finite so ties keep enumeration order.
        self.UNVISITED_SCORE = 1_000_000.0
        self.CHECK_INTERVAL = 500
        self.TIME_BUDGET_MS = 1000

        # ================================================================
        #                      Runner & logging
        # ================================================================
        self.LOG_INTERVAL = 1000
        self.LOG_FILE = "outputs/training.log"
        self.TENSORBOARD_DIR = "outputs/logs"

        # Characters that may not appear in an agent name.
        self.RESERVED_NAME_CHARS = "[]():; "

config = Config()


def parse_properties(*args: str) -> Dict[str, str]:
    """Parses whitespace-separated key=value strings; later keys override earlier ones."""
    meta = {}
    for arg in args:
        for pair in arg.split():
            key, sep, value = pair.partition("=")
            # A bare token behaves like 'token=token'.
            meta[key] = value if sep else key
    return meta


def _coerce(meta, key, kind, default):
    if key not in meta:
        return default
    try:
        return kind(meta[key])
    except ValueError:
        raise ConfigError(f"invalid value for '{key}': {meta[key]!r}") from None


def _parse_sizes(info: str) -> Tuple[int, ...]:
    # comma-separated sizes, e.g., "65536,65536"
    sizes = []
    for token in info.replace(",", " ").split():
        if not token.isdigit():
            raise ConfigError(f"invalid table size in init: {token!r}")
        sizes.append(int(token))
    return tuple(sizes)


@dataclass
class AgentConfig:
    """Typed view of an agent's key=value properties."""
    name: str = "unknown"
    role: str = "unknown"
    seed: Optional[int] = None
    init: Tuple[int, ...] = ()
    load: Optional[str] = None
    save: Optional[str] = None
    alpha: float = config.LEARNING_RATE
    simulation: int = 0
    timeout: int = config.TIME_BUDGET_MS
    c: float = config.EXPLORATION_C
    meta: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_meta(cls, meta: Dict[str, str]) -> "AgentConfig":
        name = meta.get("name", "unknown")
        if any(ch in config.RESERVED_NAME_CHARS for ch in name):
            raise ConfigError(f"invalid name: {name}")
        return cls(
            name=name,
            role=meta.get("role", "unknown"),
            seed=_coerce(meta, "seed", int, None),
            init=_parse_sizes(meta["init"]) if "init" in meta else (),
            load=meta.get("load"),
            save=meta.get("save"),
            alpha=_coerce(meta, "alpha", float, config.LEARNING_RATE),
            simulation=_coerce(meta, "simulation", int, 0),
            timeout=_coerce(meta, "timeout", int, config.TIME_BUDGET_MS),
            c=_coerce(meta, "c", float, config.EXPLORATION_C),
            meta=dict(meta),
        )

    @classmethod
    def parse(cls, *args: str) -> "AgentConfig":
        return cls.from_meta(parse_properties("name=unknown role=unknown", *args))
