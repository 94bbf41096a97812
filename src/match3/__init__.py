"""Match-3 tile puzzle engine with a tabular Q-learning harness."""

from .tiles import EMPTY, TileSet
from .config import DEFAULT_CONFIG, TRAINING_CONFIG, GameConfig
from .board import Board
from .matching import apply_gravity, detect_runs, resolve_cascade, run_score
from .generator import RowGenerator, RowOutcome
from .game_state import GameSnapshot, GameStatus
from .game import ALLOWED_MOVES, Action, Direction, Game
from .encoders import AdjacencyEncoder, FullGridEncoder, LocalWindowEncoder, StateEncoder, make_encoder
from .agent import AgentConfig, QLearningAgent, QTable
from .rewards import ScoreDeltaReward, ShapedReward
from .env import MatchEnv
from .gym_env import MatchGymEnv
from .training import DecaySchedule, Trainer, TrainingConfig
from .persistence import JsonTableStore, TableSnapshot, load_table
from .bot import Bot
from .scheduler import AsyncioTicker, ManualTicker
from .utils import render_ascii, render_grid

__all__ = [
    "EMPTY",
    "TileSet",
    "GameConfig",
    "DEFAULT_CONFIG",
    "TRAINING_CONFIG",
    "Board",
    "apply_gravity",
    "detect_runs",
    "resolve_cascade",
    "run_score",
    "RowGenerator",
    "RowOutcome",
    "GameSnapshot",
    "GameStatus",
    "ALLOWED_MOVES",
    "Action",
    "Direction",
    "Game",
    "StateEncoder",
    "FullGridEncoder",
    "LocalWindowEncoder",
    "AdjacencyEncoder",
    "make_encoder",
    "AgentConfig",
    "QLearningAgent",
    "QTable",
    "ShapedReward",
    "ScoreDeltaReward",
    "MatchEnv",
    "MatchGymEnv",
    "DecaySchedule",
    "Trainer",
    "TrainingConfig",
    "JsonTableStore",
    "TableSnapshot",
    "load_table",
    "Bot",
    "AsyncioTicker",
    "ManualTicker",
    "render_ascii",
    "render_grid",
]
