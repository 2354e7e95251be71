"""Falling block game engine."""
from .pieces import Piece, PieceKind, Rotation, Shape, CATALOGUE, get_shape, new_piece, random_piece
from .field import FieldBuffer
from .anim import Animator, AnimationStep, FixedStep, CollapseStep
from .keymap import Action, KeyMap, KeymapEntry
from .scoring import ScoreKind, ScoreState, gravity_interval
from .engine import GameEngine, GameState, GravityTimer
from .leaderboard import Leaderboard, ScoreEntry
from .title import Title

__all__ = [
    "Piece",
    "PieceKind",
    "Rotation",
    "Shape",
    "CATALOGUE",
    "get_shape",
    "new_piece",
    "random_piece",
    "FieldBuffer",
    "Animator",
    "AnimationStep",
    "FixedStep",
    "CollapseStep",
    "Action",
    "KeyMap",
    "KeymapEntry",
    "ScoreKind",
    "ScoreState",
    "gravity_interval",
    "GameEngine",
    "GameState",
    "GravityTimer",
    "Leaderboard",
    "ScoreEntry",
    "Title",
]
