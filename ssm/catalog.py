"""Challenge catalog: the closed set of challenge kinds and their metadata.

Each challenge kind is one arm of :class:`ChallengeType`. Everything the
engine needs to know about a kind (display text, base weight, hardness of its
difficulty curve, category) lives in the single :data:`CHALLENGE_CATALOG`
table. The table is checked for exhaustiveness at import time, so adding an
enum arm without metadata fails immediately.

Scoring curve per module:

    curve(d) = (exp(k * d) - 1) / (exp(k) - 1)

where ``k`` is the hardness constant. Higher ``k`` keeps low difficulties
cheap and makes the top of the range climb steeply.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from rapidfuzz import fuzz, process

from .config_types import ScoringConfig
from .errors import InvalidInputError


class ChallengeCategory(str, Enum):
    CLASSIC = "classic"
    ARCADE = "arcade"
    PUZZLE = "puzzle"


class ChallengeType(str, Enum):
    # Classic locks
    PATTERN = "pattern"
    KEYPAD = "keypad"
    TIMING = "timing"
    COMBINATION = "combination"
    SEQUENCE = "sequence"
    SLIDER = "slider"
    ROTATION = "rotation"
    WIRE = "wire"
    FINGERPRINT = "fingerprint"
    MORSE = "morse"
    COLOR_CODE = "colorcode"
    SAFE_DIAL = "safedial"
    # Arcade
    PACMAN = "pacman"
    SPACE_INVADERS = "spaceinvaders"
    FROGGER = "frogger"
    DONKEY_KONG = "donkeykong"
    CENTIPEDE = "centipede"
    ASTEROIDS = "asteroids"
    SNAKE = "snake"
    BREAKOUT = "breakout"
    TETRIS = "tetris"
    GALAGA = "galaga"
    DIG_DUG = "digdug"
    QBERT = "qbert"
    # Puzzle
    QUICK_MATH = "quickmath"
    WORD_SCRAMBLE = "wordscramble"
    MEMORY_MATCH = "memorymatch"
    SUDOKU = "sudoku"
    JIGSAW = "jigsaw"
    WORD_SEARCH = "wordsearch"
    LOGIC = "logic"
    MAZE = "maze"
    SPOT_DIFF = "spotdiff"
    REACTION = "reaction"
    NUM_SEQUENCE = "numsequence"
    CIPHER = "cipher"


@dataclass(frozen=True)
class ChallengeSpec:
    name: str
    description: str
    category: ChallengeCategory
    base_weight: float
    hardness: float


def _classic(name: str, description: str, hardness: float) -> ChallengeSpec:
    return ChallengeSpec(name, description, ChallengeCategory.CLASSIC, 1.0, hardness)


def _arcade(name: str, description: str, hardness: float) -> ChallengeSpec:
    return ChallengeSpec(name, description, ChallengeCategory.ARCADE, 1.2, hardness)


def _puzzle(name: str, description: str, hardness: float) -> ChallengeSpec:
    return ChallengeSpec(name, description, ChallengeCategory.PUZZLE, 0.9, hardness)


CHALLENGE_CATALOG: Dict[ChallengeType, ChallengeSpec] = {
    ChallengeType.PATTERN: _classic("Pattern Lock", "Draw the correct pattern to unlock", 2.5),
    ChallengeType.KEYPAD: _classic("Keypad Code", "Memorize and enter the code sequence", 2.2),
    ChallengeType.TIMING: _classic("Timing Lock", "Stop the dial in the target zone", 2.0),
    ChallengeType.COMBINATION: _classic("Combination Lock", "Spin the wheels to the right digits", 2.1),
    ChallengeType.SEQUENCE: _classic("Sequence Lock", "Repeat the flashing light sequence", 2.3),
    ChallengeType.SLIDER: _classic("Slider Lock", "Line every slider up with its notch", 1.9),
    ChallengeType.ROTATION: _classic("Rotation Lock", "Rotate the tiles until the path connects", 2.2),
    ChallengeType.WIRE: _classic("Wire Cutter", "Cut the wires in the correct order", 2.4),
    ChallengeType.FINGERPRINT: _classic("Fingerprint Scanner", "Pick the print that matches the sample", 2.0),
    ChallengeType.MORSE: _classic("Morse Lock", "Decode the tapped Morse message", 2.6),
    ChallengeType.COLOR_CODE: _classic("Color Code", "Crack the hidden color combination", 2.3),
    ChallengeType.SAFE_DIAL: _classic("Safe Dial", "Feel the clicks and find the numbers", 2.5),
    ChallengeType.PACMAN: _arcade("Pac-Man", "Clear the pellets without getting caught", 2.6),
    ChallengeType.SPACE_INVADERS: _arcade("Space Invaders", "Shoot down the descending invaders", 2.5),
    ChallengeType.FROGGER: _arcade("Frogger", "Cross the road and river safely", 2.7),
    ChallengeType.DONKEY_KONG: _arcade("Donkey Kong", "Climb to the top dodging barrels", 2.8),
    ChallengeType.CENTIPEDE: _arcade("Centipede", "Blast the centipede before it lands", 2.5),
    ChallengeType.ASTEROIDS: _arcade("Asteroids", "Survive the asteroid field", 2.6),
    ChallengeType.SNAKE: _arcade("Snake", "Grow the snake without hitting yourself", 2.4),
    ChallengeType.BREAKOUT: _arcade("Breakout", "Break every brick with the paddle", 2.3),
    ChallengeType.TETRIS: _arcade("Tetris", "Clear the required number of lines", 2.7),
    ChallengeType.GALAGA: _arcade("Galaga", "Defeat the alien formation", 2.6),
    ChallengeType.DIG_DUG: _arcade("Dig Dug", "Tunnel through and pop the monsters", 2.5),
    ChallengeType.QBERT: _arcade("Q*bert", "Change the color of every cube", 2.8),
    ChallengeType.QUICK_MATH: _puzzle("Quick Math", "Solve the equations against the clock", 2.0),
    ChallengeType.WORD_SCRAMBLE: _puzzle("Word Scramble", "Unscramble the letters into a word", 2.1),
    ChallengeType.MEMORY_MATCH: _puzzle("Memory Match", "Flip and pair all the cards", 1.9),
    ChallengeType.SUDOKU: _puzzle("Sudoku", "Fill the grid so no digit repeats", 2.4),
    ChallengeType.JIGSAW: _puzzle("Jigsaw", "Reassemble the scrambled picture", 1.8),
    ChallengeType.WORD_SEARCH: _puzzle("Word Search", "Find every hidden word in the grid", 1.9),
    ChallengeType.LOGIC: _puzzle("Logic Gates", "Set the inputs that light the output", 2.3),
    ChallengeType.MAZE: _puzzle("Maze Runner", "Find the exit before time runs out", 2.0),
    ChallengeType.SPOT_DIFF: _puzzle("Spot the Difference", "Find all differences between two images", 2.1),
    ChallengeType.REACTION: _puzzle("Reaction Test", "Tap the moment the signal appears", 2.2),
    ChallengeType.NUM_SEQUENCE: _puzzle("Number Sequence", "Find the next number in the series", 2.2),
    ChallengeType.CIPHER: _puzzle("Cipher", "Decrypt the scrambled message", 2.5),
}


def _check_exhaustive() -> None:
    missing = [t.value for t in ChallengeType if t not in CHALLENGE_CATALOG]
    if missing:
        raise RuntimeError(f"Challenge catalog has no metadata for: {', '.join(missing)}")


_check_exhaustive()

ALL_CHALLENGE_TYPES: List[ChallengeType] = list(ChallengeType)


def challenge_weight(challenge_type: ChallengeType, cfg: ScoringConfig | None = None) -> float:
    """Return the configured weight for a challenge type.

    Args:
        challenge_type: Challenge kind
        cfg: Scoring configuration holding per-type overrides (optional)

    Returns:
        Positive weight (override when configured, catalog default otherwise)
    """
    if cfg is not None and challenge_type.value in cfg.weights:
        return float(cfg.weights[challenge_type.value])
    return CHALLENGE_CATALOG[challenge_type].base_weight


def challenge_hardness(challenge_type: ChallengeType, cfg: ScoringConfig | None = None) -> float:
    """Return the configured hardness constant for a challenge type."""
    if cfg is not None and challenge_type.value in cfg.hardness:
        return float(cfg.hardness[challenge_type.value])
    return CHALLENGE_CATALOG[challenge_type].hardness


def _canonical(text: str) -> str:
    return " ".join(text.lower().replace("-", " ").replace("_", " ").replace("*", "").split())


# alias -> type; both the compact enum value and the display name resolve
_ALIASES: Dict[str, ChallengeType] = {}
for _type, _spec in CHALLENGE_CATALOG.items():
    _ALIASES[_canonical(_type.value)] = _type
    _ALIASES[_canonical(_spec.name)] = _type


def resolve_challenge_type(name: str, min_ratio: int = 80) -> ChallengeType:
    """Resolve a user-supplied challenge name to a :class:`ChallengeType`.

    Exact matches on the enum value or display name win; otherwise the closest
    alias by token-set ratio is accepted when it reaches ``min_ratio``.

    Args:
        name: Free-form name, e.g. ``"pattern"``, ``"Safe Dial"`` or ``"pattern lok"``
        min_ratio: Minimum fuzzy ratio (0-100) accepted for non-exact names

    Returns:
        Resolved challenge type

    Raises:
        InvalidInputError: If nothing is close enough
    """
    key = _canonical(name or "")
    if not key:
        raise InvalidInputError("Challenge name must not be empty")
    exact: Optional[ChallengeType] = _ALIASES.get(key) or _ALIASES.get(key.replace(" ", ""))
    if exact is not None:
        return exact
    best = process.extractOne(key, list(_ALIASES.keys()), scorer=fuzz.token_set_ratio, score_cutoff=min_ratio)
    if best is None:
        raise InvalidInputError(f"Unknown challenge type: {name!r}")
    return _ALIASES[best[0]]


__all__ = [
    "ChallengeCategory",
    "ChallengeType",
    "ChallengeSpec",
    "CHALLENGE_CATALOG",
    "ALL_CHALLENGE_TYPES",
    "challenge_weight",
    "challenge_hardness",
    "resolve_challenge_type",
]
