"""
Game Data Models

Contains the in-match data structures: feedback marks, evaluated guesses,
the terminal outcome and the match state owned by the match engine.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ..config.game_settings import WORD_LENGTH
from .session import PlayerRole


class FeedbackMark(Enum):
    """Per-letter evaluation returned by the server."""
    CORRECT = "correct"
    PRESENT = "present"
    ABSENT = "absent"


@dataclass(frozen=True)
class Guess:
    """An evaluated guess. Only ever built from a server acknowledgement."""
    letters: str
    feedback: Tuple[FeedbackMark, ...]

    def __post_init__(self):
        if len(self.letters) != WORD_LENGTH:
            raise ValueError(f"Guess must be exactly {WORD_LENGTH} letters, got '{self.letters}'")
        if len(self.feedback) != WORD_LENGTH:
            raise ValueError(f"Feedback must have exactly {WORD_LENGTH} marks, got {len(self.feedback)}")

    @property
    def is_solved(self) -> bool:
        return all(mark is FeedbackMark.CORRECT for mark in self.feedback)


@dataclass(frozen=True)
class Outcome:
    """Terminal result. A missing winner means nobody guessed the word."""
    winner: Optional[PlayerRole]
    revealed_word: str


@dataclass(frozen=True)
class MatchState:
    """Both players' guess histories plus the local in-progress guess."""
    local_guesses: Tuple[Guess, ...] = ()
    opponent_guesses: Tuple[Guess, ...] = ()
    pending_input: str = ""
    awaiting_ack: bool = False  # a submitted guess has not been acknowledged yet
    outcome: Optional[Outcome] = None

    @property
    def is_over(self) -> bool:
        return self.outcome is not None
