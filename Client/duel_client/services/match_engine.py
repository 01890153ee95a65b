"""
Match Engine

Reconciles local keystroke input with server-confirmed guesses, keeps both
players' guess histories and records the terminal outcome.

Acknowledgements are matched by player role only: the engine does not tag
submissions with a request id, so two acknowledgements for the same role that
arrive reordered would be attributed in arrival order.
"""

from dataclasses import replace
from typing import Callable, Dict

from ..config.game_settings import MAX_GUESSES, WORD_LENGTH
from ..models.game import Guess, MatchState, Outcome
from ..models.messages import (
    EventName,
    GameOver,
    GuessMade,
    Notice,
    NoticeKind,
    ServerError,
    SubmitGuess,
)
from ..models.session import Session, SessionState
from ..utils.decorators import requires_live_session
from .session_store import SessionService, Transition

ENTER_KEY = "Enter"
BACKSPACE_KEY = "Backspace"


def _with_match(session: Session, **changes) -> Session:
    return replace(session, match=replace(session.match, **changes))


# Admission predicates

def can_guess(session: Session) -> bool:
    """True while the local player may still edit and submit guesses."""
    match = session.match
    return (
        session.state is SessionState.PLAYING
        and not session.is_frozen
        and match is not None
        and match.outcome is None
        and len(match.local_guesses) < MAX_GUESSES
    )


def can_submit(session: Session) -> bool:
    """True when a full guess is buffered and no other guess is outstanding."""
    return (
        can_guess(session)
        and len(session.match.pending_input) == WORD_LENGTH
        and not session.match.awaiting_ack
    )


# Local input

def append_letter(session: Session, letter: str) -> Transition:
    if not can_guess(session):
        return Transition(session)
    if not isinstance(letter, str) or len(letter) != 1 or not (letter.isascii() and letter.isalpha()):
        return Transition(session)
    pending = session.match.pending_input
    if len(pending) >= WORD_LENGTH:
        return Transition(session)
    return Transition(_with_match(session, pending_input=pending + letter.lower()))


def delete_letter(session: Session) -> Transition:
    if not can_guess(session) or not session.match.pending_input:
        return Transition(session)
    return Transition(_with_match(session, pending_input=session.match.pending_input[:-1]))


def submit_guess(session: Session) -> Transition:
    """
    Send the buffered guess.

    The buffer stays visible and history is untouched until the server
    acknowledges with guess_made.
    """
    if not can_submit(session):
        return Transition(session)
    command = SubmitGuess(
        game_id=session.game_id,
        role=session.role,
        letters=session.match.pending_input
    )
    return Transition(_with_match(session, awaiting_ack=True), commands=(command,))


def handle_key(session: Session, key: str) -> Transition:
    """Dispatch one keyboard event: Enter submits, Backspace deletes, letters append."""
    if key == ENTER_KEY:
        return submit_guess(session)
    if key == BACKSPACE_KEY:
        return delete_letter(session)
    return append_letter(session, key)


# Server events

@requires_live_session
def on_guess_made(session: Session, event: GuessMade) -> Transition:
    match = session.match
    if match is None or session.state not in (SessionState.PLAYING, SessionState.FINISHED):
        return Transition.reject(session, 'no match in progress')

    guess = Guess(letters=event.letters, feedback=event.feedback)
    if event.role is session.role:
        if len(match.local_guesses) >= MAX_GUESSES:
            return Transition.reject(session, 'local guess history is full')
        return Transition(_with_match(session,
                                      local_guesses=match.local_guesses + (guess,),
                                      pending_input='',
                                      awaiting_ack=False))

    if len(match.opponent_guesses) >= MAX_GUESSES:
        return Transition.reject(session, 'opponent guess history is full')
    return Transition(_with_match(session, opponent_guesses=match.opponent_guesses + (guess,)))


@requires_live_session
def on_server_error(session: Session, event: ServerError) -> Transition:
    # Outside play the session controller reports the error
    if session.state is not SessionState.PLAYING or session.match is None:
        return Transition(session)
    return Transition(
        _with_match(session, awaiting_ack=False),
        notices=(Notice(NoticeKind.INVALID_GUESS, event.message),)
    )


def _outcome_message(session: Session, outcome: Outcome) -> str:
    if outcome.winner is None:
        headline = 'Game Over!'
    elif outcome.winner is session.role:
        headline = 'You Won!'
    else:
        headline = 'Opponent Won!'
    return f"{headline} The word was: {outcome.revealed_word}"


@requires_live_session
def on_game_over(session: Session, event: GameOver) -> Transition:
    match = session.match
    if match is not None and match.outcome is not None:
        return Transition.reject(session, 'outcome already recorded')
    if match is None or session.state is not SessionState.PLAYING:
        return Transition.reject(session, 'game over is only valid while playing')

    outcome = Outcome(winner=event.winner, revealed_word=event.word)
    return Transition(
        session=replace(session,
                        state=SessionState.FINISHED,
                        match=replace(match, outcome=outcome, pending_input='', awaiting_ack=False)),
        notices=(Notice(NoticeKind.INFO, _outcome_message(session, outcome)),)
    )


class MatchEngine(SessionService):
    """Keyboard input and the in-match server events."""

    def _subscriptions(self) -> Dict[str, Callable]:
        return {
            EventName.GUESS_MADE: self._on_guess_made,
            EventName.GAME_OVER: self._on_game_over,
            EventName.ERROR: self._on_server_error,
        }

    @property
    def match(self) -> MatchState:
        return self.session.match

    def can_guess(self) -> bool:
        return can_guess(self.session)

    def can_submit(self) -> bool:
        return can_submit(self.session)

    def append_letter(self, letter: str) -> Session:
        return self._apply('append_letter', append_letter(self.session, letter))

    def delete_letter(self) -> Session:
        return self._apply('delete_letter', delete_letter(self.session))

    def submit_guess(self) -> Session:
        return self._apply('submit_guess', submit_guess(self.session))

    def handle_key(self, key: str) -> Session:
        return self._apply('handle_key', handle_key(self.session, key))

    def _on_guess_made(self, event):
        self._apply(event.name, on_guess_made(self.session, event))

    def _on_game_over(self, event):
        self._apply(event.name, on_game_over(self.session, event))

    def _on_server_error(self, event):
        self._apply(event.name, on_server_error(self.session, event))
