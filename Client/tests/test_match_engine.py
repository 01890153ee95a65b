"""Match engine: input admission, acknowledgements and the terminal outcome."""

import random
import string

import pytest

from duel_client.config import MAX_GUESSES, WORD_LENGTH
from duel_client.models import FeedbackMark, Guess, MatchState, NoticeKind, Outcome, PlayerRole, Session, SessionState
from duel_client.models.messages import GameOver, GuessMade
from duel_client.services import match_engine

CRANE_FEEDBACK = ['absent', 'present', 'correct', 'absent', 'correct']


def playing_session(**match_fields):
    return Session(
        state=SessionState.PLAYING,
        game_id='ABCDE',
        role=PlayerRole.PLAYER_ONE,
        match=MatchState(**match_fields),
    )


def test_pending_input_never_exceeds_word_length():
    rng = random.Random(7)
    session = playing_session()
    for _ in range(200):
        key = rng.choice(string.ascii_letters + '1!? ' + 'é')
        session = match_engine.append_letter(session, key).session
        assert len(session.match.pending_input) <= WORD_LENGTH


def test_append_normalizes_and_filters_letters():
    session = playing_session()
    for key in ['C', 'r', '1', 'ab', '', ' ', 'A']:
        session = match_engine.append_letter(session, key).session
    assert session.match.pending_input == 'cra'


def test_sixth_letter_is_ignored():
    session = playing_session(pending_input='crane')
    assert match_engine.append_letter(session, 's').session is session


def test_delete_letter():
    session = playing_session(pending_input='cran')
    assert match_engine.delete_letter(session).session.match.pending_input == 'cra'
    empty = playing_session()
    assert match_engine.delete_letter(empty).session is empty


@pytest.mark.parametrize('pending', ['', 'c', 'cran'])
def test_submit_requires_a_full_guess(pending):
    transition = match_engine.submit_guess(playing_session(pending_input=pending))
    assert transition.commands == ()


@pytest.mark.parametrize('state', [SessionState.WAITING, SessionState.FINISHED, SessionState.DISCONNECTED])
def test_input_is_ignored_outside_play(state):
    session = Session(state=state, game_id='ABCDE', role=PlayerRole.PLAYER_ONE,
                      match=MatchState(pending_input=''))
    assert match_engine.append_letter(session, 'a').session is session
    assert match_engine.submit_guess(session).commands == ()


def test_submit_keeps_buffer_until_acknowledged(duel):
    duel.start_as_player_one()
    duel.type_word('crane')
    duel.engine.submit_guess()

    assert duel.sio.emitted[-1] == ('make_guess', {'game_id': 'ABCDE', 'player_id': 'player1', 'guess': 'crane'})
    assert duel.match.pending_input == 'crane'
    assert duel.match.local_guesses == ()
    assert duel.match.awaiting_ack is True


def test_repeated_enter_sends_one_guess(duel):
    duel.start_as_player_one()
    duel.type_word('crane')
    for _ in range(3):
        duel.engine.handle_key('Enter')

    assert duel.sio.emitted_names().count('make_guess') == 1
    assert duel.engine.can_submit() is False


def test_local_acknowledgement_appends_and_clears_input(duel):
    duel.start_as_player_one()
    for key in ['c', 'r', 'a', 'n', 'e', 'Enter']:
        duel.engine.handle_key(key)

    duel.acknowledge('crane', CRANE_FEEDBACK, player_id='player1')

    assert duel.match.local_guesses == (
        Guess('crane', (FeedbackMark.ABSENT, FeedbackMark.PRESENT, FeedbackMark.CORRECT,
                        FeedbackMark.ABSENT, FeedbackMark.CORRECT)),
    )
    assert duel.match.pending_input == ''
    assert duel.match.awaiting_ack is False


def test_opponent_acknowledgement_goes_to_opponent_history(duel):
    duel.start_as_player_two()
    duel.type_word('sla')
    duel.acknowledge('pride', ['correct'] * 5, player_id='player1')

    assert len(duel.match.opponent_guesses) == 1
    assert duel.match.opponent_guesses[0].is_solved
    assert duel.match.local_guesses == ()
    assert duel.match.pending_input == 'sla'


def test_rejected_guess_keeps_input_and_allows_resubmit(duel):
    duel.start_as_player_one()
    duel.type_word('xxxxx')
    duel.engine.submit_guess()
    duel.deliver('error', {'message': 'Not in word list'})

    assert duel.match.pending_input == 'xxxxx'
    assert duel.match.local_guesses == ()
    assert duel.notices[-1].kind is NoticeKind.INVALID_GUESS
    assert duel.session.state is SessionState.PLAYING

    duel.engine.handle_key('Backspace')
    duel.engine.append_letter('y')
    duel.engine.submit_guess()
    assert duel.sio.emitted[-1][1]['guess'] == 'xxxxy'


def test_six_acknowledged_guesses_close_the_board(duel):
    duel.start_as_player_one()
    for word in ['crane', 'slate', 'pious', 'dumpy', 'fight', 'vowel']:
        duel.type_word(word)
        duel.engine.submit_guess()
        duel.acknowledge(word)

    assert len(duel.match.local_guesses) == MAX_GUESSES
    assert duel.engine.can_guess() is False

    duel.type_word('extra')
    duel.engine.submit_guess()
    assert duel.match.pending_input == ''
    assert duel.engine.can_submit() is False
    assert duel.sio.emitted_names().count('make_guess') == MAX_GUESSES


def test_local_history_is_capped_even_if_server_over_acknowledges():
    full = playing_session(local_guesses=tuple(Guess('crane', (FeedbackMark.ABSENT,) * 5)
                                               for _ in range(MAX_GUESSES)))
    event = GuessMade(role=PlayerRole.PLAYER_ONE, letters='slate',
                      feedback=(FeedbackMark.ABSENT,) * 5)
    transition = match_engine.on_guess_made(full, event)
    assert transition.session is full
    assert transition.rejected


def test_game_over_records_outcome_once(duel):
    duel.start_as_player_one()
    duel.type_word('cra')
    duel.deliver('game_over', {'winner': 'player2', 'word': 'pride'})

    first = duel.session
    assert first.state is SessionState.FINISHED
    assert first.match.outcome == Outcome(winner=PlayerRole.PLAYER_TWO, revealed_word='pride')
    assert first.match.pending_input == ''
    assert duel.notices[-1].message == 'Opponent Won! The word was: pride'

    duel.deliver('game_over', {'winner': 'player1', 'word': 'other'})
    assert duel.session.match.outcome == first.match.outcome
    assert duel.session.state is SessionState.FINISHED


def test_game_over_is_idempotent_as_a_pure_function():
    session = playing_session()
    event = GameOver(winner=PlayerRole.PLAYER_ONE, word='crane')
    once = match_engine.on_game_over(session, event).session
    twice = match_engine.on_game_over(once, event).session
    assert twice == once
    assert once.match.outcome == Outcome(PlayerRole.PLAYER_ONE, 'crane')


def test_winning_guess_then_game_over(duel):
    duel.start_as_player_one()
    duel.type_word('pride')
    duel.engine.submit_guess()
    duel.acknowledge('pride', ['correct'] * 5)
    duel.deliver('game_over', {'winner': 'player1', 'word': 'pride'})

    assert duel.session.state is SessionState.FINISHED
    assert duel.match.local_guesses[-1].is_solved
    assert duel.notices[-1].message == 'You Won! The word was: pride'


def test_opponent_guess_after_finish_is_still_recorded(duel):
    duel.start_as_player_one()
    duel.deliver('game_over', {'winner': None, 'word': 'pride'})
    duel.acknowledge('slate', player_id='player2')

    assert len(duel.match.opponent_guesses) == 1
    assert duel.notices[-1].message == 'Game Over! The word was: pride'


def test_handle_key_ignores_other_keys():
    session = playing_session(pending_input='cr')
    for key in ['Shift', 'ArrowLeft', 'Tab']:
        assert match_engine.handle_key(session, key).session is session
