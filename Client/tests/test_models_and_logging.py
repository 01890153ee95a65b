"""Model invariants and structured session logging."""

import json

import pytest

from duel_client.config import is_game_not_found
from duel_client.models import FeedbackMark, Guess, LobbyRequest, PlayerRole, Session, SessionState
from duel_client.utils import GameIdRequiredError, session_logger


def test_guess_requires_full_letters_and_feedback():
    with pytest.raises(ValueError):
        Guess('cran', (FeedbackMark.ABSENT,) * 5)
    with pytest.raises(ValueError):
        Guess('crane', (FeedbackMark.ABSENT,) * 4)


def test_roles_know_their_opponent():
    assert PlayerRole.PLAYER_ONE.opponent is PlayerRole.PLAYER_TWO
    assert PlayerRole.PLAYER_TWO.opponent is PlayerRole.PLAYER_ONE


def test_reset_keeps_only_the_guards():
    session = Session(state=SessionState.CREATING_OR_JOINING, game_id='ABCDE',
                      pending_request=LobbyRequest.JOIN, auto_join_attempted=True)
    assert session.reset() == Session(auto_join_attempted=True)


@pytest.mark.parametrize('message, expected', [
    ('Game not found or full', True),
    ('  GAME NOT FOUND OR FULL ', True),
    ('Game not found', False),
    ('', False),
])
def test_not_found_message_matching(message, expected):
    assert is_game_not_found(message) is expected


def test_validation_errors_serialize():
    assert GameIdRequiredError().to_dict() == {
        'type': 'GameIdRequiredError',
        'message': 'Please enter a game ID',
    }


def test_session_log_entries_are_counted():
    before = session_logger.get_log_stats()
    baseline = {key: before.get(key, 0) for key in ('commands', 'events', 'transitions', 'errors')}

    session_logger.log_command('join_game', {'game_id': 'ABCDE', 'token': 'secret'})
    session_logger.log_event('game_joined', {'player_id': 'player2'})
    session_logger.log_transition('game_joined', 'creating_or_joining', 'playing', game_id='ABCDE')
    session_logger.log_error(RuntimeError('boom'), 'deliver:game_joined', game_id='ABCDE')

    stats = session_logger.get_log_stats()
    for key in baseline:
        assert stats[key] == baseline[key] + 1

    with open(stats['log_file'], encoding='utf-8') as f:
        lines = [line for line in f if '"COMMAND"' in line]
    entry = json.loads(lines[-1].split(' | ', 2)[2])
    assert entry['details']['payload'] == {'game_id': 'ABCDE'}
