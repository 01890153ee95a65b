"""
Wordle Duel Client - Main Entry Point

Console driver for the duel client. Lines typed on stdin are turned into lobby
commands or keystrokes; server events are delivered on this thread between
reads.

    create            create a new game and wait for a friend
    join <game id>    join a friend's game
    <letters>         type letters, the line ending presses Enter
    <                 delete the last letter
    lobby             go back to the lobby after a game
    quit              exit
"""

import argparse
import queue
import sys
import threading

from duel_client import create_client
from duel_client.config import config, MAX_GUESSES, WORD_LENGTH
from duel_client.models import NoticeKind, SessionState
from duel_client.utils import ValidationError, session_logger


def stdin_reader(lines: "queue.Queue"):
    """Read stdin on a helper thread; state is only touched by the main loop."""
    for line in sys.stdin:
        lines.put(line.rstrip('\n'))
    lines.put(None)


def render_board(title, guesses, pending=''):
    print(f"  {title}")
    for guess in guesses:
        marks = ''.join({'correct': '+', 'present': '?', 'absent': '.'}[m.value] for m in guess.feedback)
        solved = '  solved' if guess.is_solved else ''
        print(f"    {guess.letters.upper()}  {marks}{solved}")
    rows_left = MAX_GUESSES - len(guesses)
    for row in range(rows_left):
        text = pending if row == 0 else ''
        print(f"    {text.upper().ljust(WORD_LENGTH, '_')}")


class ConsoleView:
    """Session listener printing notices and, when the board changes, the board."""

    def __init__(self):
        self._last_snapshot = None

    def __call__(self, session, notices):
        for notice in notices:
            prefix = {
                NoticeKind.INFO: '✓',
                NoticeKind.INVALID_GUESS: '✗ Invalid guess:',
                NoticeKind.CONNECTION_RESTORED: '✓',
            }.get(notice.kind, '✗')
            print(f"{prefix} {notice.message}".rstrip())

        match = session.match
        snapshot = (
            session.state,
            len(match.local_guesses) if match else 0,
            len(match.opponent_guesses) if match else 0,
        )
        if snapshot == self._last_snapshot:
            return
        self._last_snapshot = snapshot

        if session.state is SessionState.WAITING:
            print(f"Waiting for opponent to join... Share this game ID with your friend: {session.game_id}")
        elif match is not None and session.state in (SessionState.PLAYING, SessionState.FINISHED):
            render_board(f'Your Guesses ({session.role.value})', match.local_guesses, match.pending_input)
            render_board(f"Opponent's Guesses ({session.role.opponent.value})", match.opponent_guesses)
            print(f"  Game ID: {session.game_id} | Player: {session.role.value} | Game State: {session.state.value}")
        elif session.state is SessionState.DISCONNECTED:
            print("Type 'lobby' to start over.")


def handle_line(line, controller, engine):
    command = line.strip()
    session = controller.session

    if command == 'create':
        controller.request_create()
    elif command == 'join' or command.startswith('join '):
        try:
            controller.request_join(command[len('join'):].strip())
        except ValidationError as e:
            print(f"✗ {e}")
    elif command == 'lobby':
        controller.return_to_lobby()
    elif session.state is SessionState.PLAYING:
        if command == '<':
            engine.handle_key('Backspace')
            return
        for key in command:
            engine.handle_key(key)
        engine.handle_key('Enter')
    elif command:
        print("Commands: create | join <game id> | lobby | quit")


def main():
    """Main function to wire the client and run the console loop."""
    parser = argparse.ArgumentParser(description='Wordle Duel console client')
    parser.add_argument('--env', default='default', choices=sorted(config.keys()))
    parser.add_argument('--link', help='shared game link or game ID to join on startup')
    args = parser.parse_args()

    config_class = config[args.env]
    connection, controller, engine = create_client(config_class)
    view = ConsoleView()
    controller.store.add_listener(view)

    try:
        print(f"Connecting to {config_class.SERVER_URL}...")
        if connection.connect():
            print("✓ Connected")
        session_logger.logger.info(f"Duel client started against {config_class.SERVER_URL}")

        controller.resume_from_link(args.link)

        lines = queue.Queue()
        threading.Thread(target=stdin_reader, args=(lines,), daemon=True).start()

        while True:
            connection.process_events(timeout=0.1)
            try:
                line = lines.get_nowait()
            except queue.Empty:
                continue
            if line is None or line.strip() == 'quit':
                break
            handle_line(line, controller, engine)

    except KeyboardInterrupt:
        print("\nClient shutting down...")
    finally:
        controller.store.remove_listener(view)
        controller.detach()
        engine.detach()
        connection.close()
        session_logger.logger.info("Duel client stopped")


if __name__ == '__main__':
    main()
