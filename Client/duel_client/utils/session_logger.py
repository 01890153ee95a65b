"""
Session Logger Module for the Wordle Duel Client

This module provides structured logging for outbound commands, inbound server
events, session state transitions and client-side errors.
"""

import logging
import json
from datetime import datetime
from typing import Dict, Any, Optional
from pathlib import Path

from ..config import Config


class SessionLogger:
    """
    Centralized logging system for the duel client.

    Features:
    - Outbound command tracking (create, join, guess)
    - Inbound server event logging
    - Session state transition logging
    - JSON structured logs for easy parsing
    """

    def __init__(self, log_dir: str = "logs", level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.level = getattr(logging, str(level).upper(), logging.INFO)

        # Setup main client logger
        self.logger = self._setup_logger()

    @property
    def log_file(self) -> Path:
        return self.log_dir / f"duel_log_{datetime.now().strftime('%Y-%m-%d')}.log"

    def _setup_logger(self) -> logging.Logger:
        """Setup the main client logger with file handler."""
        logger = logging.getLogger('duel_client')
        logger.setLevel(self.level)

        # Prevent duplicate handlers
        if logger.handlers:
            logger.handlers.clear()

        # File handler for detailed logs
        file_handler = logging.FileHandler(self.log_file, encoding='utf-8')
        file_handler.setLevel(self.level)

        # Console handler for only important messages (WARNING and above)
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)

        file_formatter = logging.Formatter(
            '%(asctime)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_formatter = logging.Formatter(
            '%(levelname)s: %(message)s'
        )

        file_handler.setFormatter(file_formatter)
        console_handler.setFormatter(console_formatter)

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)

        return logger

    def _create_log_entry(self,
                          event_type: str,
                          action: str,
                          details: Dict[str, Any]) -> str:
        """Create a structured log entry."""
        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'action': action,
            'details': details
        }
        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def log_command(self, name: str, payload: Optional[Dict[str, Any]] = None, buffered: bool = False):
        """
        Log an outbound command.

        Args:
            name: Wire name of the command (e.g. 'create_game', 'make_guess')
            payload: Command payload
            buffered: True when the command was queued until the transport connects
        """
        details = {
            'payload': self._sanitize_payload(payload),
            'buffered': buffered
        }
        self.logger.info(self._create_log_entry('COMMAND', name, details))

    def log_event(self, name: str, payload: Any = None):
        """Log an inbound server or connectivity event."""
        details = {'payload': self._sanitize_payload(payload)}
        self.logger.info(self._create_log_entry('EVENT', name, details))

    def log_transition(self,
                       trigger: str,
                       old_state: str,
                       new_state: str,
                       game_id: Optional[str] = None,
                       **kwargs):
        """
        Log a session state transition.

        Args:
            trigger: Event or request that caused the transition
            old_state: Session state before
            new_state: Session state after
            game_id: Game identifier if assigned
            **kwargs: Additional details to log
        """
        details = {
            'from': old_state,
            'to': new_state,
            'game_id': game_id,
            **kwargs
        }
        self.logger.info(self._create_log_entry('TRANSITION', trigger, details))

    def log_rejected(self, trigger: str, state: str, reason: str):
        """Log an event or request ignored because it is not valid in the current state."""
        details = {'state': state, 'reason': reason}
        self.logger.warning(self._create_log_entry('REJECTED', trigger, details))

    def log_error(self,
                  error: Exception,
                  action: str,
                  game_id: Optional[str] = None):
        """
        Log errors with full context.

        Args:
            error: Exception that occurred
            action: Action that was being performed
            game_id: Game identifier if applicable
        """
        details = {
            'game_id': game_id,
            'error_type': type(error).__name__,
            'error_message': str(error),
        }
        self.logger.error(self._create_log_entry('ERROR', action, details))

    def _sanitize_payload(self, data: Any) -> Any:
        """Keep payload logs small and JSON friendly."""
        if data is None:
            return None
        if not isinstance(data, dict):
            return {'data_type': type(data).__name__}
        return {key: value for key, value in data.items() if key != 'token'}

    def get_log_stats(self) -> Dict[str, Any]:
        """Get statistics about logged entries for today."""
        try:
            log_file = self.log_file
            if not log_file.exists():
                return {'error': 'No log file found for today'}

            stats = {
                'log_file': str(log_file),
                'total_entries': 0,
                'commands': 0,
                'events': 0,
                'transitions': 0,
                'rejected': 0,
                'errors': 0
            }

            with open(log_file, 'r', encoding='utf-8') as f:
                for line in f:
                    if not line.strip():
                        continue
                    stats['total_entries'] += 1
                    if '"event_type": "COMMAND"' in line:
                        stats['commands'] += 1
                    elif '"event_type": "EVENT"' in line:
                        stats['events'] += 1
                    elif '"event_type": "TRANSITION"' in line:
                        stats['transitions'] += 1
                    elif '"event_type": "REJECTED"' in line:
                        stats['rejected'] += 1
                    elif '"event_type": "ERROR"' in line:
                        stats['errors'] += 1

            return stats

        except OSError as e:
            return {'error': f'Failed to get stats: {str(e)}'}


# Global logger instance
session_logger = SessionLogger(Config.LOG_DIR, Config.LOG_LEVEL)
