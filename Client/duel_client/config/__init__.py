"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: client configuration (environment-based)
- game_settings.py: board constants and protocol constants
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import WORD_LENGTH, MAX_GUESSES, GAME_NOT_FOUND_MESSAGE, is_game_not_found

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'WORD_LENGTH', 'MAX_GUESSES', 'GAME_NOT_FOUND_MESSAGE', 'is_game_not_found'
]
