"""
Configuration Management Module

Centralized client configuration following the 12-factor app methodology.
All configuration is loaded from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

# Load environment variables from config.env next to this module
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.env'))


class Config:
    """Base configuration class with all settings."""

    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'

    # Server Settings
    SERVER_URL = os.getenv('SERVER_URL', 'http://127.0.0.1:5000')
    SOCKETIO_TRANSPORTS = [t.strip() for t in os.getenv('SOCKETIO_TRANSPORTS', 'websocket').split(',') if t.strip()]
    CONNECT_TIMEOUT_SECONDS = int(os.getenv('CONNECT_TIMEOUT_SECONDS', 20))

    # Reconnection Settings (fixed attempt count, fixed delay)
    RECONNECT_ATTEMPTS = int(os.getenv('RECONNECT_ATTEMPTS', 5))
    RECONNECT_DELAY_SECONDS = float(os.getenv('RECONNECT_DELAY_SECONDS', 1.0))

    # Logging Settings
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    SERVER_URL = 'http://duel.test'
    RECONNECT_ATTEMPTS = 3
    RECONNECT_DELAY_SECONDS = 0.0


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
