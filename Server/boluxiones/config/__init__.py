"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Game rules, timings and constants (business logic)
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    GRID_SIZE, GROUP_SIZE, MAX_MISTAKES, STORAGE_KEY,
    difficulty_to_emoji, validate_settings
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'GRID_SIZE', 'GROUP_SIZE', 'MAX_MISTAKES', 'STORAGE_KEY',
    'difficulty_to_emoji', 'validate_settings'
]
