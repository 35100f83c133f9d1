class MiniRogueError(Exception):
    """Base exception for the minirogue project."""


class ConfigError(MiniRogueError):
    """Raised when generation settings are missing or invalid."""


class InvalidEnemyError(MiniRogueError, ValueError):
    """Raised when an enemy placement is requested without an enemy."""
