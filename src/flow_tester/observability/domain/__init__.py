from .logging import LOG_LEVELS, LogMessage, level_rank

__all__ = ["LOG_LEVELS", "LogMessage", "level_rank"]
