import os
import sys
from pathlib import Path


class Settings:
    PROJECT_NAME: str = "derdiedas"
    DEBUG: bool = os.environ.get("DERDIEDAS_DEBUG", "") not in ("", "0")
    APP_DIR_NAME: str = "german-quiz"
    LOG_DIR: str = "log"
    LOG_FILE: str = "derdiedas.log"
    WORDS_FILE: str = os.environ.get("DERDIEDAS_WORDS_FILE", "words.json")
    STATS_FILE: str = "stats.json"
    QUICK_QUIZ_SIZE: int = 10
    PRACTICE_SIZE: int = 10
    MAX_REPEATS: int = 3
    CUSTOM_MIN: int = 5
    CUSTOM_MAX: int = 50
    CUSTOM_DEFAULT: int = 10
    TOP_MISSED: int = 5


settings = Settings()


def get_data_dir() -> Path:
    """Per-user directory holding stats.json, the log folder and an optional words file.

    ``DERDIEDAS_DATA_DIR`` wins over the platform default.
    """
    override = os.environ.get("DERDIEDAS_DATA_DIR")
    if override:
        return Path(override)

    if sys.platform == "win32":
        base = os.environ.get("APPDATA")
    elif sys.platform == "darwin":
        base = str(Path.home() / "Library" / "Application Support")
    else:
        base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")

    if base:
        return Path(base) / settings.APP_DIR_NAME
    return Path.home() / ".german_quiz"


def get_stats_path() -> Path:
    return get_data_dir() / settings.STATS_FILE


def get_log_dir() -> Path:
    return get_data_dir() / settings.LOG_DIR
