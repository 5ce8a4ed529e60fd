class QuizError(Exception):
    """Base class for all errors raised by derdiedas."""


class CatalogError(QuizError):
    """The word list is missing, unreadable, malformed or empty."""


class StatisticsLoadError(QuizError):
    """The statistics file exists but could not be read or parsed."""


class StatisticsSaveError(QuizError):
    """The statistics file could not be written."""


class InputParseError(QuizError):
    """An answer typed during a quiz was not recognised."""


class ConfigInputError(QuizError):
    """A quiz configuration value (e.g. question count) was out of range."""


class ShutdownRequested(BaseException):
    """Raised from the SIGTERM handler so the main loop unwinds and saves."""
