"""
Exception hierarchy for the LearnDeck study core
"""


class LearnDeckError(Exception):
    """Base class for all LearnDeck errors"""


class ConfigurationError(LearnDeckError, ValueError):
    """An unrecognised difficulty or study type value"""


class InvalidConfigError(ConfigurationError):
    """A study configuration that cannot be used to start a session"""


class PersistFailureError(LearnDeckError):
    """The word store rejected an answer after all retries"""

    def __init__(self, word_id, attempts: int, message: str | None = None):
        self.word_id = word_id
        self.attempts = attempts
        super().__init__(
            message
            or f"Failed to persist progress for word {word_id} after {attempts} attempts"
        )


class SessionStateError(LearnDeckError):
    """Operation is not allowed in the session's current state"""
