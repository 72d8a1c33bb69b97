"""Exception hierarchy shared by every layer."""


class StudydeckError(Exception):
    """Base class for all studydeck errors."""


class ConfigurationError(StudydeckError):
    """No deck resolved, empty card pool, or a bad session parameter."""


class DeckValidationError(StudydeckError):
    """A deck file failed structural validation."""

    def __init__(self, path: str, reason: str):
        super().__init__(f'Flashcard file "{path}" {reason}')
        self.path = path
        self.reason = reason


class StatsStoreError(StudydeckError):
    """The stats store could not be read or written."""


class InvalidTransition(StudydeckError):
    """An event was dispatched in a phase that does not accept it."""

    def __init__(self, phase: str, event: str):
        super().__init__(f"Event '{event}' is not valid in phase '{phase}'")
        self.phase = phase
        self.event = event
