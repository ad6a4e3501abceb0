"""
Tournament Errors

Every error the engine raises is a TournamentError. Routers translate the
four kinds into HTTP status codes; nothing here is fatal to the process.
"""


class TournamentError(Exception):
    """Base class for all engine errors"""

    pass


class ValidationError(TournamentError):
    """Malformed input: wrong ban count, unknown map, bad side, bad team name"""

    pass


class DuplicateNameError(ValidationError):
    """A team with the same (case-insensitive) name is already registered"""

    pass


class NotFoundError(TournamentError):
    """Unknown match or team id"""

    pass


class StateConflictError(TournamentError):
    """Operation not allowed in the current tournament or match state"""

    pass


class AlreadyCompletedError(StateConflictError):
    pass


class AllRoundsCompleteError(StateConflictError):
    pass


class PhaseIncompleteError(StateConflictError):
    """Knockout requested before the round-robin phase is finished"""

    pass


class InsufficientDataError(TournamentError):
    """Too few teams to pair or to qualify"""

    pass


class NoTeamsError(InsufficientDataError):
    pass


class InsufficientTeamsError(InsufficientDataError):
    pass
