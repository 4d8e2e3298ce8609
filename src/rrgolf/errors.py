"""
Error taxonomy for rrgolf.

Four families, each with a stable ``kind`` string callers can switch on:

- Validation errors: malformed input to a match operation. Raised
  synchronously; the attempted mutation never happens.
- Persistence errors: a local or remote store failed. Caught at the
  synchronizer boundary and turned into a non-fatal error flag.
- Corruption errors: a persisted record failed schema/invariant checks.
  Treated as "no saved state" and the record is cleared.
- Share-code errors: bad format, unknown/expired code, or exhausted
  generation attempts. Reported as a user-facing message.
"""


class MatchError(Exception):
    """Base class for all rrgolf errors."""

    kind = "match_error"


# =============================================================================
# Validation
# =============================================================================

class MatchValidationError(MatchError, ValueError):
    """Invalid input to a match operation."""

    kind = "validation_error"


class InvalidHoleError(MatchValidationError):
    kind = "invalid_hole"


class HoleOutOfRangeError(InvalidHoleError):
    kind = "hole_out_of_range"


class BeyondFrontierError(MatchValidationError):
    kind = "beyond_frontier"


class InvalidPlayerCountError(MatchValidationError):
    kind = "invalid_player_count"


class WrongPlayerCountError(InvalidPlayerCountError):
    kind = "wrong_player_count"


class InvalidNameError(MatchValidationError):
    kind = "invalid_name"


class EmptyNameError(InvalidNameError):
    kind = "empty_name"


class DuplicateNameError(MatchValidationError):
    kind = "duplicate_name"


class WrongResultCountError(MatchValidationError):
    kind = "wrong_result_count"


class IncompleteResultError(MatchValidationError):
    kind = "incomplete_result"


class UnresolvedMatchupError(MatchValidationError):
    kind = "unresolved_matchup"


class UnknownPlayerError(MatchValidationError):
    kind = "unknown_player"


class InvalidPairingError(MatchValidationError):
    """A hole's two matchups do not pair up four distinct players."""

    kind = "invalid_pairing"


class InvalidOutcomeError(MatchValidationError):
    kind = "invalid_outcome"


class MatchNotInProgressError(MatchValidationError):
    """Operation needs a started match but the match is still in setup or already complete."""

    kind = "match_not_in_progress"


# =============================================================================
# Persistence
# =============================================================================

class PersistenceError(MatchError):
    """A local or remote store operation failed."""

    kind = "persistence_error"


class CorruptStateError(PersistenceError):
    """A persisted record does not describe a valid match state."""

    kind = "corrupt_state"


# =============================================================================
# Share codes
# =============================================================================

class ShareCodeError(MatchError):
    kind = "share_code_error"


class InvalidShareCodeFormatError(ShareCodeError):
    kind = "invalid_format"

    def __init__(self, message: str = "Invalid code format"):
        super().__init__(message)


class ShareCodeNotFoundError(ShareCodeError):
    """No active owner for the code (never issued, or superseded)."""

    kind = "not_found"

    def __init__(self, message: str = "Invalid or expired code"):
        super().__init__(message)


class SharedMatchNotFoundError(ShareCodeError):
    kind = "match_not_found"

    def __init__(self, message: str = "No match found"):
        super().__init__(message)


class ShareCodeExhaustedError(ShareCodeError):
    kind = "exhausted"

    def __init__(self, message: str = "Failed to generate unique share code after max attempts"):
        super().__init__(message)
