class SignInError(Exception):
    """Base class for failures raised by the sign-in core."""


class IdentityConflict(SignInError):
    """The (provider, external_id) pair is already linked to a player."""


class PlayerNotFound(SignInError):
    """A player expected to exist is missing."""


class StorageUnavailable(SignInError):
    """The database could not be reached. Safe for the caller to retry."""


class SigningUnavailable(SignInError):
    """Session tokens cannot be signed (missing or unusable secret)."""


class InvalidSessionToken(SignInError):
    """A session token failed signature or expiry validation."""


class VerifierUnavailable(SignInError):
    """Third-party ID tokens cannot be verified (missing verifier configuration)."""
