"""Signup client exceptions."""


class SignupClientError(Exception):
    """Signup client error."""

    pass


class StoreUnavailableError(SignupClientError):
    """The waitlist store could not be reached or read."""

    pass
