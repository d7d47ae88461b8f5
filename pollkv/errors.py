"""
Exception hierarchy for pollkv.

Setup and wait failures are fatal to the process; store failures are
reported to the client as a command-level error.
"""


class PollKVError(Exception):
    """Base class for all pollkv errors."""


class StoreError(PollKVError):
    """A store could not complete a write."""


class AllocationError(StoreError):
    """The store ran out of memory while inserting or updating a key."""


class SetupError(PollKVError):
    """The listening socket could not be created, configured, bound or listened on."""


class FatalServerError(PollKVError):
    """The readiness wait failed with a non-transient error."""
