"""Error taxonomy shared by the execution pipeline, the store and the API.

Each error carries the HTTP status the API layer answers with. Failures that
come back from the execution runtime (compile errors, runtime errors, transport
problems) are never raised; they are folded into an ``ExecutionOutcome``.
"""


class RunlabError(Exception):
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class InputError(RunlabError):
    """The caller sent something that cannot be executed or stored."""
    status_code = 400


class InvalidCursor(InputError):
    pass


class Unauthenticated(RunlabError):
    status_code = 401

    def __init__(self, message="Not authenticated"):
        super().__init__(message)


class EntitlementDenied(RunlabError):
    status_code = 403

    def __init__(self, message="entitlement required for this language"):
        super().__init__(message)


class NotFound(RunlabError):
    status_code = 404


class StorageError(RunlabError):
    """The persistence layer could not complete a read or a write."""
    status_code = 503
