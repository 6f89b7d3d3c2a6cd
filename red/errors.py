"""Errors that end the editor session."""


class FatalError(Exception):
    """An unrecoverable terminal or file failure.

    The editor restores the terminal, prints ``"<context>: <reason>"`` and
    exits with status 1. Nothing is retried.
    """

    def __init__(self, context: str, reason: object = None):
        self.context = context
        self.reason = reason
        super().__init__(str(self))

    def __str__(self):
        if self.reason is None:
            return self.context
        if isinstance(self.reason, OSError) and self.reason.strerror:
            return f"{self.context}: {self.reason.strerror}"
        return f"{self.context}: {self.reason}"
