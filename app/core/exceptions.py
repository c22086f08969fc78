"""Domain errors raised below the HTTP layer.

Routers translate these into `HTTPException`s; nothing in `services` or
`crud` knows about status codes.
"""


class QuizNotFound(Exception):
    """The quiz does not exist or cannot be served."""

    def __init__(self, message: str = "Quiz not found"):
        super().__init__(message)
        self.message = message


class QuizInactive(QuizNotFound):
    """The quiz exists but has been deactivated by its owner."""

    def __init__(self, message: str = "Quiz is no longer active"):
        super().__init__(message)


class SecretCodeRequired(Exception):
    """The quiz is private and the caller did not supply its code."""

    def __init__(self, message: str = "Secret code required"):
        super().__init__(message)
        self.message = message


class RetakeNotAllowed(Exception):
    def __init__(self, message: str = "You have already taken this quiz"):
        super().__init__(message)
        self.message = message


class EmailAlreadyRegistered(Exception):
    def __init__(self, message: str = "Email already registered"):
        super().__init__(message)
        self.message = message


class IncorrectPassword(Exception):
    def __init__(self, message: str = "Current password is incorrect"):
        super().__init__(message)
        self.message = message
