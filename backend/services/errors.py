"""Domain errors raised by the score services; routes map them to HTTP statuses."""


class ScoreError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ScoreError):
    status_code = 400


class TaskNotFoundError(ScoreError):
    status_code = 404


class ConflictError(ScoreError):
    status_code = 409
