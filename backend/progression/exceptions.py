class ProgressionError(Exception):
    """Base for errors whose message is shown to the student as-is."""
    default_message = "Something went wrong. Please try again."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ProgressionError):
    default_message = "Score values must be finite numbers."


class QuizUnavailable(ProgressionError):
    default_message = "Failed to load quiz. Please try again later."


class MaxAttemptsReached(ProgressionError):
    def __init__(self, max_attempts=3):
        super().__init__(
            f"You have reached the maximum number of attempts ({max_attempts}) for this quiz.")
        self.max_attempts = max_attempts


class QuizSubmissionFailed(ProgressionError):
    default_message = "Failed to submit quiz. Please try again."


class LectureLocked(ProgressionError):
    default_message = "This lecture is locked."


class InvalidCode(ProgressionError):
    default_message = "Invalid code."


class CodeAlreadyUsed(InvalidCode):
    default_message = "This code is already used."


class RedeemFailed(ProgressionError):
    default_message = "Failed to redeem code. Please try again."
