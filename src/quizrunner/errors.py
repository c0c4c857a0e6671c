class QuizError(Exception):
    """Base class for every error raised by quizrunner."""


class SourceUnavailable(QuizError):
    """The question data could not be read or parsed."""


class EmptyDataset(QuizError):
    """The question data was read but holds no records."""


class InvalidState(QuizError):
    """An engine operation was called out of sequence.

    This signals a defect in the caller, not a user-facing condition.
    """
