# pipeline/errors.py
"""
Recoverable errors surfaced to the UI / API. None of them is fatal.
"""


class FailurePredictorError(Exception):
    """Base class."""


class MalformedInputError(FailurePredictorError):
    """CSV is missing the label column (or carries unusable labels)."""


class EmptyDatasetError(FailurePredictorError):
    """No row survived numeric coercion."""


class InvalidPredictionInputError(FailurePredictorError):
    """A prediction feature value is missing or not numeric."""


class ModelUnavailableError(FailurePredictorError):
    """Predict / save requested with no trained or loaded model."""


class PersistenceError(FailurePredictorError):
    """Model store read/write failed. Message comes from the store."""

    def __init__(self, message, key=None, missing=False):
        super().__init__(message)
        self.key = key
        self.missing = missing
