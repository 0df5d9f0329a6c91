"""Exceptions raised by the pipeline stages.

All of them derive from ``ValueError`` so callers that only care about bad
input can catch that.
"""


class CorpusFormatError(ValueError):
    """Corpus file is missing required columns or holds invalid records."""


class InfeasibleReductionError(ValueError):
    """No regularization strength yields an active-term count within the cap."""


class ColumnMismatchError(ValueError):
    """A term matrix does not carry the vocabulary a consumer was bound to."""
