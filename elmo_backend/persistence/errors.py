class SubmissionError(Exception):
    """Base class for errors raised while persisting a form submission."""


class InvalidGGMProperties(SubmissionError, ValueError):
    pass


class UnknownVocabularyTerm(SubmissionError, LookupError):
    def __init__(self, vocabulary: str, term: str):
        self.vocabulary = vocabulary
        self.term = term
        super().__init__(f"Unknown {vocabulary}: {term!r}")
