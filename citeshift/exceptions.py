"""Exception hierarchy for citation editing.

Every CitationEditError carries a message meant for the user. Operations
raise before building a replacement, so a raised error means the document
was not touched.
"""


class CitationEditError(Exception):
    """Base exception for aborted citation edits."""

    message = "citation edit failed"

    def __init__(self, message: str = ""):
        super().__init__(message or self.message)


class NotOnCitationError(CitationEditError):
    message = "not on a citation"


class NotOnReferenceError(CitationEditError):
    message = "not on a citation reference"


class SingleReferenceError(CitationEditError):
    message = "only one reference, cannot shift"


class NothingToShiftError(CitationEditError):
    message = "nothing to shift here"


class RecoveryError(CitationEditError):
    message = "nothing found after reorder"


class InvalidStyleError(CitationEditError):
    message = "invalid style token"


class InvalidAnnotationError(CitationEditError):
    message = "annotation cannot contain ';', '@', '[' or ']'"


class InvalidKeyError(CitationEditError):
    message = "invalid citation key"


class OffsetOutOfRangeError(CitationEditError):
    message = "offset is outside the document"


class BibliographyError(Exception):
    """Raised when a bibliography cannot be read."""
