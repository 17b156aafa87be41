# stdlib
from enum import Enum
from typing import FrozenSet, Optional


class ImageDetectionErrorKind(Enum):
    NO_PERSON_FOUND = "NoPersonFound"
    NO_LABELS_FOUND = "NoLabelsFound"


# kinds that warrant an issue report instead of failing the record
REPORTABLE_ERROR_KINDS: FrozenSet[ImageDetectionErrorKind] = frozenset(
    {
        ImageDetectionErrorKind.NO_PERSON_FOUND,
        ImageDetectionErrorKind.NO_LABELS_FOUND,
    }
)


class ImageDetectionError(Exception):
    """Raised when the labeling call completes but the image fails detection."""

    def __init__(self, kind: ImageDetectionErrorKind, message: Optional[str] = None):
        self.kind = kind
        super().__init__(message or kind.value)


class NoPersonFoundError(ImageDetectionError):
    def __init__(self, message: Optional[str] = "No person found in the image"):
        super().__init__(ImageDetectionErrorKind.NO_PERSON_FOUND, message)


class NoLabelsFoundError(ImageDetectionError):
    def __init__(self, message: Optional[str] = "No labels found in the image"):
        super().__init__(ImageDetectionErrorKind.NO_LABELS_FOUND, message)
