class ComposerError(Exception):
    """Base class for document engine errors."""
    pass


class InvalidPath(ComposerError):
    """A path or position does not resolve to an existing node."""

    def __init__(self, path, reason: str = "does not resolve to a node"):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid path {path}: {reason}")


class InvalidRange(ComposerError):
    """The start of a range is not before its end in document order."""

    def __init__(self, start, end):
        self.start = start
        self.end = end
        super().__init__(f"Invalid range: {start} is not before {end}")


class MalformedInput(ComposerError):
    """Input handed to the strict parser is not serialized text."""
    pass


class UnsupportedDelimiterNesting(ComposerError):
    """
    Overlapping delimiters were resolved by priority.

    Only raised by `decorate(..., strict=True)`; the default mode drops the
    lower-priority match silently.
    """

    def __init__(self, suppressed: list):
        self.suppressed = suppressed
        spans = ", ".join(f"{mark.value}[{start}:{end}]" for mark, start, end in suppressed)
        super().__init__(f"Overlapping delimiters suppressed: {spans}")


class EditorClosed(ComposerError):
    """An editor was used after close()."""
    pass
