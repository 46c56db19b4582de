"""Content detectors used by the crystal store for auto-detected exports."""


class NullContentDetector:
    """Detector with no access to the calling agent's context.

    Always reports that nothing was found, so exports without explicit
    content fail with a descriptive error.
    """

    def detect_latest_content(self) -> str | None:
        return None


class StaticContentDetector:
    """Detector that hands out a fixed piece of content."""

    def __init__(self, content: str | None) -> None:
        self.content = content

    def detect_latest_content(self) -> str | None:
        return self.content
