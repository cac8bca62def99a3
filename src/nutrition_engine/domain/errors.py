"""Domain errors for nutrition resolution."""


class SourceUnavailableError(Exception):
    """Raised when an upstream nutrition source cannot be reached."""

    def __init__(self, source: str, message: str = "") -> None:
        self.source = source
        super().__init__(f"{source} unavailable: {message}" if message else source)


class NutritionNotResolvedError(Exception):
    """Raised when no source yields an acceptable match for a food."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No nutrition match for {name!r}")
