"""Exception types raised by the authentication core."""


class ConfigurationError(Exception):
    """Required configuration (e.g. the Gemini credential) is missing or invalid."""


class UnknownToolError(LookupError):
    """The model requested a tool that is not registered."""

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name


class InvalidImageError(ValueError):
    """Image payload is empty or could not be decoded."""


class InvalidOverrideError(ValueError):
    """A per-call configuration override has an invalid value."""
