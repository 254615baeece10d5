"""Exception hierarchy for toolchat.

Only endpoint failures and the iteration limit are fatal to a run. Tool-level
errors are caught by the conversation loop and fed back to the model as
conversational content.
"""


class ToolchatError(Exception):
    """Base class for all toolchat errors."""


class EndpointError(ToolchatError):
    """The inference call could not be completed.

    Raised for connection failures, error responses from Ollama and replies
    that cannot be parsed. Never retried.
    """


class UnknownToolError(ToolchatError):
    """The model requested a tool that is not in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ToolExecutionError(ToolchatError):
    """A tool adapter's underlying operation failed."""

    def __init__(self, tool_name: str, message: str) -> None:
        self.tool_name = tool_name
        super().__init__(message)


class IterationLimitError(ToolchatError):
    """The conversation exceeded the configured number of endpoint calls."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(
            f"Conversation did not finish within {limit} model calls"
        )
