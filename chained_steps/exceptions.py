"""Exceptions raised by step definitions and by the library itself."""


class SkippedException(Exception):
    """Raised by a step definition to skip the rest of the scenario.

    The coordinator reports a step failing with this exception as skipped
    rather than failed, however deep in a chain it was raised.
    """


class PendingException(Exception):
    """Raised by a step definition that is not implemented yet."""

    def __init__(self, message: str = "Step definition is pending") -> None:
        super().__init__(message)


class ChainDepthExceeded(RuntimeError):
    """Chained steps nested deeper than the configured limit."""

    def __init__(self, step_text: str, max_depth: int) -> None:
        super().__init__(
            f"Chained step '{step_text}' exceeds the maximum chain depth of "
            f"{max_depth}; a step probably chains to itself"
        )
        self.step_text = step_text
        self.max_depth = max_depth


class RedundantStepDefinition(ValueError):
    """Two step definitions were registered for the same pattern."""


class ConfigError(ValueError):
    """Invalid coordinator configuration."""
