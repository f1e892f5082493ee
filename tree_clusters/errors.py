"""Structured error types for clustering and the CLI.

Every failure the package reports is a ``ClusteringError`` carrying a
category, a message, an optional recovery suggestion and an exit code the
CLI uses when the error terminates a command.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Categories of errors for organization and handling."""

    PRECONDITION = "precondition"  # Matrix used outside its contract
    TREE = "tree"  # Nodes that do not form one tree
    INPUT = "input"  # Bad node sequences
    CONFIGURATION = "configuration"  # Invalid config file or values
    FILE_SYSTEM = "file_system"  # Unreadable input documents
    VALIDATION = "validation"  # Invalid CLI arguments


@dataclass
class ClusteringError(Exception):
    """Base class for structured errors with recovery suggestions.

    Attributes:
        category: Error category for grouping.
        message: Human-readable error message.
        suggestion: Optional actionable recovery suggestion.
        details: Optional additional details dict.
        exit_code: Exit code to use when this error causes termination.
    """

    category: ErrorCategory
    message: str
    suggestion: str | None = None
    details: dict[str, Any] | None = field(default_factory=dict)
    exit_code: int = 1

    def __post_init__(self) -> None:
        """Initialize the exception with the message."""
        super().__init__(self.message)

    def format(self, use_color: bool = True) -> str:
        """Format the error for display.

        Args:
            use_color: Whether to include ANSI color codes.

        Returns:
            Formatted error string with suggestion if available.
        """
        red = "\033[91m" if use_color else ""
        cyan = "\033[96m" if use_color else ""
        dim = "\033[2m" if use_color else ""
        reset = "\033[0m" if use_color else ""

        lines = [f"{red}Error:{reset} {self.message}"]

        if self.suggestion:
            lines.append(f"{cyan}Suggestion:{reset} {self.suggestion}")

        if self.details:
            for key, value in self.details.items():
                lines.append(f"{dim}  {key}: {value}{reset}")

        return "\n".join(lines)

    def __str__(self) -> str:
        """Return the formatted error message."""
        return self.format(use_color=False)


class InsufficientClustersError(ClusteringError):
    """closest() was asked for a pair while fewer than two clusters are live."""

    def __init__(self, num_clusters: int):
        super().__init__(
            category=ErrorCategory.PRECONDITION,
            message=(
                "There must be at least 2 clusters in order to return the "
                f"closest() ones, but there are {num_clusters}"
            ),
            suggestion="Check num_clusters() > 1 before calling closest()",
            details={"num_clusters": num_clusters},
            exit_code=1,
        )


class DisjointTreeError(ClusteringError):
    """Two nodes share no common ancestor."""

    def __init__(self, node_a: Any, node_b: Any):
        super().__init__(
            category=ErrorCategory.TREE,
            message="Nodes do not belong to the same tree: no common ancestor found",
            suggestion="Pass nodes drawn from a single parsed document",
            details={"node_a": _describe(node_a), "node_b": _describe(node_b)},
            exit_code=1,
        )


class UnknownClusterError(ClusteringError):
    """A merge operand is not a live cluster of the matrix."""

    def __init__(self, reason: str):
        super().__init__(
            category=ErrorCategory.PRECONDITION,
            message=f"Cannot merge: {reason}",
            suggestion="Merge only the clusters returned by closest() or live_clusters()",
            exit_code=1,
        )


class DuplicateNodeError(ClusteringError):
    """The same node appears more than once in the input sequence."""

    def __init__(self, node: Any, index: int):
        super().__init__(
            category=ErrorCategory.INPUT,
            message=f"Node at position {index} appears more than once in the input",
            suggestion="De-duplicate the node sequence before clustering",
            details={"node": _describe(node), "index": index},
            exit_code=2,
        )


class ConfigurationError(ClusteringError):
    """Error in configuration file or settings."""

    def __init__(
        self,
        message: str,
        config_file: str | None = None,
        suggestion: str | None = None,
    ):
        default_suggestion = "Check your configuration file syntax and field values"
        super().__init__(
            category=ErrorCategory.CONFIGURATION,
            message=message,
            suggestion=suggestion or default_suggestion,
            details={"config_file": config_file} if config_file else None,
            exit_code=1,
        )


class DocumentError(ClusteringError):
    """Error reading or parsing an input document."""

    def __init__(self, path: str, original_error: str | None = None):
        message = f"Cannot read document: {path}"
        if original_error:
            message = f"{message}: {original_error}"

        super().__init__(
            category=ErrorCategory.FILE_SYSTEM,
            message=message,
            suggestion="Verify the path exists and you have read permissions",
            details={"path": path},
            exit_code=1,
        )


class ValidationError(ClusteringError):
    """Error for invalid CLI arguments or input."""

    def __init__(self, message: str, suggestion: str | None = None):
        super().__init__(
            category=ErrorCategory.VALIDATION,
            message=message,
            suggestion=suggestion or "Check the command syntax with --help",
            exit_code=2,
        )


def _describe(node: Any) -> str:
    """Short, bounded description of an opaque node for error details."""
    name = getattr(node, "name", None)
    if isinstance(name, str):
        return f"<{name}>"
    text = repr(node)
    return text if len(text) <= 60 else text[:57] + "..."


def handle_exception(
    error: Exception,
    use_color: bool = True,
    verbose: bool = False,
) -> tuple[str, int]:
    """Convert any exception to formatted output and exit code.

    Args:
        error: The exception to handle.
        use_color: Whether to use color in output.
        verbose: Whether to include full traceback.

    Returns:
        Tuple of (formatted_message, exit_code).
    """
    import traceback

    if isinstance(error, ClusteringError):
        message = error.format(use_color=use_color)
        exit_code = error.exit_code
    else:
        red = "\033[91m" if use_color else ""
        reset = "\033[0m" if use_color else ""
        message = f"{red}Error:{reset} {str(error)}"
        exit_code = 1

    if verbose:
        message += "\n\nTraceback:\n" + traceback.format_exc()

    return message, exit_code
