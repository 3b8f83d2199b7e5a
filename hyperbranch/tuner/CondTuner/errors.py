from typing import Any, Dict, Mapping, Optional


class SearchSpaceError(Exception):
    """Base class for errors raised while building or using a ConditionalSpace."""


class DuplicateNameError(SearchSpaceError):
    """A parameter with the same name is already registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Parameter '{name}' is already defined in the search space")


class UnknownParameterError(SearchSpaceError, KeyError):
    """A dependency or query refers to a parameter that was never added."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Parameter '{name}' is not defined in the search space")

    def __str__(self) -> str:
        # KeyError would otherwise wrap the message in quotes
        return str(self.args[0])


class CyclicDependencyError(SearchSpaceError):
    """Adding the dependency would make a parameter its own ancestor."""

    def __init__(self, child: str, parent: str):
        self.child = child
        self.parent = parent
        super().__init__(
            f"Dependency '{child}' -> '{parent}' would create a cycle in the dependency graph"
        )


class TransformError(SearchSpaceError):
    """
    The configured transform failed on a particular assignment.

    The original exception is chained as ``__cause__`` and the assignment that
    triggered it is kept on ``assignment``, since a transform bug usually only
    shows up on the branch where the faulty access happens.
    """

    def __init__(self, assignment: Mapping[str, Any], reason: Optional[str] = None):
        self.assignment: Dict[str, Any] = dict(assignment)
        message = f"Transform failed for assignment {self.assignment}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class EvaluationError(Exception):
    """
    Raised by evaluation callbacks when a configuration cannot be scored.

    The search driver never catches this; it propagates to the caller.
    """
