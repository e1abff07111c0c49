"""
TASKMAN - Error Taxonomy
========================
Every user-facing failure derives from TaskmanError and aborts only the
current invocation, before anything is saved.

    TaskmanError
    ├── UnknownNameError / AmbiguousNameError        - name resolution
    ├── UnsupportedFlagForCommandError               - command validation
    ├── MissingRequiredFlagError
    ├── FilterConflictsWithApplyAllError
    ├── NoExplicitFilterError
    ├── MissingFlagValueError
    ├── InvalidIdOrIdRangeError / InvalidIdRangeOrderError
    ├── InvalidSortOrderError                        - sort strings
    │   ├── NoSuchSortPropertyError
    │   └── AmbiguousSortPropertyError
    ├── UnrecognizedDueDateExpressionError
    ├── UnknownBooleanValueError / UnknownPriorityLevelError
    ├── InvalidNumberError / UnknownFormatError
    ├── MissingDescriptionError / MissingArgumentError
    ├── UnexpectedArgumentsError
    ├── InvalidParameterValueError
    └── TaskListReadError

FlagNotSetError is not a TaskmanError: it signals a programming mistake
(reading a flag nobody set), never bad input.
"""

from typing import Any, Iterable, List


class TaskmanError(Exception):
    """Base exception for all user-facing taskman errors.

    Attributes:
        message: Human-readable error description
        context: The offending values (token, command, flag...)
    """

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)


# =============================================================================
# Name resolution
# =============================================================================


class UnknownNameError(TaskmanError):
    """A command, flag or property token matched nothing"""

    def __init__(self, kind: str, name: str, suggestions: Iterable[str] = ()) -> None:
        self.kind = kind
        self.name = name
        self.suggestions: List[str] = list(suggestions)
        message = f"Unknown {kind} '{name}'."
        if self.suggestions:
            quoted = ", ".join(f"'{s}'" for s in self.suggestions)
            message += f" Did you mean {quoted}?"
        super().__init__(message, kind=kind, name=name)


class AmbiguousNameError(TaskmanError):
    """A token is a prefix of more than one command, flag or property"""

    def __init__(self, kind: str, name: str, candidates: Iterable[str]) -> None:
        self.kind = kind
        self.name = name
        self.candidates: List[str] = list(candidates)
        super().__init__(
            f"Ambiguous {kind} '{name}', it could mean: {', '.join(self.candidates)}.",
            kind=kind,
            name=name,
        )


# =============================================================================
# Command validation
# =============================================================================


class UnsupportedFlagForCommandError(TaskmanError):
    def __init__(self, flag: str, command: str) -> None:
        super().__init__(
            f"The '{flag}' flag does not make sense with the '{command}' command.",
            flag=flag,
            command=command,
        )


class MissingRequiredFlagError(TaskmanError):
    def __init__(self, flag: str, command: str) -> None:
        super().__init__(
            f"Required flag '{flag}' was not specified for the '{command}' command.",
            flag=flag,
            command=command,
        )


class FilterConflictsWithApplyAllError(TaskmanError):
    def __init__(self, flags: Iterable[str]) -> None:
        names = ", ".join(f"'{name}'" for name in flags)
        super().__init__(
            f"The 'all' flag cannot be combined with task filters ({names}).",
            flags=names,
        )


class NoExplicitFilterError(TaskmanError):
    def __init__(self, command: str) -> None:
        super().__init__(
            "No task filter conditions specified. "
            f"Use the --all flag if you intended to {command} all tasks.",
            command=command,
        )


class MissingFlagValueError(TaskmanError):
    def __init__(self, flag: str) -> None:
        super().__init__(f"The '{flag}' flag requires a value.", flag=flag)


# =============================================================================
# Value parsing
# =============================================================================


class InvalidIdOrIdRangeError(TaskmanError):
    def __init__(self, value: str) -> None:
        super().__init__(f"Unknown ID or ID range '{value}'.", value=value)


class InvalidIdRangeOrderError(TaskmanError):
    def __init__(self, value: str) -> None:
        super().__init__(
            f"Invalid task ID range '{value}': "
            "the starting ID should not exceed the ending ID.",
            value=value,
        )


class InvalidSortOrderError(TaskmanError):
    def __init__(self, value: str, message: str = "") -> None:
        self.value = value
        super().__init__(
            message or f"Invalid sort order '{value}'. Expected steps like 'priority-id+'.",
            value=value,
        )


class NoSuchSortPropertyError(InvalidSortOrderError):
    def __init__(self, value: str, prefix: str, direction: str) -> None:
        self.prefix = prefix
        super().__init__(
            value,
            f"Invalid sorting step '{prefix}{direction}', "
            f"there is no task property that starts with '{prefix}'.",
        )


class AmbiguousSortPropertyError(InvalidSortOrderError):
    def __init__(self, value: str, prefix: str, direction: str, candidates: Iterable[str]) -> None:
        self.prefix = prefix
        self.candidates = list(candidates)
        super().__init__(
            value,
            f"Ambiguous sorting step '{prefix}{direction}', more than one task "
            f"property starts with '{prefix}': {', '.join(self.candidates)}.",
        )


class UnrecognizedDueDateExpressionError(TaskmanError):
    def __init__(self, value: str) -> None:
        super().__init__(f"Unrecognized due date expression '{value}'.", value=value)


class UnknownBooleanValueError(TaskmanError):
    def __init__(self, value: str) -> None:
        super().__init__(f"Cannot parse '{value}' into a boolean value.", value=value)


class UnknownPriorityLevelError(TaskmanError):
    def __init__(self, value: str) -> None:
        super().__init__(f"Unknown priority level '{value}'.", value=value)


class InvalidNumberError(TaskmanError):
    def __init__(self, value: str) -> None:
        super().__init__(f"'{value}' is not a non-negative whole number.", value=value)


class UnknownFormatError(TaskmanError):
    def __init__(self, value: str) -> None:
        super().__init__(f"Unknown output format '{value}'.", value=value)


# =============================================================================
# Command arguments, configuration and storage
# =============================================================================


class MissingDescriptionError(TaskmanError):
    def __init__(self) -> None:
        super().__init__("A task description is missing.")


class MissingArgumentError(TaskmanError):
    def __init__(self, command: str, usage: str) -> None:
        super().__init__(
            f"Insufficient arguments for '{command}'. Usage: {usage}",
            command=command,
        )


class UnexpectedArgumentsError(TaskmanError):
    def __init__(self, command: str, arguments: Iterable[str]) -> None:
        text = " ".join(arguments)
        super().__init__(
            f"The '{command}' command does not take arguments, got '{text}'.",
            command=command,
            arguments=text,
        )


class InvalidParameterValueError(TaskmanError):
    def __init__(self, name: str, value: str) -> None:
        super().__init__(
            f"'{value}' is not a valid value for the '{name}' parameter.",
            name=name,
            value=value,
        )


class TaskListReadError(TaskmanError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            f"An error occurred while trying to read task list {path}: {reason}",
            path=path,
        )


# =============================================================================
# Programming errors
# =============================================================================


class FlagNotSetError(RuntimeError):
    """A flag value was read although the flag was never set"""

    def __init__(self, flag: str) -> None:
        self.flag = flag
        super().__init__(f"The {flag} flag value has not been set.")
