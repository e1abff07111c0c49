"""
TASKMAN - Prototype Matcher
===========================
Resolves a user-typed token against named entities (commands, flags,
sort properties, configuration parameters). Each entity has a prototype,
a pipe-delimited list of alias spellings such as "finish|complete".

Resolution is two-phase:
    1. strict: the token equals an alias (case-insensitively)
    2. prefix: only if nothing matched strictly, the token starts an alias

Exactly one matching entity wins; none raises UnknownNameError (with
"did you mean" suggestions), several raise AmbiguousNameError.
"""

import logging
from typing import Any, Callable, Iterable, List, NamedTuple, Sequence, TypeVar

from .exceptions import AmbiguousNameError, UnknownNameError

logger = logging.getLogger("taskman")

T = TypeVar("T")

SUGGESTION_DISTANCE = 2


class Resolution(NamedTuple):
    entity: Any
    spelling: str   # full alias the token stood for
    exact: bool     # False when the token was an abbreviation


def split_prototype(prototype: str) -> List[str]:
    """Split "add|new|create" into its alias spellings"""
    aliases = [alias.strip() for alias in prototype.split("|")]
    if not all(aliases):
        raise ValueError(f"Empty alias in prototype '{prototype}'")
    return aliases


def edit_distance(first: str, second: str) -> int:
    """Levenshtein distance between two strings"""
    previous = list(range(len(second) + 1))
    for i, a in enumerate(first, start=1):
        current = [i]
        for j, b in enumerate(second, start=1):
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + (a != b),
            ))
        previous = current
    return previous[-1]


def suggest(token: str, spellings: Iterable[str], threshold: int = SUGGESTION_DISTANCE) -> List[str]:
    lowered = token.lower()
    return sorted(
        {s for s in spellings if edit_distance(lowered, s.lower()) <= threshold},
        key=lambda s: (edit_distance(lowered, s.lower()), s),
    )


def resolve(
    token: str,
    entities: Sequence[T],
    get_aliases: Callable[[T], Sequence[str]],
    kind: str = "name",
    announce: bool = True,
) -> Resolution:
    """Return the single entity that the token names.

    With announce=False an abbreviation is not logged; the caller reports
    the returned inexact Resolution itself.

    Raises:
        UnknownNameError: nothing matches
        AmbiguousNameError: more than one entity matches
    """
    lowered = token.lower()

    # Strict phase
    strict = []
    for entity in entities:
        for alias in get_aliases(entity):
            if alias.lower() == lowered:
                strict.append((entity, alias))
                break

    if len(strict) == 1:
        entity, alias = strict[0]
        return Resolution(entity, alias, True)
    if len(strict) > 1:
        raise AmbiguousNameError(kind, token, [alias for _, alias in strict])

    # Prefix phase
    matches = []
    candidates: List[str] = []
    for entity in entities:
        spellings = [a for a in get_aliases(entity) if a.lower().startswith(lowered)]
        if spellings:
            matches.append((entity, spellings[0]))
            candidates.extend(spellings)

    if not matches:
        every_alias = [a for entity in entities for a in get_aliases(entity)]
        raise UnknownNameError(kind, token, suggest(token, every_alias))
    if len(matches) > 1:
        raise AmbiguousNameError(kind, token, candidates)

    entity, alias = matches[0]
    if announce:
        logger.info(f"Assuming {kind} '{alias}' for '{token}'")
    return Resolution(entity, alias, False)
