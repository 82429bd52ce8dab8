"""
Shared types for jwtmanager: claim sets, resolver results and callback shapes.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, Mapping, Optional, Tuple, TypeVar, Union

from .errors import SubjectError

T = TypeVar("T")

ClaimSet = Dict[str, Any]

# Registered claims owned by the manager; application properties may not use them.
RESERVED_CLAIMS = frozenset({"jti", "sub", "iss", "aud", "exp", "iat", "nbf"})


@dataclass(frozen=True)
class ResolvedSubject:
    """Canonical resolver result: the principal and its extra claims."""
    subject: str
    properties: Dict[str, Any] = field(default_factory=dict)


# What a resolver may return:
#   "user-42"                               bare subject
#   ("user-42", {"role": "admin"})          subject and extra properties
#   {"sub": "user-42", "role": "admin"}     record carrying ``sub``
#   ResolvedSubject(...)                    already canonical
#   None                                    caller not found
SubjectResult = Union[str, Tuple[str, Optional[Mapping[str, Any]]], Mapping[str, Any], ResolvedSubject, None]

FindSubjectFunction = Callable[..., Union[SubjectResult, Awaitable[SubjectResult]]]
VerifySubjectFunction = Callable[[ClaimSet], Union[Optional[bool], Awaitable[Optional[bool]]]]
GenerateIDFunction = Callable[[], Union[str, Awaitable[str]]]


async def maybe_await(value: Union[T, Awaitable[T]]) -> T:
    """Await ``value`` if it is awaitable, so callbacks may be sync or async."""
    if inspect.isawaitable(value):
        return await value
    return value


def pick(mapping: Mapping[str, Any], keys: Iterable[str]) -> Dict[str, Any]:
    """Copy only ``keys`` present in ``mapping``."""
    return {k: mapping[k] for k in keys if k in mapping}


def resolve_subject(
    result: SubjectResult,
    properties: Optional[Iterable[str]] = None,
) -> Optional[ResolvedSubject]:
    """Normalize any resolver result into a :class:`ResolvedSubject`.

    Args:
        result: Value returned by the resolver.
        properties: Declared application claim names. When given, extra
            properties outside this set are dropped.

    Returns:
        The resolved subject, or ``None`` when the resolver found nobody.

    Raises:
        SubjectError: if the result has an unsupported shape, lacks a subject,
            or carries a reserved claim name.
    """
    if not result:
        return None

    if isinstance(result, ResolvedSubject):
        subject, extras = result.subject, result.properties
    elif isinstance(result, str):
        subject, extras = result, {}
    elif isinstance(result, tuple):
        if not 1 <= len(result) <= 2:
            raise SubjectError(f"Expected (subject, properties), got a tuple of {len(result)}")
        subject = result[0]
        extras = result[1] if len(result) == 2 and result[1] else {}
    elif isinstance(result, Mapping):
        if "sub" not in result:
            raise SubjectError("Resolver record is missing 'sub'")
        extras = {k: v for k, v in result.items() if k != "sub"}
        subject = result["sub"]
    else:
        raise SubjectError(f"Unsupported resolver result type: {type(result).__name__}")

    if not isinstance(subject, str) or not subject:
        raise SubjectError("Subject must be a non-empty string")
    if not isinstance(extras, Mapping):
        raise SubjectError("Extra properties must be a mapping")

    extras = dict(extras)
    if properties is not None:
        extras = pick(extras, properties)
    collisions = RESERVED_CLAIMS.intersection(extras)
    if collisions:
        raise SubjectError(f"Properties collide with reserved claims: {', '.join(sorted(collisions))}")

    return ResolvedSubject(subject=subject, properties=extras)


__all__ = [
    "ClaimSet",
    "RESERVED_CLAIMS",
    "ResolvedSubject",
    "SubjectResult",
    "FindSubjectFunction",
    "VerifySubjectFunction",
    "GenerateIDFunction",
    "maybe_await",
    "pick",
    "resolve_subject",
]
