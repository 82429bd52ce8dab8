import pytest

from jwtmanager.errors import SubjectError
from jwtmanager.types import ResolvedSubject, maybe_await, pick, resolve_subject


def test_bare_subject():
    assert resolve_subject("user-42") == ResolvedSubject("user-42", {})


def test_pair_subject():
    resolved = resolve_subject(("user-42", {"role": "admin"}))
    assert resolved.subject == "user-42"
    assert resolved.properties == {"role": "admin"}


def test_pair_without_properties():
    assert resolve_subject(("user-42", None)).properties == {}
    assert resolve_subject(("user-42",)).properties == {}


def test_record_subject_does_not_mutate_input():
    record = {"sub": "user-42", "role": "admin"}
    resolved = resolve_subject(record)
    assert resolved.properties == {"role": "admin"}
    assert record == {"sub": "user-42", "role": "admin"}


def test_resolved_subject_passthrough():
    resolved = ResolvedSubject("user-42", {"tenant": "acme"})
    assert resolve_subject(resolved) == resolved


@pytest.mark.parametrize("result", [None, "", (), {}, 0])
def test_no_result(result):
    assert resolve_subject(result) is None


def test_declared_properties_filter_extras():
    resolved = resolve_subject({"sub": "u", "role": "admin", "secret": "x"}, properties=["role"])
    assert resolved.properties == {"role": "admin"}


@pytest.mark.parametrize(
    "result",
    [
        {"role": "admin"},
        ("", {}),
        (42, {}),
        ("u", {}, "extra"),
        ("u", ["not", "a", "mapping"]),
        12345,
        {"sub": "u", "exp": 0},
        ("u", {"jti": "forged"}),
    ],
)
def test_malformed_results_raise(result):
    with pytest.raises(SubjectError):
        resolve_subject(result)


def test_pick():
    assert pick({"a": 1, "b": 2}, ["a", "c"]) == {"a": 1}


@pytest.mark.asyncio
async def test_maybe_await():
    async def coro():
        return 2

    assert await maybe_await(1) == 1
    assert await maybe_await(coro()) == 2
