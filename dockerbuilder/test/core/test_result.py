"""Tests for dockerbuilder.core.result module."""

import pytest

from dockerbuilder.core.result import Err, Ok, Result


def test_equality_by_value() -> None:
    assert Ok("1.2.3") == Ok("1.2.3")
    assert Err("boom") != Ok("boom")


def test_repr() -> None:
    assert repr(Ok(None)) == "Ok(None)"
    assert repr(Err("boom")) == "Err('boom')"


def test_immutable() -> None:
    with pytest.raises(AttributeError):
        Ok(1).value = 2  # type: ignore[misc]


def test_pattern_matching() -> None:
    result: Result[int, str] = Err("lookup failed")
    match result:
        case Ok(_):
            pytest.fail("expected Err")
        case Err(error):
            assert error == "lookup failed"
    match Ok(42):
        case Ok(value):
            assert value == 42
        case Err(_):
            pytest.fail("expected Ok")


def test_api_surface_is_minimal() -> None:
    import dockerbuilder.core.result as result_mod

    for name in ("unwrap", "unwrap_or", "map"):
        assert not hasattr(Ok, name)
        assert not hasattr(Err, name)
    assert not hasattr(result_mod, "is_ok")
    assert not hasattr(result_mod, "is_err")
