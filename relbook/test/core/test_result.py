"""Tests for relbook.core.result module."""

import pytest

from relbook.core.result import Err, Ok, Result, is_err, is_ok


class TestOk:
    def test_accessors(self) -> None:
        result = Ok(42)
        assert result.value == 42
        assert result.is_ok() is True
        assert result.is_err() is False
        assert result.unwrap() == 42
        assert result.unwrap_or(0) == 42

    def test_map(self) -> None:
        assert Ok(21).map(lambda x: x * 2) == Ok(42)

    def test_repr(self) -> None:
        assert repr(Ok("0.2.0")) == "Ok('0.2.0')"

    def test_frozen(self) -> None:
        result = Ok(42)
        with pytest.raises(AttributeError):
            result.value = 0  # type: ignore[misc]


class TestErr:
    def test_accessors(self) -> None:
        result = Err("boom")
        assert result.error == "boom"
        assert result.is_ok() is False
        assert result.is_err() is True
        assert result.unwrap_or(7) == 7

    def test_unwrap_raises(self) -> None:
        with pytest.raises(ValueError, match="called unwrap on Err: boom"):
            Err("boom").unwrap()

    def test_map_passes_through(self) -> None:
        err: Err[str] = Err("boom")
        assert err.map(lambda x: x) is err


class TestGuards:
    def test_narrowing(self) -> None:
        ok: Result[int, str] = Ok(1)
        err: Result[int, str] = Err("no")
        assert is_ok(ok) and not is_err(ok)
        assert is_err(err) and not is_ok(err)

    def test_pattern_matching(self) -> None:
        result: Result[int, str] = Err("missing")
        match result:
            case Ok(value):
                outcome = f"ok {value}"
            case Err(error):
                outcome = f"err {error}"
        assert outcome == "err missing"
