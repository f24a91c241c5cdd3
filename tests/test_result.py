import pytest

from gmethod.services.result import UNKNOWN_ERROR, USER_ERROR, Result


class TestResultSuccess:
    def test_success_creates_ok_result(self):
        result = Result.success("reply_pattern")
        assert result.ok is True
        assert result.value == "reply_pattern"
        assert result.error is None

    def test_success_without_value(self):
        result = Result.success()
        assert result.ok is True
        assert result.value is None


class TestResultFailure:
    def test_failure_creates_not_ok_result(self):
        result = Result.failure("Event has no source user", USER_ERROR)
        assert result.ok is False
        assert result.error == "Event has no source user"
        assert result.error_code == "user_error"
        assert result.value is None

    def test_failure_default_code(self):
        assert Result.failure("Error message").error_code == UNKNOWN_ERROR

    def test_forward_keeps_error(self):
        forwarded = Result.failure("no user", USER_ERROR).forward()
        assert (forwarded.ok, forwarded.error, forwarded.error_code) == (False, "no user", USER_ERROR)

    def test_forward_success_is_an_error(self):
        with pytest.raises(ValueError):
            Result.success("x").forward()


class TestResultUnwrapOr:
    def test_unwrap_or_returns_value_on_success(self):
        assert Result.success("top_message").unwrap_or("none") == "top_message"

    def test_unwrap_or_returns_default_on_failure(self):
        assert Result.failure("Error", USER_ERROR).unwrap_or("none") == "none"
