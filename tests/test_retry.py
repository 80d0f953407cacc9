"""Tests for the transient-failure retry helper."""

from unittest.mock import Mock, patch

import pytest

from recipes_buddy.data_layer.exceptions import RecipeNotFoundError, UpstreamError
from recipes_buddy.ingestion.retry import call_with_retry


class TestCallWithRetry:
    """Tests for call_with_retry."""

    def test_returns_first_success(self):
        func = Mock(return_value="ok")

        assert call_with_retry(func, 1, key="v", delay=0) == "ok"
        func.assert_called_once_with(1, key="v")

    def test_retries_transient_then_succeeds(self):
        func = Mock(side_effect=[UpstreamError("boom", 503, transient=True), "ok"])

        assert call_with_retry(func, max_retries=2, delay=0) == "ok"
        assert func.call_count == 2

    def test_gives_up_after_max_retries(self):
        error = UpstreamError("boom", 500, transient=True)
        func = Mock(side_effect=error)

        with pytest.raises(UpstreamError) as exc_info:
            call_with_retry(func, max_retries=2, delay=0)

        assert exc_info.value is error
        assert func.call_count == 3

    def test_non_transient_not_retried(self):
        func = Mock(side_effect=UpstreamError("bad request", 400))

        with pytest.raises(UpstreamError):
            call_with_retry(func, max_retries=2, delay=0)
        assert func.call_count == 1

    def test_not_found_not_retried(self):
        func = Mock(side_effect=RecipeNotFoundError(7))

        with pytest.raises(RecipeNotFoundError):
            call_with_retry(func, max_retries=2, delay=0)
        assert func.call_count == 1

    def test_sleeps_fixed_delay_between_attempts(self):
        func = Mock(side_effect=UpstreamError("boom", 504, transient=True))

        with patch("recipes_buddy.ingestion.retry.time.sleep") as sleep:
            with pytest.raises(UpstreamError):
                call_with_retry(func, max_retries=2, delay=1.0)

        assert sleep.call_count == 2
        sleep.assert_called_with(1.0)

    def test_zero_retries_means_single_attempt(self):
        func = Mock(side_effect=UpstreamError("boom", 502, transient=True))

        with pytest.raises(UpstreamError):
            call_with_retry(func, max_retries=0, delay=0)
        assert func.call_count == 1
