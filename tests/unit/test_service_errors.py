from __future__ import annotations

from src.services.errors import (
    ServiceError,
    LanguageModelError,
    ImageSearchError,
    UpstreamParseError,
    NetworkTimeoutError,
)


class TestServiceError:
    def test_base_exception(self) -> None:
        error = ServiceError("Base service error")
        assert str(error) == "Base service error"
        assert isinstance(error, Exception)


class TestLanguageModelError:
    def test_status_code(self) -> None:
        error = LanguageModelError("Language model error 429", status_code=429)
        assert error.status_code == 429
        assert isinstance(error, ServiceError)

    def test_status_code_defaults_to_none(self) -> None:
        assert LanguageModelError("connection refused").status_code is None


class TestImageSearchError:
    def test_status_code(self) -> None:
        error = ImageSearchError("Image search error 401", status_code=401)
        assert error.status_code == 401
        assert isinstance(error, ServiceError)


class TestUpstreamParseError:
    def test_is_service_error(self) -> None:
        assert isinstance(UpstreamParseError("bad json"), ServiceError)


class TestNetworkTimeoutError:
    def test_includes_url_and_timeout(self) -> None:
        error = NetworkTimeoutError("https://api.openai.com/v1/chat/completions", 30.0)
        assert "30.0" in str(error)
        assert error.url == "https://api.openai.com/v1/chat/completions"
        assert error.timeout_seconds == 30.0
