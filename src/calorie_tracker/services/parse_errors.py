"""Failures reported by the meal description parser."""


class MealParseError(Exception):
    """Base class for every meal parsing failure."""

    reason = "parse_error"
    message = "Failed to parse meal description."
    status_code = 500

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.message)
        self.detail = detail

    def to_payload(self) -> dict[str, object]:
        """Return the JSON body reported to callers."""
        payload: dict[str, object] = {"error": self.reason, "message": self.message}
        if self.detail:
            payload["detail"] = self.detail
        return payload


class InvalidInputError(MealParseError):
    """The request carried no usable meal description."""

    reason = "invalid_input"
    message = "Missing or invalid input."
    status_code = 400


class ConfigurationError(MealParseError):
    """The text-generation backend credential is not configured."""

    reason = "configuration_error"
    message = "Missing OpenAI API key."
    status_code = 500


class UpstreamError(MealParseError):
    """The text-generation backend call failed or returned an error status."""

    reason = "upstream_error"
    message = "OpenAI API error."
    status_code = 502

    def __init__(
        self, detail: str | None = None, upstream_status: int | None = None
    ) -> None:
        super().__init__(detail)
        self.upstream_status = upstream_status

    def to_payload(self) -> dict[str, object]:
        """Return the JSON body, including the backend status when known."""
        payload = super().to_payload()
        if self.upstream_status is not None:
            payload["upstream_status"] = self.upstream_status
        return payload


class ExtractionError(MealParseError):
    """A reply arrived but no food data could be recovered from it."""

    reason = "extraction_failed"
    message = (
        "Could not parse food data from AI response. "
        "Please try again or rephrase your input."
    )
    status_code = 502


class NoFoodsFoundError(MealParseError):
    """The reply parsed cleanly but named no foods."""

    reason = "no_foods_found"
    message = "No foods found in response."
    status_code = 422
