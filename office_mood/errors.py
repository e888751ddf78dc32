"""
Exception hierarchy for the mood pipeline.

Every failure is raised where it is detected and propagates unchanged to the
request boundary. Transport failures are left as ``httpx.HTTPError``.
"""


class MoodPipelineError(Exception):
    """Base class for failures raised by the mood pipeline."""


class ConfigurationError(MoodPipelineError):
    """A required credential or setting is missing."""


class UpstreamAPIError(MoodPipelineError):
    """An external API answered with an explicit failure."""


class EmptyContentError(MoodPipelineError):
    """The completion API succeeded but returned no content."""


class ResponseParseError(MoodPipelineError):
    """The completion content was not valid JSON."""

    def __init__(self, message: str, excerpt: str) -> None:
        super().__init__(message)
        self.excerpt = excerpt


class AnalysisValidationError(MoodPipelineError):
    """The completion JSON did not match the expected analysis shape."""
