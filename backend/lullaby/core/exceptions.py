"""Custom exceptions for Lullaby.

Exception Hierarchy:
    LullabyError (base)
    ├── InvalidWaveError - Memory wave with impossible parameters
    ├── ServiceUnavailableError - Synthesis backend not responding
    ├── SynthesisError - Backend failed to produce audio
    ├── AudioProcessingError - Audio encoding/decoding issues
    └── ConfigurationError - Invalid tuning or settings

Non-fatal conditions (forced splits, unsupported characters, suppressed
waves) are reported as warnings or return values, never as exceptions.

Usage:
    from lullaby.core import InvalidWaveError

    try:
        result = interfere(waves)
    except InvalidWaveError as e:
        logger.warning(f"Rejected wave: {e}")
"""
from typing import Optional


class LullabyError(Exception):
    """Base exception for all Lullaby errors.

    Attributes:
        message: Human-readable error description
        details: Optional additional context
    """

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON responses."""
        result = {"error": self.message, "type": self.__class__.__name__}
        if self.details:
            result["details"] = self.details
        return result


class InvalidWaveError(LullabyError):
    """A memory wave was rejected before any computation.

    Attributes:
        field: The offending wave attribute
        value: The value it carried
        index: Position of the wave in the input sequence, if known
    """

    def __init__(
        self,
        field: str,
        value: float,
        expected: str,
        index: Optional[int] = None
    ):
        self.field = field
        self.value = value
        self.index = index

        message = f"Invalid wave {field}={value!r}"
        if index is not None:
            message = f"Invalid wave #{index} {field}={value!r}"

        super().__init__(message, f"expected {expected}")


class ServiceUnavailableError(LullabyError):
    """The synthesis backend is not responding.

    Attributes:
        service_name: Name of the service (e.g., "Kokoro")
        url: The URL we tried to reach
        suggestion: How to fix it
    """

    def __init__(
        self,
        service_name: str,
        url: Optional[str] = None,
        suggestion: Optional[str] = None
    ):
        self.service_name = service_name
        self.url = url
        self.suggestion = suggestion

        message = f"{service_name} is not responding"
        if url:
            message += f" at {url}"

        super().__init__(message, suggestion)


class SynthesisError(LullabyError):
    """Text-to-speech synthesis failed in the backend.

    Attributes:
        provider: The synthesis backend (e.g., "Kokoro")
        voice: The voice that was requested
        text_length: Length of text being synthesized
    """

    def __init__(
        self,
        provider: str,
        voice: Optional[str] = None,
        text_length: Optional[int] = None,
        cause: Optional[str] = None
    ):
        self.provider = provider
        self.voice = voice
        self.text_length = text_length

        message = f"{provider} synthesis failed"
        if voice:
            message += f" for voice '{voice}'"

        super().__init__(message, cause)


class AudioProcessingError(LullabyError):
    """Audio encoding/decoding failed.

    Attributes:
        operation: What we were trying to do (encode, decode)
        format: The audio format involved
    """

    def __init__(
        self,
        operation: str,
        format: Optional[str] = None,
        cause: Optional[str] = None
    ):
        self.operation = operation
        self.format = format

        message = f"Audio {operation} failed"
        if format:
            message += f" for {format} format"

        super().__init__(message, cause)


class ConfigurationError(LullabyError):
    """Invalid or missing configuration.

    Attributes:
        setting: The setting that's problematic
        current_value: What the value currently is
        expected: What it should be
    """

    def __init__(
        self,
        setting: str,
        current_value: Optional[str] = None,
        expected: Optional[str] = None
    ):
        self.setting = setting
        self.current_value = current_value
        self.expected = expected

        message = f"Configuration error: {setting}"
        details = None

        if current_value is not None and expected:
            details = f"Got '{current_value}', expected {expected}"
        elif expected:
            details = f"Expected {expected}"

        super().__init__(message, details)
