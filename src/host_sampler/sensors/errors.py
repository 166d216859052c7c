"""Probe error taxonomy.

Every failure of a single probe invocation is raised as a ProbeError subclass
so the Sampler Loop can catch one type, log the probe key and kind, and render
a placeholder for that metric.
"""

from enum import Enum


class ProbeErrorKind(str, Enum):
    """Why a probe invocation failed."""

    UNAVAILABLE = "unavailable"  # Facility missing or wrong OS
    EXECUTION_FAILED = "execution_failed"  # Non-zero exit, could not start, timed out
    PARSE_FAILED = "parse_failed"  # Output did not have the expected shape


class ProbeError(Exception):
    """Raised when a probe cannot produce a reading.

    Attributes:
        kind: Failure classification.
        key: Key of the probe that failed.
    """

    kind: ProbeErrorKind = ProbeErrorKind.EXECUTION_FAILED

    def __init__(self, key: str, message: str) -> None:
        super().__init__(message)
        self.key = key
        self.message = message

    def __str__(self) -> str:
        return self.message


class ProbeUnavailable(ProbeError):
    """The underlying OS facility is not present on this host."""

    kind = ProbeErrorKind.UNAVAILABLE


class ProbeExecutionFailed(ProbeError):
    """The external invocation returned an error or could not be started."""

    kind = ProbeErrorKind.EXECUTION_FAILED


class ProbeParseFailed(ProbeError):
    """The probe ran but its output did not match the expected shape."""

    kind = ProbeErrorKind.PARSE_FAILED
