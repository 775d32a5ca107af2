"""
Error taxonomy for the quote availability monitor

Every failure the jobs can hit maps to one of these types. The probe turns
them into a failed availability record; the token refresher lets them
propagate to the timer function.
"""


class MonitorError(Exception):
    """Base class for all monitor errors"""


class ConfigurationError(MonitorError):
    """Required environment configuration is missing or invalid"""


class AuthError(MonitorError):
    """Login call failed or returned a body without a usable access token"""


class CredentialStoreError(MonitorError):
    """Key Vault unreachable, secret missing or expired, or write rejected"""


class FixtureNotFoundError(MonitorError):
    """No fixture stored for the selected serial number"""


class AuthRejected(MonitorError):
    """Quote API rejected the bearer token (HTTP 401)"""


class SlaViolation(MonitorError):
    """Quote API answered 200 but slower than the response time SLA"""


class UpstreamError(MonitorError):
    """Quote API answered with a non-200, non-401 status"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
