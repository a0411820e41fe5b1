"""Custom exceptions for Vehicle Insight."""


class VehicleInsightError(Exception):
    """Base exception for all Vehicle Insight errors."""


class ConfigurationError(VehicleInsightError):
    """Exception raised for configuration related errors."""


class AuthenticationError(VehicleInsightError):
    """Exception raised for authentication failures."""


class AuthExpiredError(AuthenticationError):
    """The mail backend rejected the credential; the caller must re-authorize."""


class GmailAPIError(VehicleInsightError):
    """Exception raised for Gmail API related errors."""


class QueryFailure(GmailAPIError):
    """A single mailbox search query failed."""


class FetchFailure(GmailAPIError):
    """A single message fetch failed."""
