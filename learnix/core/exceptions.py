"""Terminal outcomes raised by data functions and turned into responses in `create_app`."""


class PortalError(Exception):
    """Base class for portal errors."""


class RedirectRequired(PortalError):
    """The current render must stop and send the caller elsewhere."""

    def __init__(self, location: str):
        super().__init__(f"Redirect to {location}")
        self.location = location


class ContentNotFound(PortalError):
    """Protected or missing content; not-found and forbidden are not distinguished."""

    def __init__(self, resource: str = "resource"):
        super().__init__(f"{resource} not found")
        self.resource = resource


class AuthorizationError(PortalError):
    """Authentication or role failure for callers that expect JSON instead of a redirect."""

    def __init__(self, detail: str, status_code: int = 403):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


class DatabaseNotConfigured(PortalError):
    """Raised when code that needs the local database runs without DATABASE_URL."""

    def __init__(self):
        super().__init__("DATABASE_URL is not set; the local database is disabled")


class IdentityProviderError(PortalError):
    """The hosted identity provider could not be reached or rejected the call."""


class ProvisioningError(PortalError):
    """The local user record for an external identity could not be created or refreshed."""
