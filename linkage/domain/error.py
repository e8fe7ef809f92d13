"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error.

    Carries an HTTP-style status so outer layers can map it without
    inspecting the message.
    """

    code = "Validation Error"
    status_code = 422


class DuplicateLinkError(ValidationError):
    """Raised when an external account is already linked to a credential."""

    def __init__(self, provider: str, external_id: str):
        self.provider = provider
        self.external_id = external_id
        super().__init__("Credentials already linked")


class MalformedLinkError(ValidationError):
    """Raised when link parameters are missing or unusable."""

    status_code = 400

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    status_code = 404

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")
