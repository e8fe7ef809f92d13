"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold the rules that span credentials and identities
    rather than belonging to either entity.
    """

    pass
