"""Identity use cases."""

from .find_login_identity import FindLoginIdentityUseCase

__all__ = ["FindLoginIdentityUseCase"]
