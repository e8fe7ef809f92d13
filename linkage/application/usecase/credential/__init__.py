"""Credential use cases."""

from .get_user_credentials import GetUserCredentialsUseCase
from .link_credential import LinkCredentialUseCase

__all__ = ["GetUserCredentialsUseCase", "LinkCredentialUseCase"]
