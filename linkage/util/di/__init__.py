"""Dependency injection module."""

from typing import Type

from linkage.util.di.application import ProdApplicationProvider
from linkage.util.di.base import Component, ProviderBase
from linkage.util.di.core import ProdConfigProvider
from linkage.util.di.domain import ProdDomainProvider
from linkage.util.di.infrastructure import (
    PersistenceProvider,
    ProdPersistenceProvider,
)
from linkage.util.error import DependencyInjectionError

# Providers without subclasses are concrete; the rest are mockable components
PROVIDERS: list[Type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    PersistenceProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Resolve a PROVIDERS entry to the class to instantiate.

    Args:
        base: Entry from PROVIDERS
        use_mock: Pick the mock implementation of a mockable component

    Raises:
        DependencyInjectionError: If the component has no implementation of
            the requested kind
    """
    implementations = base.__subclasses__()
    if not implementations:
        return base

    for impl in implementations:
        if impl.__is_mock__ == use_mock:
            return impl

    kind = "mock" if use_mock else "production"
    raise DependencyInjectionError(
        f"No {kind} implementation for {base.__mock_component__ or base.__name__}"
    )


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    "PersistenceProvider",
    "ProdPersistenceProvider",
]
