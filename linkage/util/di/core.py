"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from linkage.config import LinkingSettings, Settings
from linkage.util.di.base import ProviderBase
from linkage.util.locking import KeyedLock


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_linking_settings(self, settings: Settings) -> LinkingSettings:
        """Provide linking settings."""
        return settings.linking

    @provide(scope=Scope.APP)
    def provide_creation_locks(self) -> KeyedLock:
        """Provide the process-wide lock registry for first links.

        APP-scoped so that concurrent requests share it.
        """
        return KeyedLock()
