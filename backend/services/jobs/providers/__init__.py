from services.jobs.providers.adzuna import AdzunaProvider
from services.jobs.providers.ausbildung import AusbildungProvider
from services.jobs.providers.base import JobProvider, ProviderResult
from services.jobs.providers.jsearch import JSearchProvider
from services.jobs.providers.morocco import MoroccoBoardProvider, morocco_providers
from services.jobs.providers.remoteok import RemoteOKProvider
from services.jobs.providers.themuse import TheMuseProvider


def global_providers() -> list[JobProvider]:
    return [RemoteOKProvider(), AdzunaProvider(), JSearchProvider(), TheMuseProvider()]


__all__ = [
    "AdzunaProvider",
    "AusbildungProvider",
    "JSearchProvider",
    "JobProvider",
    "MoroccoBoardProvider",
    "ProviderResult",
    "RemoteOKProvider",
    "TheMuseProvider",
    "global_providers",
    "morocco_providers",
]
