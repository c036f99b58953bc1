# servicemap/services/repository.py

from typing import Iterable, List, Sequence, Tuple

from servicemap.services.models import DataOrigin, ServiceRecord

FILTER_ALL = "all"


class ServiceState:
    """
    Dataset en memoria. Se reemplaza completo en cada carga y nunca se muta
    parcialmente; los filtros regresan listas nuevas.
    """

    def __init__(self) -> None:
        self._services: Tuple[ServiceRecord, ...] = ()
        self._origin: DataOrigin = "fallback"
        self._loaded = False

    @property
    def services(self) -> Tuple[ServiceRecord, ...]:
        return self._services

    @property
    def origin(self) -> DataOrigin:
        return self._origin

    @property
    def loaded(self) -> bool:
        return self._loaded

    def replace(self, services: Iterable[ServiceRecord], origin: DataOrigin) -> None:
        self._services = tuple(services)
        self._origin = origin
        self._loaded = True

    def __len__(self) -> int:
        return len(self._services)


def filter_services(
    services: Sequence[ServiceRecord],
    filter_type: str,
) -> List[ServiceRecord]:
    if filter_type == FILTER_ALL:
        return list(services)
    return [s for s in services if s.type == filter_type]


def search_services(
    services: Sequence[ServiceRecord],
    term: str,
) -> List[ServiceRecord]:
    """
    Búsqueda por subcadena, sin distinguir mayúsculas, en nombre o dirección.
    Un término vacío no filtra nada.
    """
    needle = term.strip().lower()
    if not needle:
        return list(services)

    return [
        s for s in services
        if needle in s.name.lower()
        or (s.address is not None and needle in s.address.lower())
    ]
