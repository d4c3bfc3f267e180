"""Fuentes de lectura de preguntas: remota con caché, o sólo la caché local.

``select_source`` elige una con un health check; el resto del código lee
siempre a través de ``QuestionSource.load()`` sin try/except propios.
"""
import logging
from typing import Any, Dict, List, Optional, Protocol

from estimador.client.api import ApiClient
from estimador.client.cache import Grouped, LocalCache
from estimador.core.errors import TransientIOError

log = logging.getLogger("client")


class QuestionSource(Protocol):
    name: str

    def load(self) -> Grouped:
        ...


class RemoteSource:
    name = "remote"

    def __init__(self, client: ApiClient, cache: LocalCache):
        self.client = client
        self.cache = cache

    def load(self) -> Grouped:
        try:
            data = self.client.grouped()
        except TransientIOError as e:
            # prefer remote; si se cae a mitad de sesión, sirve la última copia
            log.warning("remote read failed, using local cache: %s", e)
            return self.cache.load()
        self.cache.save(data)
        return data


class LocalSource:
    name = "local"

    def __init__(self, cache: LocalCache):
        self.cache = cache

    def load(self) -> Grouped:
        return self.cache.load()


def select_source(client: ApiClient, cache: LocalCache) -> QuestionSource:
    if client.health():
        return RemoteSource(client, cache)
    log.warning("API unreachable at %s, reading local cache %s", client.base_url, cache.path)
    return LocalSource(cache)


class AdminClient:
    """
    Escrituras del backoffice. Cada mutación exitosa refresca la caché local;
    los errores (TransientIOError incluido) se propagan al operador.
    """

    def __init__(self, client: ApiClient, cache: LocalCache):
        self.client = client
        self.cache = cache

    def _refresh(self) -> None:
        self.cache.save(self.client.grouped())

    def create(self, topic: str, question: str, answer: float, time: Optional[float] = None) -> Dict[str, Any]:
        out = self.client.create(topic, question, answer, time)
        self._refresh()
        return out

    def update(self, question_id: str, **fields) -> Dict[str, Any]:
        out = self.client.update(question_id, **fields)
        self._refresh()
        return out

    def delete(self, question_id: str) -> Dict[str, Any]:
        out = self.client.delete(question_id)
        self._refresh()
        return out

    def bulk(self, questions: List[Dict[str, Any]]) -> Dict[str, Any]:
        out = self.client.bulk(questions)
        if out.get("success", 0) > 0:
            self._refresh()
        return out
