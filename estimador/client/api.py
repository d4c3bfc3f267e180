import logging
from typing import Any, Dict, List, Optional

import requests

from estimador.core.errors import NotFoundError, TransientIOError, ValidationError
from estimador.core.settings import API_TIMEOUT, API_URL

log = logging.getLogger("client")


class ApiClient:
    """
    Cliente HTTP del API de preguntas. Sin reintentos automáticos: un error de
    red o un 5xx se propaga como TransientIOError y el operador decide.
    `session` puede ser cualquier objeto con get/post/put/delete estilo requests.
    """

    def __init__(self, base_url: str = API_URL, timeout: float = API_TIMEOUT, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = getattr(self.session, method)(url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise TransientIOError(f"No se pudo conectar con {url}: {e}") from e

        if resp.status_code >= 500:
            raise TransientIOError(f"HTTP {resp.status_code} en {method.upper()} {path}")
        if resp.status_code == 404:
            raise NotFoundError(_detail(resp) or "Pregunta no encontrada")
        if resp.status_code >= 400:
            raise ValidationError(_detail(resp) or f"HTTP {resp.status_code}")
        return resp.json()

    def health(self) -> bool:
        try:
            return self._request("get", "/health").get("status") == "ok"
        except (TransientIOError, NotFoundError, ValidationError) as e:
            log.warning("health check failed: %s", e)
            return False

    def grouped(self) -> Dict[str, List[Dict[str, Any]]]:
        return self._request("get", "/questions")

    def list(self) -> List[Dict[str, Any]]:
        return self._request("get", "/questions/list")

    def create(self, topic: str, question: str, answer: float, time: Optional[float] = None) -> Dict[str, Any]:
        body = {"topic": topic, "question": question, "answer": answer}
        if time is not None:
            body["time"] = time
        return self._request("post", "/questions", json=body)

    def update(self, question_id: str, **fields) -> Dict[str, Any]:
        return self._request("put", f"/questions/{question_id}", json=fields)

    def delete(self, question_id: str) -> Dict[str, Any]:
        return self._request("delete", f"/questions/{question_id}")

    def bulk(self, questions: List[Dict[str, Any]]) -> Dict[str, Any]:
        return self._request("post", "/questions/bulk", json={"questions": questions})


def _detail(resp) -> Optional[str]:
    try:
        data = resp.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        return data.get("detail") or data.get("error")
    return None
