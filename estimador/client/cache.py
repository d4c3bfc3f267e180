import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from estimador.core.settings import LOCAL_CACHE_PATH

log = logging.getLogger("client")

Grouped = Dict[str, List[Dict[str, Any]]]


class LocalCache:
    """Snapshot único de {topic: [preguntas]} en un archivo JSON."""

    def __init__(self, path: Path = LOCAL_CACHE_PATH):
        self.path = Path(path)

    def load(self) -> Grouped:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.warning("local cache unreadable (%s): %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            log.warning("local cache has unexpected shape, ignoring: %s", self.path)
            return {}
        return data

    def save(self, grouped: Grouped) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps(grouped, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(self.path)
