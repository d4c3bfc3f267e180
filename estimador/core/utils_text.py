import math
import re

from estimador.core.settings import DEFAULT_TIME

_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def normalize_topic(topic) -> str:
    if topic is None:
        return ""
    return str(topic).strip().lower()


def parse_decimal(raw) -> float | None:
    """
    Convierte la entrada a número aceptando coma como separador decimal.
    Devuelve None si está vacía o no es un número finito; nunca lanza.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
        return value if math.isfinite(value) else None
    text = str(raw).strip().replace(",", ".", 1)
    if not text or not _DECIMAL_RE.match(text):
        return None
    value = float(text)
    return value if math.isfinite(value) else None


def coerce_time(raw) -> float:
    value = parse_decimal(raw)
    if value is None or value <= 0:
        return float(DEFAULT_TIME)
    return value


def compact_number(value: float):
    # 42.0 -> 42 para que JSON y planillas muestren lo que cargó el operador
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value
