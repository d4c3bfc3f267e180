class ValidationError(Exception):
    """Campo requerido ausente o mal formado. Se aborta sólo ese ítem."""


class NotFoundError(Exception):
    """La operación apunta a un identificador que no existe."""


class TransientIOError(Exception):
    """Store o red inalcanzable. Lecturas degradan a caché local."""


class TopicUnavailable(Exception):
    """El tema no tiene preguntas: no se puede entrar a responder."""
