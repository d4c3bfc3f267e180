from fastapi import Request

from estimador.db import get_db
from estimador.domain.game.play import PlayRegistry

def get_registry(request: Request) -> PlayRegistry:
    return request.app.state.play_registry

__all__ = ["get_db", "get_registry"]
