import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from estimador.core.errors import NotFoundError, TopicUnavailable, ValidationError
from estimador.core.settings import CORS_ORIGINS, LOG_LEVEL
from estimador.db import Base, engine
from estimador.domain.game.play import PlayRegistry
from estimador.models import question  # noqa: F401  registra la tabla en Base.metadata

from estimador.routers import questions as questions_router
from estimador.routers import play as play_router

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
log = logging.getLogger("estimador")

Base.metadata.create_all(bind=engine)

@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # cancela los relojes de partidas abiertas
    app.state.play_registry.close_all()

app = FastAPI(title="Estimador API", lifespan=lifespan)
app.state.play_registry = PlayRegistry()

# ==== CORS ====
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ==== Errores de dominio -> HTTP ====
@app.exception_handler(ValidationError)
async def on_validation_error(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})

@app.exception_handler(RequestValidationError)
async def on_request_validation_error(request: Request, exc: RequestValidationError):
    # body mal tipado: mismo 400 que los errores de dominio, con un mensaje legible
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = first.get("msg", "Datos inválidos")
    return JSONResponse(status_code=400, content={"detail": f"{field}: {msg}" if field else msg})

@app.exception_handler(NotFoundError)
async def on_not_found(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})

@app.exception_handler(TopicUnavailable)
async def on_topic_unavailable(request: Request, exc: TopicUnavailable):
    return JSONResponse(status_code=409, content={"detail": str(exc)})

# ==== Routers ====
app.include_router(questions_router.router)
app.include_router(play_router.router)

@app.get("/health")
def health():
    return {"status": "ok", "message": "Servidor funcionando correctamente"}
