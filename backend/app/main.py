"""
Point d'entrée principal de l'API ClassBoard.
Démarrage : uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import app.models  # noqa: F401 (enregistre tous les modèles dans Base.metadata avant les routers)
from app.config import settings
from app.database import init_db
from app.exceptions import ServiceError
from app.routers import admin, auth, groups, projects, resources, students, teachers

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s : %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cycle de vie de l'application : création des tables en développement."""
    if settings.AUTO_CREATE_TABLES:
        logger.info("Création des tables manquantes (AUTO_CREATE_TABLES)")
        init_db()
    yield


app = FastAPI(
    title="ClassBoard API",
    description="API de gestion de classe : élèves, groupes, projets, tâches et ressources",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS: les cookies de session imposent allow_credentials et des origines explicites (regex).
app.add_middleware(
    CORSMiddleware,
    allow_origins=[],
    allow_origin_regex=settings.CORS_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)


app.include_router(auth.router)
app.include_router(teachers.router)
app.include_router(students.router)
app.include_router(groups.router)
app.include_router(projects.router)
app.include_router(resources.router)
app.include_router(admin.router)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Traduit les exceptions métier des services en réponse JSON avec leur code HTTP."""
    if exc.status_code >= 500:
        logger.error("Erreur métier : %s", exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Les erreurs de validation du corps ou des paramètres sont renvoyées en 400."""
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées pour garantir que la réponse 500
    passe bien par CORSMiddleware (qui injecte les headers CORS).
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Une erreur interne est survenue."},
    )


@app.get("/api/health", tags=["Santé"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return {"status": "ok", "service": "ClassBoard API", "version": "0.1.0"}
