"""
Gestionnaires d'exceptions utilisés par la factory.
- HTTPException (dont toutes les erreurs métier de backend.utils.errors): JSON {"detail": ...}
- PersistenceError / UpstreamError: loggées; détail interne masqué en production
- Exceptions imprévues: 500 JSON générique
"""
import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from backend import config
from backend.utils.errors import PersistenceError, UpstreamError

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        detail = exc.detail
        if isinstance(exc, (PersistenceError, UpstreamError)):
            logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.detail)
            if config.IS_PRODUCTION:
                detail = type(exc).default_detail
        return JSONResponse(status_code=exc.status_code, content={"detail": detail}, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Erreur interne du serveur"})
