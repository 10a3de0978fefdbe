# module backend.app
"""
Instance unique de l'application (API boutique de plantes).
Toute la configuration (middlewares, handlers, routers, lifespan) vit dans
backend.app_setup; ce module ne fait que l'assembler.
"""
import logging
import os

from backend.app_setup.factory import create_app

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app()
