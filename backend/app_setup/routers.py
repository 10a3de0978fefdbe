"""
Registre central des routers.
- Commandes et paiements (/api/order, /api/order/payment)
- Comptes (/api/user)
- Catalogue (taxonomies, produits, bannières)
- Health
"""
from fastapi import FastAPI
from backend.orders.views import router as orders_router
from backend.payments.views import router as payments_router
from backend.users.views import api_router as users_api_router
from backend.products.views import router as products_router
from backend.banners.views import router as banners_router
from backend.taxonomies.views import routers as taxonomy_routers
from backend.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    """
    Agrège tous les routers de l'application.
    L'ordre compte pour /api/order/payment/*: inclus avant /api/order/{order_id}.
    """
    app.include_router(payments_router)
    app.include_router(orders_router)
    app.include_router(users_api_router)
    for router in taxonomy_routers:
        app.include_router(router)
    app.include_router(products_router)
    app.include_router(banners_router)
    app.include_router(health_router)
