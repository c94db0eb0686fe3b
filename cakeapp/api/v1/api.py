"""
V1 API router aggregator: wires all endpoint modules together.
"""

from fastapi import APIRouter

from cakeapp.api.v1.endpoints import deliveries, designs, orders, stages, users

api_router = APIRouter()

# Identity lifecycle (register, verify, login, profile CRUD)
api_router.include_router(users.router)

# Catalogue, orders and production
api_router.include_router(designs.router)
api_router.include_router(orders.router)
api_router.include_router(stages.router)

# Courier scheduling
api_router.include_router(deliveries.router)
