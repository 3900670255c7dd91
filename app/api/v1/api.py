"""
V1 API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import activities, auth, expenses, health, logs, penalties, tiers, users

api_router = APIRouter()

# Auth (login, register, refresh, revoke, me)
api_router.include_router(auth.router)

# Users, jury appointment
api_router.include_router(users.router)

# Records owned by a user
api_router.include_router(penalties.router)
api_router.include_router(expenses.router)
api_router.include_router(logs.router)

# Reference data
api_router.include_router(tiers.router)
api_router.include_router(activities.router)

# Health
api_router.include_router(health.router)
