"""
API v1 router aggregation.
"""
from fastapi import APIRouter
from vocadeck.api.v1.endpoints import card_sets, cards, csv_transfer, sessions, stats

api_router = APIRouter()

# Each router already defines its own prefix
api_router.include_router(card_sets.router)
api_router.include_router(cards.router)
api_router.include_router(csv_transfer.router)
api_router.include_router(sessions.router)
api_router.include_router(stats.router)
