"""
Models package - imports all models so they register with SQLModel.metadata.
"""
from vocadeck.models.enums import SessionStatus

from vocadeck.models.card_set import CardSet
from vocadeck.models.card import Card
from vocadeck.models.user_card_stat import UserCardStat
from vocadeck.models.learning_session import LearningSession
from vocadeck.models.card_progress import CardProgress

__all__ = [
    'SessionStatus',
    'CardSet',
    'Card',
    'UserCardStat',
    'LearningSession',
    'CardProgress',
]
