"""
Contract services.

Each service owns one slice of the contract's behaviour and reaches
persistent state only through ContractState mappers.
"""

from .access_control import AccessControl
from .achievement_tracker import POPULAR_TEMPLATE_USES, AchievementTracker
from .administration import Administration
from .generation_registry import PAYLOAD_SEPARATOR, GenerationRegistry
from .marketplace import Marketplace, split_sale_price
from .rate_limiter import RateLimiter
from .rating_service import RatingService
from .template_minter import TemplateMinter

__all__ = [
    "AccessControl",
    "AchievementTracker",
    "Administration",
    "GenerationRegistry",
    "Marketplace",
    "RateLimiter",
    "RatingService",
    "TemplateMinter",
    "PAYLOAD_SEPARATOR",
    "POPULAR_TEMPLATE_USES",
    "split_sale_price",
]
