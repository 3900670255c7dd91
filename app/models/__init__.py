"""ORM models — imported together so relationships and metadata resolve."""

from app.models.activity import Activity
from app.models.expense import Expense
from app.models.log import Log
from app.models.penalty import Penalty
from app.models.refresh_token import RefreshToken
from app.models.tier import Tier
from app.models.user import User, UserRole

__all__ = [
    "Activity",
    "Expense",
    "Log",
    "Penalty",
    "RefreshToken",
    "Tier",
    "User",
    "UserRole",
]
