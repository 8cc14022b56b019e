"""Service layer exports."""

from .cache import CacheState, DashboardCache
from .dashboard import DashboardService
from .name_matching import MatchMode
from .pay_period import PayPeriod, current_pay_period
from .session_tokens import SessionTokenService

__all__ = [
    "CacheState",
    "DashboardCache",
    "DashboardService",
    "MatchMode",
    "PayPeriod",
    "SessionTokenService",
    "current_pay_period",
]
