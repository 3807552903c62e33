"""
Configuration settings for the Incentive API
"""

import os
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict, List

from calculations.entities import BonusRates
from calculations.sales_aggregation import DEFAULT_CLOSED_STATUSES


def _split_list(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _parse_store_names(raw: str) -> Dict[str, str]:
    """'saron1:Saron 1,saron2:Saron 2' -> {'saron1': 'Saron 1', ...}"""
    names = {}
    for entry in _split_list(raw):
        store_id, _, name = entry.partition(":")
        names[store_id.strip()] = name.strip() or store_id.strip()
    return names


class Settings:
    # API Configuration
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # CORS - Handle comma-separated string
    ALLOWED_ORIGINS: List[str] = _split_list(
        os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:5173,http://localhost:8080")
    )

    # Business calendar (Brazil, UTC-3)
    BUSINESS_UTC_OFFSET_HOURS: int = int(os.getenv("BUSINESS_UTC_OFFSET_HOURS", "-3"))

    # Bonus fallbacks for employees without personal rates
    DEFAULT_BONUS_ACHIEVED_RATE: Decimal = Decimal(os.getenv("DEFAULT_BONUS_ACHIEVED_RATE", "0"))
    DEFAULT_BONUS_NOT_ACHIEVED_RATE: Decimal = Decimal(os.getenv("DEFAULT_BONUS_NOT_ACHIEVED_RATE", "0"))

    # Sales data
    CLOSED_SALE_STATUSES: List[str] = _split_list(
        os.getenv("CLOSED_SALE_STATUSES", ",".join(sorted(DEFAULT_CLOSED_STATUSES)))
    )
    STORE_NAMES: Dict[str, str] = _parse_store_names(
        os.getenv("STORE_NAMES", "saron1:Saron 1,saron2:Saron 2,saron3:Saron 3")
    )
    PERSONAL_HISTORY_WEEKS: int = int(os.getenv("PERSONAL_HISTORY_WEEKS", "4"))

    def default_bonus_rates(self) -> BonusRates:
        return BonusRates(achieved=self.DEFAULT_BONUS_ACHIEVED_RATE,
                          not_achieved=self.DEFAULT_BONUS_NOT_ACHIEVED_RATE)

    def business_timezone(self) -> timezone:
        return timezone(timedelta(hours=self.BUSINESS_UTC_OFFSET_HOURS))

    def business_now(self) -> datetime:
        """Current wall-clock time in the business timezone"""
        return datetime.now(self.business_timezone())


settings = Settings()
