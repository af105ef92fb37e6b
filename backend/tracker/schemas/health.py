"""
Health check response schemas.
"""

from datetime import datetime
from pydantic import BaseModel
from typing import Dict, Optional


class HealthResponse(BaseModel):
    """Liveness, store connectivity and bank holiday freshness."""
    status: str
    version: str
    uptime: str
    checks: Dict[str, str] = {}
    bank_holidays_last_synced: Optional[datetime] = None
