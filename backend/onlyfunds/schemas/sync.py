"""
Cloud sync schemas.
"""

from pydantic import BaseModel


class SyncResponse(BaseModel):
    cloud_configured: bool
    transactions_pulled: int
    budgets_pulled: int
