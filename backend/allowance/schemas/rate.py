from pydantic import BaseModel
from typing import Optional

from allowance.schemas.tracker import Amount

class HistoryEntryIn(BaseModel):
    effective_date: Optional[str] = None
    amount: Amount = None
