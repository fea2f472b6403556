from pydantic import BaseModel
from typing import Optional

from allowance.schemas.tracker import Amount

class LogEntryIn(BaseModel):
    date: Optional[str] = None
    amount: Amount = None
