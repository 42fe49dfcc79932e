# finance_api/schemas/auth.py
from pydantic import BaseModel, ConfigDict
from typing import Optional


class UserOut(BaseModel):
    id: int
    google_id: str
    nome: Optional[str] = None
    email: Optional[str] = None
    foto_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
