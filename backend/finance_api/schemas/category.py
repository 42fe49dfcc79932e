# finance_api/schemas/category.py
from pydantic import BaseModel, ConfigDict, Field


class CategoryIn(BaseModel):
    nome: str = Field(..., min_length=1, max_length=150)
    # open value (e.g. "receita" / "despesa"); not enumerated
    tipo: str = Field(..., min_length=1, max_length=50)


class CategoryOut(CategoryIn):
    id: int
    usuario_id: int

    model_config = ConfigDict(from_attributes=True)
