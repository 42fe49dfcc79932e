# finance_api/schemas/transaction.py
from pydantic import BaseModel, ConfigDict, Field, condecimal
from datetime import date
from decimal import Decimal
from typing import Optional


class TransactionIn(BaseModel):
    descricao: str = Field(..., min_length=1)
    # signed: refunds and corrections may be negative
    valor: condecimal(max_digits=12, decimal_places=2)
    tipo_transacao: str = Field(..., min_length=1, max_length=50)
    categoria_id: Optional[int] = None
    data_transacao: date
    tipo_despesa: Optional[str] = Field(None, max_length=50)
    data_vencimento: Optional[date] = None
    precisa_aviso: bool = False


class TransactionOut(BaseModel):
    id: int
    descricao: str
    valor: Decimal
    tipo_transacao: str
    categoria_id: Optional[int] = None
    data_transacao: date
    tipo_despesa: Optional[str] = None
    data_vencimento: Optional[date] = None
    precisa_aviso: bool
    usuario_id: int

    model_config = ConfigDict(from_attributes=True)
