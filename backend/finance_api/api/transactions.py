# finance_api/api/transactions.py
from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from finance_api.api.deps import get_transaction_service
from finance_api.schemas.transaction import TransactionIn, TransactionOut
from finance_api.services.transactions import TransactionService

router = APIRouter(tags=["transacoes"])

@router.get("", response_model=List[TransactionOut])
def list_transactions(
    ano: Optional[int] = Query(None, ge=1, le=9999, description="year of data_transacao"),
    mes: Optional[int] = Query(None, ge=1, le=12, description="month of data_transacao"),
    service: TransactionService = Depends(get_transaction_service),
):
    """
    Transactions of the current user, newest first, optionally narrowed to a year and/or month.
    """
    return service.list(ano=ano, mes=mes)

@router.get("/{txn_id}", response_model=TransactionOut)
def get_transaction(txn_id: int, service: TransactionService = Depends(get_transaction_service)):
    return service.get(txn_id)

@router.post("", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
def create_transaction(payload: TransactionIn, service: TransactionService = Depends(get_transaction_service)):
    return service.create(payload)

@router.put("/{txn_id}", response_model=TransactionOut)
def update_transaction(txn_id: int, payload: TransactionIn, service: TransactionService = Depends(get_transaction_service)):
    return service.update(txn_id, payload)

@router.delete("/{txn_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(txn_id: int, service: TransactionService = Depends(get_transaction_service)):
    service.delete(txn_id)
    return None
