# finance_api/services/transactions.py
from typing import List, Optional

from sqlalchemy import select, update, delete, extract
from sqlalchemy.orm import Session

from finance_api.core.errors import NotFoundError, TRANSACTION_NOT_FOUND
from finance_api.db.models import Transaction
from finance_api.db.session import persistence_guard
from finance_api.schemas.transaction import TransactionIn


class TransactionService:
    """Transactions of one owner. Every statement carries the owner predicate."""

    def __init__(self, db: Session, owner_id: int):
        self.db = db
        self.owner_id = owner_id

    def _owned(self, txn_id: int):
        return (Transaction.id == txn_id, Transaction.usuario_id == self.owner_id)

    def list(self, ano: Optional[int] = None, mes: Optional[int] = None) -> List[Transaction]:
        """
        Transactions of the owner, newest first. ``ano`` and ``mes`` filter on
        the year / month of data_transacao and can be combined or used alone.
        """
        stmt = select(Transaction).where(Transaction.usuario_id == self.owner_id)
        if ano is not None:
            stmt = stmt.where(extract("year", Transaction.data_transacao) == ano)
        if mes is not None:
            stmt = stmt.where(extract("month", Transaction.data_transacao) == mes)
        stmt = stmt.order_by(Transaction.data_transacao.desc(), Transaction.id.desc())
        with persistence_guard(self.db, "Erro ao buscar transações."):
            return list(self.db.execute(stmt).scalars())

    def get(self, txn_id: int) -> Transaction:
        with persistence_guard(self.db, "Erro ao buscar transação."):
            txn = self.db.execute(select(Transaction).where(*self._owned(txn_id))).scalars().first()
        if txn is None:
            raise NotFoundError(TRANSACTION_NOT_FOUND)
        return txn

    def create(self, payload: TransactionIn) -> Transaction:
        txn = Transaction(**payload.model_dump(), usuario_id=self.owner_id)
        with persistence_guard(self.db, "Erro ao criar transação."):
            self.db.add(txn)
            self.db.commit()
            self.db.refresh(txn)
        return txn

    def update(self, txn_id: int, payload: TransactionIn) -> Transaction:
        with persistence_guard(self.db, "Erro ao atualizar transação."):
            result = self.db.execute(
                update(Transaction).where(*self._owned(txn_id)).values(**payload.model_dump())
            )
            if result.rowcount == 0:
                self.db.rollback()
                raise NotFoundError(TRANSACTION_NOT_FOUND)
            txn = self.db.execute(select(Transaction).where(*self._owned(txn_id))).scalars().one()
            self.db.commit()
            self.db.refresh(txn)
        return txn

    def delete(self, txn_id: int) -> None:
        with persistence_guard(self.db, "Erro ao deletar transação."):
            result = self.db.execute(delete(Transaction).where(*self._owned(txn_id)))
            if result.rowcount == 0:
                self.db.rollback()
                raise NotFoundError(TRANSACTION_NOT_FOUND)
            self.db.commit()
