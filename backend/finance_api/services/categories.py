# finance_api/services/categories.py
from typing import List

from sqlalchemy import select, update, delete
from sqlalchemy.orm import Session

from finance_api.core.errors import NotFoundError, CATEGORY_NOT_FOUND
from finance_api.db.models import Category
from finance_api.db.session import persistence_guard
from finance_api.schemas.category import CategoryIn


class CategoryService:
    """Categories of one owner. Every statement carries the owner predicate."""

    def __init__(self, db: Session, owner_id: int):
        self.db = db
        self.owner_id = owner_id

    def _owned(self, category_id: int):
        return (Category.id == category_id, Category.usuario_id == self.owner_id)

    def list(self) -> List[Category]:
        stmt = (
            select(Category)
            .where(Category.usuario_id == self.owner_id)
            .order_by(Category.nome.asc(), Category.id.asc())
        )
        with persistence_guard(self.db, "Erro ao buscar categorias."):
            return list(self.db.execute(stmt).scalars())

    def get(self, category_id: int) -> Category:
        with persistence_guard(self.db, "Erro ao buscar categoria."):
            cat = self.db.execute(select(Category).where(*self._owned(category_id))).scalars().first()
        if cat is None:
            raise NotFoundError(CATEGORY_NOT_FOUND)
        return cat

    def create(self, payload: CategoryIn) -> Category:
        # owner always comes from the session, never from the body
        cat = Category(nome=payload.nome, tipo=payload.tipo, usuario_id=self.owner_id)
        with persistence_guard(self.db, "Erro ao criar categoria."):
            self.db.add(cat)
            self.db.commit()
            self.db.refresh(cat)
        return cat

    def update(self, category_id: int, payload: CategoryIn) -> Category:
        with persistence_guard(self.db, "Erro ao atualizar categoria."):
            result = self.db.execute(
                update(Category)
                .where(*self._owned(category_id))
                .values(nome=payload.nome, tipo=payload.tipo)
            )
            if result.rowcount == 0:
                self.db.rollback()
                raise NotFoundError(CATEGORY_NOT_FOUND)
            cat = self.db.execute(select(Category).where(*self._owned(category_id))).scalars().one()
            self.db.commit()
            self.db.refresh(cat)
        return cat

    def delete(self, category_id: int) -> None:
        with persistence_guard(self.db, "Erro ao deletar categoria."):
            result = self.db.execute(delete(Category).where(*self._owned(category_id)))
            if result.rowcount == 0:
                self.db.rollback()
                raise NotFoundError(CATEGORY_NOT_FOUND)
            self.db.commit()
