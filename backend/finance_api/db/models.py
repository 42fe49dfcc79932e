# finance_api/db/models.py — User, UserSession, Category, Transaction
from sqlalchemy import Column, Integer, String, DateTime, func, Numeric, Text, Date, ForeignKey, Boolean
from sqlalchemy.orm import relationship
from .base import Base


class User(Base):
    __tablename__ = "usuarios"
    id = Column(Integer, primary_key=True, index=True)
    # sole correlation key with the identity provider; never updated
    google_id = Column(String(255), nullable=False, unique=True, index=True)
    nome = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    foto_url = Column(String(1024), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    sessions = relationship("UserSession", back_populates="user")


class UserSession(Base):
    __tablename__ = "user_sessions"
    sid = Column(String(128), primary_key=True)
    user_id = Column(Integer, ForeignKey("usuarios.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)

    user = relationship("User", back_populates="sessions")


class Category(Base):
    __tablename__ = "categorias"
    id = Column(Integer, primary_key=True, index=True)
    nome = Column(String(150), nullable=False)
    tipo = Column(String(50), nullable=False)
    usuario_id = Column(Integer, ForeignKey("usuarios.id"), nullable=False, index=True)


class Transaction(Base):
    __tablename__ = "transacoes"
    id = Column(Integer, primary_key=True, index=True)
    descricao = Column(Text, nullable=False)
    valor = Column(Numeric(12, 2), nullable=False)
    tipo_transacao = Column(String(50), nullable=False)
    # no ON DELETE policy: what happens to rows of a deleted category is up to the store
    categoria_id = Column(Integer, ForeignKey("categorias.id"), nullable=True, index=True)
    data_transacao = Column(Date, nullable=False, index=True)
    tipo_despesa = Column(String(50), nullable=True)
    data_vencimento = Column(Date, nullable=True)
    precisa_aviso = Column(Boolean, nullable=False, default=False)
    usuario_id = Column(Integer, ForeignKey("usuarios.id"), nullable=False, index=True)
