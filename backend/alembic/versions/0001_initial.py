"""initial schema: usuarios, user_sessions, categorias, transacoes

Revision ID: 0001
Revises:
Create Date: 2025-01-06
"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "usuarios",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("google_id", sa.String(255), nullable=False),
        sa.Column("nome", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("foto_url", sa.String(1024), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_usuarios_id", "usuarios", ["id"])
    # concurrent first logins rely on this constraint
    op.create_index("ix_usuarios_google_id", "usuarios", ["google_id"], unique=True)

    op.create_table(
        "user_sessions",
        sa.Column("sid", sa.String(128), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("usuarios.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_user_sessions_user_id", "user_sessions", ["user_id"])
    op.create_index("ix_user_sessions_expires_at", "user_sessions", ["expires_at"])

    op.create_table(
        "categorias",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nome", sa.String(150), nullable=False),
        sa.Column("tipo", sa.String(50), nullable=False),
        sa.Column("usuario_id", sa.Integer(), sa.ForeignKey("usuarios.id"), nullable=False),
    )
    op.create_index("ix_categorias_id", "categorias", ["id"])
    op.create_index("ix_categorias_usuario_id", "categorias", ["usuario_id"])

    op.create_table(
        "transacoes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("descricao", sa.Text(), nullable=False),
        sa.Column("valor", sa.Numeric(12, 2), nullable=False),
        sa.Column("tipo_transacao", sa.String(50), nullable=False),
        sa.Column("categoria_id", sa.Integer(), sa.ForeignKey("categorias.id"), nullable=True),
        sa.Column("data_transacao", sa.Date(), nullable=False),
        sa.Column("tipo_despesa", sa.String(50), nullable=True),
        sa.Column("data_vencimento", sa.Date(), nullable=True),
        sa.Column("precisa_aviso", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("usuario_id", sa.Integer(), sa.ForeignKey("usuarios.id"), nullable=False),
    )
    op.create_index("ix_transacoes_id", "transacoes", ["id"])
    op.create_index("ix_transacoes_categoria_id", "transacoes", ["categoria_id"])
    op.create_index("ix_transacoes_data_transacao", "transacoes", ["data_transacao"])
    op.create_index("ix_transacoes_usuario_id", "transacoes", ["usuario_id"])


def downgrade():
    op.drop_table("transacoes")
    op.drop_table("categorias")
    op.drop_table("user_sessions")
    op.drop_table("usuarios")
