"""criar tabelas de identidade, contas, dados e empresas

Revision ID: 0001
Revises:
Create Date: 2026-10-18 12:00:00

"""
from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "identidades",
        sa.Column("uid", sa.String(32), primary_key=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_identidades_email", "identidades", ["email"], unique=True)

    op.create_table(
        "users",
        sa.Column("uid", sa.String(32), primary_key=True),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("access_duration", sa.BigInteger(), nullable=True),
        sa.Column("access_started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("access_expiration_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("cpf", sa.String(11), nullable=True),
        sa.Column("phone", sa.String(15), nullable=True),
        sa.Column("email", sa.String(), nullable=True, unique=True),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "user_data",
        sa.Column("uid", sa.String(32), primary_key=True),
        sa.Column("transactions", sa.JSON(), nullable=False),
        sa.Column("categories", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "companies",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("cnpj", sa.String(14), nullable=False),
        sa.Column("user_id", sa.String(32), sa.ForeignKey("users.uid"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("user_id", "cnpj", name="uq_companies_user_cnpj"),
    )
    op.create_index("ix_companies_user_id", "companies", ["user_id"])


def downgrade():
    op.drop_index("ix_companies_user_id", table_name="companies")
    op.drop_table("companies")
    op.drop_table("user_data")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
    op.drop_index("ix_identidades_email", table_name="identidades")
    op.drop_table("identidades")
