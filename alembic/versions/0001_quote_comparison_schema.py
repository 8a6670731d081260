"""quote comparison schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

USER_ROLE = sa.Enum(
    "ADMIN", "PROCUREMENT_MANAGER", "SUPERINTENDENT", "FINANCE_TEAM", name="userrole"
)
RFQ_STATUS = sa.Enum("DRAFT", "SENT", "AWARDED", "CANCELLED", name="rfqstatus")
QUOTE_STATUS = sa.Enum("SUBMITTED", "ACCEPTED", "REJECTED", name="quotestatus")
AUDIT_ACTION = sa.Enum(
    "CREATE",
    "UPDATE",
    "DELETE",
    "APPROVE",
    "LOGIN",
    "LOGOUT",
    "VIEW",
    "EXPORT",
    name="auditaction",
)


def upgrade() -> None:
    op.create_table(
        "user_account",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(80), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(120)),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("role", USER_ROLE, nullable=False),
    )
    op.create_index(
        "ix_user_account_username", "user_account", ["username"], unique=True
    )

    op.create_table(
        "vendor",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("code", sa.String(50), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(30)),
        sa.Column("email", sa.String(255)),
        sa.Column("country", sa.String(100)),
        sa.Column("quality_rating", sa.Float()),
        sa.Column("is_active", sa.Boolean(), nullable=False),
    )
    op.create_table(
        "vendor_service_area",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "vendor_id",
            sa.Integer(),
            sa.ForeignKey("vendor.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("region", sa.String(100)),
        sa.Column("ports", sa.JSON()),
    )
    op.create_table(
        "vendor_port_capability",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "vendor_id",
            sa.Integer(),
            sa.ForeignKey("vendor.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("port_code", sa.String(20), nullable=False),
        sa.Column("port_name", sa.String(255), nullable=False),
        sa.Column("capabilities", sa.JSON()),
    )

    op.create_table(
        "rfq",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("rfq_number", sa.String(40), nullable=False, unique=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("delivery_location", sa.String(255)),
        sa.Column("delivery_date", sa.Date()),
        sa.Column("response_deadline", sa.Date()),
        sa.Column("status", RFQ_STATUS, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("created_by_id", sa.Integer(), sa.ForeignKey("user_account.id")),
    )
    op.create_table(
        "quote",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "rfq_id",
            sa.Integer(),
            sa.ForeignKey("rfq.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("vendor_id", sa.Integer(), sa.ForeignKey("vendor.id"), nullable=False),
        sa.Column("total_amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("delivery_date", sa.Date()),
        sa.Column("notes", sa.Text()),
        sa.Column("status", QUOTE_STATUS, nullable=False),
        sa.Column("submitted_at", sa.DateTime(), nullable=False),
        sa.Column("price_score", sa.Float()),
        sa.Column("delivery_score", sa.Float()),
        sa.Column("quality_score", sa.Float()),
        sa.Column("location_score", sa.Float()),
        sa.Column("total_score", sa.Float()),
    )
    op.create_table(
        "quote_line_item",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "quote_id",
            sa.Integer(),
            sa.ForeignKey("quote.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("description", sa.String(255), nullable=False),
        sa.Column("quantity", sa.Numeric(18, 3), nullable=False),
        sa.Column("unit_price", sa.Numeric(18, 2), nullable=False),
        sa.Column("line_total", sa.Numeric(18, 2), nullable=False),
    )

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user_account.id")),
        sa.Column("action", AUDIT_ACTION, nullable=False),
        sa.Column("resource", sa.String(80), nullable=False),
        sa.Column("resource_id", sa.String(80)),
        sa.Column("old_values", sa.JSON()),
        sa.Column("new_values", sa.JSON()),
        sa.Column("metadata", sa.JSON()),
        sa.Column("severity", sa.String(20), nullable=False),
        sa.Column("category", sa.String(40), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("audit_log")
    op.drop_table("quote_line_item")
    op.drop_table("quote")
    op.drop_table("rfq")
    op.drop_table("vendor_port_capability")
    op.drop_table("vendor_service_area")
    op.drop_table("vendor")
    op.drop_index("ix_user_account_username", table_name="user_account")
    op.drop_table("user_account")
    for enum_type in (AUDIT_ACTION, QUOTE_STATUS, RFQ_STATUS, USER_ROLE):
        enum_type.drop(op.get_bind(), checkfirst=True)
