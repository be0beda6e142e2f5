# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial back office schema.

Revision ID: 001_initial
Revises: None
Create Date: 2025-06-02

Creates identity, catalog, enrollment, ledger and audit tables based on the
SQLAlchemy models in src/infrastructure/database/models/, and seeds the
income category that enrollment fees are booked against.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=False),
        server_default=sa.text("gen_random_uuid()"),
        primary_key=True,
    )


def _timestamp_columns() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def _soft_delete_columns() -> list[sa.Column]:
    return [
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_by", postgresql.UUID(as_uuid=False), nullable=True),
    ]


def _money(name: str, nullable: bool = False, default: str | None = "0") -> sa.Column:
    return sa.Column(
        name,
        sa.Numeric(10, 2),
        nullable=nullable,
        server_default=default,
    )


def upgrade() -> None:
    """Create back office tables."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')

    # ==========================================================================
    # 1. users table
    # ==========================================================================
    op.create_table(
        "users",
        _id_column(),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False, server_default=""),
        sa.Column("contact_number", sa.String(20), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="student"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", postgresql.UUID(as_uuid=False), nullable=True),
        *_timestamp_columns(),
        sa.UniqueConstraint("contact_number", name="uq_users_contact_number"),
        sa.CheckConstraint(
            "role IN ('super_admin', 'admin', 'account', 'employee', "
            "'trainer', 'warden', 'student', 'marketing')",
            name="ck_users_valid_role",
        ),
    )
    op.create_index("ix_users_role", "users", ["role"])

    # ==========================================================================
    # 2. students table
    # ==========================================================================
    op.create_table(
        "students",
        _id_column(),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=False),
            sa.ForeignKey("users.id", name="fk_students_user_id_users"),
            nullable=False,
        ),
        sa.Column("student_code", sa.String(20), nullable=False),
        sa.Column("name_on_id", sa.String(200), nullable=False),
        sa.Column("father_name", sa.String(200), nullable=True),
        sa.Column("mother_name", sa.String(200), nullable=True),
        sa.Column("date_of_birth", sa.Date, nullable=False),
        sa.Column("gender", sa.String(10), nullable=False),
        sa.Column("address", sa.Text, nullable=False),
        sa.Column("state", sa.String(100), nullable=False),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("pincode", sa.String(10), nullable=False),
        sa.Column("enrollment_date", sa.Date, nullable=False),
        sa.Column("national_id_number", sa.String(20), nullable=False),
        sa.Column("pan_number", sa.String(20), nullable=True),
        sa.Column("login_enabled", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", postgresql.UUID(as_uuid=False), nullable=True),
        *_timestamp_columns(),
        *_soft_delete_columns(),
        sa.UniqueConstraint("user_id", name="uq_students_user_id"),
        sa.UniqueConstraint("student_code", name="uq_students_student_code"),
        sa.UniqueConstraint("national_id_number", name="uq_students_national_id_number"),
    )

    # ==========================================================================
    # 3. courses table
    # ==========================================================================
    op.create_table(
        "courses",
        _id_column(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("summary", sa.Text, nullable=True),
        sa.Column("duration", sa.Integer, nullable=True),
        _money("base_course_fee", default=None),
        sa.Column("is_discounted", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("discount_percentage", sa.Numeric(5, 2), nullable=False, server_default="0"),
        _money("discount_amount"),
        _money("discounted_course_fee", default=None),
        sa.Column("hostel_available", sa.Boolean, nullable=False, server_default="false"),
        _money("hostel_fee"),
        sa.Column("mess_available", sa.Boolean, nullable=False, server_default="false"),
        _money("mess_fee"),
        _money("total_fee", default=None),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("display_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_by", postgresql.UUID(as_uuid=False), nullable=True),
        *_timestamp_columns(),
        *_soft_delete_columns(),
        sa.UniqueConstraint("slug", name="uq_courses_slug"),
    )

    # ==========================================================================
    # 4. student_enrollments table
    # ==========================================================================
    op.create_table(
        "student_enrollments",
        _id_column(),
        sa.Column(
            "student_id",
            postgresql.UUID(as_uuid=False),
            sa.ForeignKey("students.id", name="fk_student_enrollments_student_id_students"),
            nullable=False,
        ),
        sa.Column(
            "course_id",
            postgresql.UUID(as_uuid=False),
            sa.ForeignKey("courses.id", name="fk_student_enrollments_course_id_courses"),
            nullable=False,
        ),
        sa.Column("status", sa.String(20), nullable=False, server_default="not_started"),
        sa.Column("enrollment_date", sa.Date, nullable=False),
        sa.Column("completion_date", sa.Date, nullable=True),
        _money("base_course_fee", default=None),
        _money("course_discount_amount"),
        sa.Column(
            "course_discount_percentage", sa.Numeric(5, 2), nullable=False, server_default="0"
        ),
        _money("discounted_course_fee", default=None),
        sa.Column("is_hostel_opted", sa.Boolean, nullable=False, server_default="false"),
        _money("hostel_fee"),
        sa.Column("is_mess_opted", sa.Boolean, nullable=False, server_default="false"),
        _money("mess_fee"),
        _money("pre_tax_total_fee"),
        _money("extra_discount_amount"),
        _money("taxable_amount"),
        sa.Column("igst_applicable", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("sgst_percentage", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("cgst_percentage", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("igst_percentage", sa.Numeric(5, 2), nullable=False, server_default="0"),
        _money("sgst_amount"),
        _money("cgst_amount"),
        _money("igst_amount"),
        _money("total_tax_amount"),
        _money("total_payable_fee", default=None),
        _money("paid_amount"),
        _money("due_amount", default=None),
        sa.Column("remark", sa.Text, nullable=True),
        sa.Column("created_by", postgresql.UUID(as_uuid=False), nullable=True),
        *_timestamp_columns(),
        *_soft_delete_columns(),
        sa.CheckConstraint(
            "total_payable_fee = taxable_amount + total_tax_amount + hostel_fee + mess_fee",
            name="ck_student_enrollments_total_payable_balanced",
        ),
        sa.CheckConstraint(
            "due_amount = total_payable_fee - paid_amount",
            name="ck_student_enrollments_due_amount_derived",
        ),
        sa.CheckConstraint(
            "taxable_amount >= 0",
            name="ck_student_enrollments_taxable_amount_non_negative",
        ),
        sa.CheckConstraint(
            "status IN ('not_started', 'ongoing', 'completed', 'aborted', 'expelled')",
            name="ck_student_enrollments_valid_status",
        ),
    )
    op.create_index(
        "ix_student_enrollments_student_id", "student_enrollments", ["student_id"]
    )
    op.create_index(
        "ix_student_enrollments_course_id", "student_enrollments", ["course_id"]
    )
    op.create_index(
        "uq_student_enrollments_open_course",
        "student_enrollments",
        ["student_id", "course_id"],
        unique=True,
        postgresql_where=sa.text(
            "deleted_at IS NULL AND status IN ('not_started', 'ongoing')"
        ),
    )

    # ==========================================================================
    # 5. transaction_categories table
    # ==========================================================================
    op.create_table(
        "transaction_categories",
        _id_column(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False),
        sa.Column("type", sa.String(10), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("display_order", sa.Integer, nullable=False, server_default="0"),
        *_timestamp_columns(),
        *_soft_delete_columns(),
        sa.UniqueConstraint("name", name="uq_transaction_categories_name"),
        sa.UniqueConstraint("slug", name="uq_transaction_categories_slug"),
        sa.CheckConstraint(
            "type IN ('income', 'expense')",
            name="ck_transaction_categories_valid_type",
        ),
    )

    # ==========================================================================
    # 6. transactions table
    # ==========================================================================
    op.create_table(
        "transactions",
        _id_column(),
        sa.Column("type", sa.String(10), nullable=False),
        sa.Column(
            "category_id",
            postgresql.UUID(as_uuid=False),
            sa.ForeignKey(
                "transaction_categories.id",
                name="fk_transactions_category_id_transaction_categories",
            ),
            nullable=False,
        ),
        sa.Column(
            "student_id",
            postgresql.UUID(as_uuid=False),
            sa.ForeignKey("students.id", name="fk_transactions_student_id_students"),
            nullable=True,
        ),
        sa.Column(
            "course_id",
            postgresql.UUID(as_uuid=False),
            sa.ForeignKey("courses.id", name="fk_transactions_course_id_courses"),
            nullable=True,
        ),
        sa.Column(
            "enrollment_id",
            postgresql.UUID(as_uuid=False),
            sa.ForeignKey(
                "student_enrollments.id",
                name="fk_transactions_enrollment_id_student_enrollments",
            ),
            nullable=True,
        ),
        _money("amount", default=None),
        sa.Column("transaction_date", sa.Date, nullable=False),
        sa.Column("payment_mode", sa.String(20), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("payment_ref_num", sa.String(100), nullable=True),
        sa.Column("payer_name", sa.String(200), nullable=True),
        sa.Column("payer_contact", sa.String(20), nullable=True),
        sa.Column("created_by", postgresql.UUID(as_uuid=False), nullable=True),
        *_timestamp_columns(),
        *_soft_delete_columns(),
        sa.CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
    )
    op.create_index("ix_transactions_student_id", "transactions", ["student_id"])
    op.create_index("ix_transactions_enrollment_id", "transactions", ["enrollment_id"])

    # ==========================================================================
    # 7. student_payments table
    # ==========================================================================
    op.create_table(
        "student_payments",
        _id_column(),
        sa.Column(
            "student_id",
            postgresql.UUID(as_uuid=False),
            sa.ForeignKey("students.id", name="fk_student_payments_student_id_students"),
            nullable=False,
        ),
        sa.Column(
            "course_id",
            postgresql.UUID(as_uuid=False),
            sa.ForeignKey("courses.id", name="fk_student_payments_course_id_courses"),
            nullable=False,
        ),
        sa.Column(
            "enrollment_id",
            postgresql.UUID(as_uuid=False),
            sa.ForeignKey(
                "student_enrollments.id",
                name="fk_student_payments_enrollment_id_student_enrollments",
            ),
            nullable=False,
        ),
        sa.Column(
            "transaction_id",
            postgresql.UUID(as_uuid=False),
            sa.ForeignKey(
                "transactions.id",
                name="fk_student_payments_transaction_id_transactions",
            ),
            nullable=True,
        ),
        sa.Column("type", sa.String(20), nullable=False, server_default="course_fee"),
        _money("amount", default=None),
        sa.Column("payment_date", sa.Date, nullable=False),
        sa.Column("payment_method", sa.String(20), nullable=False),
        _money("previous_due_amount", default=None),
        _money("remaining_due_amount", default=None),
        sa.Column("created_by", postgresql.UUID(as_uuid=False), nullable=True),
        *_timestamp_columns(),
        *_soft_delete_columns(),
        sa.CheckConstraint("amount > 0", name="ck_student_payments_amount_positive"),
        sa.CheckConstraint(
            "remaining_due_amount = previous_due_amount - amount",
            name="ck_student_payments_remaining_due_derived",
        ),
    )
    op.create_index("ix_student_payments_student_id", "student_payments", ["student_id"])
    op.create_index(
        "ix_student_payments_enrollment_id", "student_payments", ["enrollment_id"]
    )

    # ==========================================================================
    # 8. audit_logs table
    # ==========================================================================
    op.create_table(
        "audit_logs",
        _id_column(),
        sa.Column("entity_type", sa.String(50), nullable=False),
        sa.Column("entity_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("actor_id", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("changes", postgresql.JSONB, nullable=False, server_default="{}"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_audit_logs_entity_id", "audit_logs", ["entity_id"])

    # ==========================================================================
    # Seed data
    # ==========================================================================
    op.execute(
        "INSERT INTO transaction_categories (name, slug, type, display_order) "
        "VALUES ('Course Fee', 'course-fee', 'income', 1)"
    )


def downgrade() -> None:
    """Drop back office tables."""
    op.drop_table("audit_logs")
    op.drop_table("student_payments")
    op.drop_table("transactions")
    op.drop_table("transaction_categories")
    op.drop_table("student_enrollments")
    op.drop_table("courses")
    op.drop_table("students")
    op.drop_table("users")
