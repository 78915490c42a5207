"""initial rental schema

Revision ID: 3f1c2a9d7e10
Revises:
Create Date: 2026-10-19 09:12:44.501233

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7e10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _enum(name, *members):
    return sa.Enum(*members, name=name, native_enum=False)


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("phone", sa.String(20)),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", _enum("userrole", "ADMIN", "TENANT"), nullable=False),
        sa.Column("address_street", sa.String(255)),
        sa.Column("address_city", sa.String(120)),
        sa.Column("address_state", sa.String(120)),
        sa.Column("address_district", sa.String(120)),
        sa.Column("address_pincode", sa.String(10)),
        sa.Column("profile_image", sa.String(512)),
        sa.Column("is_active", sa.Boolean()),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    )

    op.create_table(
        "properties",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column(
            "property_type",
            _enum("propertytypes", "APARTMENT", "VILLA", "ROOM", "PG", "HOSTEL", "HOUSE"),
            nullable=False,
        ),
        sa.Column("address", sa.String(255), nullable=False),
        sa.Column("city", sa.String(120), nullable=False),
        sa.Column("state", sa.String(120)),
        sa.Column("pincode", sa.String(6), nullable=False),
        sa.Column("latitude", sa.Float()),
        sa.Column("longitude", sa.Float()),
        sa.Column("rent_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3)),
        sa.Column("deposit", sa.Numeric(12, 2), nullable=False),
        sa.Column("maintenance_charge", sa.Numeric(12, 2)),
        sa.Column("bedrooms", sa.Integer(), nullable=False),
        sa.Column("bathrooms", sa.Integer(), nullable=False),
        sa.Column("area_value", sa.Float(), nullable=False),
        sa.Column("area_unit", _enum("areaunit", "SQFT", "SQM")),
        sa.Column("floor", sa.Integer()),
        sa.Column("total_floors", sa.Integer()),
        sa.Column("furnished", _enum("furnishing", "FULLY", "SEMI", "UNFURNISHED")),
        sa.Column("is_available", sa.Boolean()),
        sa.Column("available_from", sa.DateTime()),
        sa.Column(
            "preferred_tenant",
            _enum(
                "preferredtenant",
                "ANY",
                "FAMILY",
                "BACHELOR",
                "STUDENT",
                "WORKING_PROFESSIONAL",
            ),
        ),
        sa.Column("owner_name", sa.String(120)),
        sa.Column("owner_phone", sa.String(20)),
        sa.Column("owner_email", sa.String(255)),
        sa.Column("owner_verified", sa.Boolean()),
        sa.Column(
            "created_by_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean()),
        sa.Column("views", sa.Integer()),
        sa.Column("featured", sa.Boolean()),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    )
    op.create_index("ix_properties_property_type", "properties", ["property_type"])
    op.create_index("ix_properties_rent_amount", "properties", ["rent_amount"])
    op.create_index("ix_properties_created_by_id", "properties", ["created_by_id"])
    op.create_index("ix_properties_city_state", "properties", ["city", "state"])
    op.create_index(
        "ix_properties_listing", "properties", ["is_active", "is_available"]
    )

    op.create_table(
        "property_amenities",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "property_id",
            sa.Uuid(),
            sa.ForeignKey("properties.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "name",
            _enum(
                "amenity",
                "WIFI",
                "PARKING",
                "AC",
                "FURNISHED",
                "GYM",
                "SWIMMING_POOL",
                "SECURITY",
                "ELEVATOR",
                "BALCONY",
                "GARDEN",
                "POWER_BACKUP",
                "WATER_SUPPLY",
                "COOKING_ALLOWED",
                "PETS_ALLOWED",
            ),
            nullable=False,
        ),
        sa.UniqueConstraint("property_id", "name"),
    )
    op.create_index(
        "ix_property_amenities_property_id", "property_amenities", ["property_id"]
    )
    op.create_index("ix_property_amenities_name", "property_amenities", ["name"])

    op.create_table(
        "property_images",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "property_id",
            sa.Uuid(),
            sa.ForeignKey("properties.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("url", sa.String(512), nullable=False),
        sa.Column("public_id", sa.String(255)),
        sa.Column("caption", sa.String(255)),
        sa.Column("is_primary", sa.Boolean()),
        sa.Column("position", sa.Integer()),
        sa.Column("uploaded_at", sa.DateTime()),
    )
    op.create_index(
        "ix_property_images_property_id", "property_images", ["property_id"]
    )

    op.create_table(
        "rentals",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "property_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("properties.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "tenant_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "landlord_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("monthly_rent", sa.Numeric(12, 2), nullable=False),
        sa.Column("security_deposit", sa.Numeric(12, 2), nullable=False),
        sa.Column("maintenance_charges", sa.Numeric(12, 2)),
        sa.Column("terms", sa.Text()),
        sa.Column("document_url", sa.String(512)),
        sa.Column(
            "status",
            _enum("rentalstatus", "PENDING", "ACTIVE", "EXPIRED", "TERMINATED"),
            nullable=False,
        ),
        sa.Column("total_due", sa.Numeric(12, 2)),
        sa.Column("last_payment_date", sa.DateTime()),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    )
    op.create_index("ix_rentals_property_id", "rentals", ["property_id"])
    op.create_index("ix_rentals_landlord_id", "rentals", ["landlord_id"])
    op.create_index("ix_rentals_end_date", "rentals", ["end_date"])
    op.create_index("ix_rentals_tenant_status", "rentals", ["tenant_id", "status"])

    op.create_table(
        "rental_payments",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "rental_id",
            sa.Uuid(),
            sa.ForeignKey("rentals.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("month", sa.String(7), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("paid_date", sa.DateTime()),
        sa.Column(
            "status",
            _enum("rent_payment_status", "PENDING", "PAID", "OVERDUE", "PARTIAL"),
            nullable=False,
        ),
        sa.Column(
            "payment_method",
            _enum("paymentmethod", "CASH", "UPI", "BANK_TRANSFER", "CHEQUE", "ONLINE"),
        ),
        sa.Column("transaction_id", sa.String(120)),
        sa.Column("late_fee", sa.Numeric(12, 2)),
        sa.Column("notes", sa.Text()),
    )
    op.create_index("ix_rental_payments_rental_id", "rental_payments", ["rental_id"])
    op.create_index("ix_rental_payments_month", "rental_payments", ["month"])
    op.create_index("ix_rental_payments_status", "rental_payments", ["status"])

    op.create_table(
        "rental_notices",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "rental_id",
            sa.Uuid(),
            sa.ForeignKey("rentals.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "notice_type",
            _enum(
                "noticetype",
                "RENT_DUE",
                "LATE_PAYMENT",
                "MAINTENANCE",
                "GENERAL",
                "TERMINATION",
            ),
            nullable=False,
        ),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("date", sa.DateTime()),
        sa.Column("acknowledged", sa.Boolean()),
    )
    op.create_index("ix_rental_notices_rental_id", "rental_notices", ["rental_id"])

    op.create_table(
        "maintenance_requests",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "rental_id",
            sa.Uuid(),
            sa.ForeignKey("rentals.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("issue", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("reported_date", sa.DateTime()),
        sa.Column(
            "status",
            _enum(
                "maintenancestatus", "REPORTED", "IN_PROGRESS", "COMPLETED", "REJECTED"
            ),
            nullable=False,
        ),
        sa.Column("assigned_to", sa.String(120)),
        sa.Column("completed_date", sa.DateTime()),
        sa.Column("cost", sa.Numeric(12, 2)),
        sa.Column("images", sa.JSON()),
    )
    op.create_index(
        "ix_maintenance_requests_rental_id", "maintenance_requests", ["rental_id"]
    )


def downgrade():
    op.drop_table("maintenance_requests")
    op.drop_table("rental_notices")
    op.drop_table("rental_payments")
    op.drop_table("rentals")
    op.drop_table("property_images")
    op.drop_table("property_amenities")
    op.drop_table("properties")
    op.drop_table("users")
