import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from uuid import uuid4

from bcrypt import checkpw, gensalt, hashpw
from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from core.get_db import Base

from .enums import (
    OUTSTANDING_PAYMENT_STATUSES,
    RENT_PAYMENT_STATUS,
    Amenity,
    AreaUnit,
    Furnishing,
    MaintenanceStatus,
    NoticeType,
    PaymentMethod,
    PreferredTenant,
    PropertyTypes,
    RentalStatus,
    UserRole,
)
from .utils import to_decimal, utcnow


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid4
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, native_enum=False), nullable=False, default=UserRole.TENANT
    )

    address_street: Mapped[Optional[str]] = mapped_column(String(255))
    address_city: Mapped[Optional[str]] = mapped_column(String(120))
    address_state: Mapped[Optional[str]] = mapped_column(String(120))
    address_district: Mapped[Optional[str]] = mapped_column(String(120))
    address_pincode: Mapped[Optional[str]] = mapped_column(String(10))

    profile_image: Mapped[Optional[str]] = mapped_column(String(512))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow
    )

    properties_created: Mapped[List["Property"]] = relationship(
        "Property", back_populates="created_by", foreign_keys="Property.created_by_id"
    )
    rentals_as_tenant: Mapped[List["Rental"]] = relationship(
        "Rental", back_populates="tenant", foreign_keys="Rental.tenant_id"
    )
    rentals_as_landlord: Mapped[List["Rental"]] = relationship(
        "Rental", back_populates="landlord", foreign_keys="Rental.landlord_id"
    )

    def set_password(self, raw_password: str):
        salt = gensalt()
        self.hashed_password = hashpw(raw_password.encode("utf-8"), salt).decode(
            "utf-8"
        )

    def check_password(self, raw_password: str) -> bool:
        return checkpw(
            raw_password.encode("utf-8"), self.hashed_password.encode("utf-8")
        )

    def normalize(self) -> None:
        self.email = self.email.strip().lower()
        self.name = self.name.strip()

    @property
    def address(self) -> dict:
        return {
            "street": self.address_street,
            "city": self.address_city,
            "state": self.address_state,
            "district": self.address_district,
            "pincode": self.address_pincode,
        }

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"


class Property(Base):
    __tablename__ = "properties"
    __table_args__ = (
        Index("ix_properties_city_state", "city", "state"),
        Index("ix_properties_listing", "is_active", "is_available"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid4
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    property_type: Mapped[PropertyTypes] = mapped_column(
        Enum(PropertyTypes, native_enum=False), nullable=False, index=True
    )

    address: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(120), nullable=False)
    state: Mapped[str] = mapped_column(String(120), default="Rajasthan")
    pincode: Mapped[str] = mapped_column(String(6), nullable=False)
    latitude: Mapped[Optional[float]] = mapped_column(Float)
    longitude: Mapped[Optional[float]] = mapped_column(Float)

    rent_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, index=True
    )
    currency: Mapped[str] = mapped_column(String(3), default="INR")
    deposit: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    maintenance_charge: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0")
    )

    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False)
    bathrooms: Mapped[int] = mapped_column(Integer, nullable=False)
    area_value: Mapped[float] = mapped_column(Float, nullable=False)
    area_unit: Mapped[AreaUnit] = mapped_column(
        Enum(AreaUnit, native_enum=False), default=AreaUnit.SQFT
    )
    floor: Mapped[Optional[int]] = mapped_column(Integer)
    total_floors: Mapped[Optional[int]] = mapped_column(Integer)
    furnished: Mapped[Furnishing] = mapped_column(
        Enum(Furnishing, native_enum=False), default=Furnishing.UNFURNISHED
    )

    is_available: Mapped[bool] = mapped_column(Boolean, default=True)
    available_from: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    preferred_tenant: Mapped[PreferredTenant] = mapped_column(
        Enum(PreferredTenant, native_enum=False), default=PreferredTenant.ANY
    )

    owner_name: Mapped[Optional[str]] = mapped_column(String(120))
    owner_phone: Mapped[Optional[str]] = mapped_column(String(20))
    owner_email: Mapped[Optional[str]] = mapped_column(String(255))
    owner_verified: Mapped[bool] = mapped_column(Boolean, default=False)

    created_by_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    created_by: Mapped["User"] = relationship(
        "User", back_populates="properties_created", foreign_keys=[created_by_id]
    )

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    views: Mapped[int] = mapped_column(Integer, default=0)
    featured: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow
    )

    amenities: Mapped[List["PropertyAmenity"]] = relationship(
        "PropertyAmenity",
        back_populates="property",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PropertyAmenity.name",
    )
    images: Mapped[List["PropertyImage"]] = relationship(
        "PropertyImage",
        back_populates="property",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PropertyImage.position",
    )
    rentals: Mapped[List["Rental"]] = relationship(
        "Rental", back_populates="property"
    )

    @property
    def amenity_names(self) -> List[str]:
        return [a.name.value for a in self.amenities]

    def set_amenities(self, names) -> None:
        wanted = {Amenity(n) for n in names}
        self.amenities = [a for a in self.amenities if a.name in wanted]
        existing = {a.name for a in self.amenities}
        for name in sorted(wanted - existing, key=lambda a: a.value):
            self.amenities.append(PropertyAmenity(name=name))

    @property
    def primary_image(self) -> Optional["PropertyImage"]:
        return next((img for img in self.images if img.is_primary), None)

    def set_primary_image(self, image: "PropertyImage") -> None:
        for img in self.images:
            img.is_primary = img is image

    def ensure_primary_image(self) -> None:
        if self.images and self.primary_image is None:
            self.images[0].is_primary = True

    def __repr__(self):
        return f"<Property {self.title} ({self.city})>"


class PropertyAmenity(Base):
    __tablename__ = "property_amenities"
    __table_args__ = (UniqueConstraint("property_id", "name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True
    )
    property: Mapped["Property"] = relationship("Property", back_populates="amenities")
    name: Mapped[Amenity] = mapped_column(
        Enum(Amenity, native_enum=False), nullable=False, index=True
    )


class PropertyImage(Base):
    __tablename__ = "property_images"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid4
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True
    )
    property: Mapped["Property"] = relationship("Property", back_populates="images")

    url: Mapped[str] = mapped_column(String(512), nullable=False)
    public_id: Mapped[Optional[str]] = mapped_column(String(255))
    caption: Mapped[str] = mapped_column(String(255), default="")
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False)
    position: Mapped[int] = mapped_column(Integer, default=0)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    def __repr__(self):
        return f"<PropertyImage property={self.property_id} primary={self.is_primary}>"


class Rental(Base):
    __tablename__ = "rentals"
    __table_args__ = (Index("ix_rentals_tenant_status", "tenant_id", "status"),)

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid4
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("properties.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    property: Mapped["Property"] = relationship(
        "Property", back_populates="rentals", lazy="selectin"
    )
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )
    tenant: Mapped["User"] = relationship(
        "User",
        back_populates="rentals_as_tenant",
        foreign_keys=[tenant_id],
        lazy="selectin",
    )
    landlord_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    landlord: Mapped["User"] = relationship(
        "User",
        back_populates="rentals_as_landlord",
        foreign_keys=[landlord_id],
        lazy="selectin",
    )

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    monthly_rent: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    security_deposit: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    maintenance_charges: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0")
    )
    terms: Mapped[Optional[str]] = mapped_column(Text)
    document_url: Mapped[Optional[str]] = mapped_column(String(512))

    status: Mapped[RentalStatus] = mapped_column(
        Enum(RentalStatus, native_enum=False),
        nullable=False,
        default=RentalStatus.PENDING,
    )
    total_due: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    last_payment_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow
    )

    payments: Mapped[List["RentalPayment"]] = relationship(
        "RentalPayment",
        back_populates="rental",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="RentalPayment.due_date",
    )
    notices: Mapped[List["RentalNotice"]] = relationship(
        "RentalNotice",
        back_populates="rental",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="RentalNotice.date",
    )
    maintenance_requests: Mapped[List["MaintenanceRequest"]] = relationship(
        "MaintenanceRequest",
        back_populates="rental",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="MaintenanceRequest.reported_date",
    )

    @validates("monthly_rent")
    def validate_rent(self, key, value):
        if value is not None and to_decimal(value) <= 0:
            raise ValueError("Monthly rent must be positive.")
        return value

    def recalculate_total_due(self) -> Decimal:
        total = sum(
            (
                to_decimal(p.amount) + to_decimal(p.late_fee)
                for p in self.payments
                if p.status in OUTSTANDING_PAYMENT_STATUSES
            ),
            Decimal("0"),
        )
        self.total_due = total
        return total

    def find_payment(self, payment_id: uuid.UUID) -> Optional["RentalPayment"]:
        return next((p for p in self.payments if p.id == payment_id), None)

    def find_maintenance(
        self, ticket_id: uuid.UUID
    ) -> Optional["MaintenanceRequest"]:
        return next((m for m in self.maintenance_requests if m.id == ticket_id), None)

    def find_notice(self, notice_id: uuid.UUID) -> Optional["RentalNotice"]:
        return next((n for n in self.notices if n.id == notice_id), None)

    def __repr__(self):
        return f"<Rental property={self.property_id} tenant={self.tenant_id} {self.status}>"


class RentalPayment(Base):
    __tablename__ = "rental_payments"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid4
    )
    rental_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("rentals.id", ondelete="CASCADE"), nullable=False, index=True
    )
    rental: Mapped["Rental"] = relationship("Rental", back_populates="payments")

    month: Mapped[str] = mapped_column(String(7), nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    paid_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    status: Mapped[RENT_PAYMENT_STATUS] = mapped_column(
        Enum(RENT_PAYMENT_STATUS, native_enum=False),
        nullable=False,
        default=RENT_PAYMENT_STATUS.PENDING,
        index=True,
    )
    payment_method: Mapped[Optional[PaymentMethod]] = mapped_column(
        Enum(PaymentMethod, native_enum=False)
    )
    transaction_id: Mapped[Optional[str]] = mapped_column(String(120))
    late_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    notes: Mapped[Optional[str]] = mapped_column(Text)


class RentalNotice(Base):
    __tablename__ = "rental_notices"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid4
    )
    rental_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("rentals.id", ondelete="CASCADE"), nullable=False, index=True
    )
    rental: Mapped["Rental"] = relationship("Rental", back_populates="notices")
    notice_type: Mapped[NoticeType] = mapped_column(
        Enum(NoticeType, native_enum=False), nullable=False
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    acknowledged: Mapped[bool] = mapped_column(Boolean, default=False)


class MaintenanceRequest(Base):
    __tablename__ = "maintenance_requests"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid4
    )
    rental_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("rentals.id", ondelete="CASCADE"), nullable=False, index=True
    )
    rental: Mapped["Rental"] = relationship(
        "Rental", back_populates="maintenance_requests"
    )
    issue: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    reported_date: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    status: Mapped[MaintenanceStatus] = mapped_column(
        Enum(MaintenanceStatus, native_enum=False),
        nullable=False,
        default=MaintenanceStatus.REPORTED,
    )
    assigned_to: Mapped[Optional[str]] = mapped_column(String(120))
    completed_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    cost: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2))
    images: Mapped[List[str]] = mapped_column(JSON, default=list)
