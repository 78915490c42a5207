from __future__ import annotations

import re
import uuid
from datetime import date, datetime
from typing import List, Optional

from pydantic import (
    BaseModel,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from models.enums import (
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

PHONE_PATTERN = re.compile(r"^[6-9]\d{9}$")
PINCODE_PATTERN = re.compile(r"^\d{6}$")


class CamelModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


# ---------------------------------------------------------------- users


class AddressSchema(CamelModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    district: Optional[str] = None
    pincode: Optional[str] = None

    @field_validator("pincode")
    @classmethod
    def validate_pincode(cls, value):
        if value and not PINCODE_PATTERN.match(value):
            raise ValueError("Please provide a valid pincode")
        return value


class RegisterSchema(CamelModel):
    name: str = Field(min_length=2, max_length=120)
    email: EmailStr
    phone: Optional[str] = None
    password: str
    address: Optional[AddressSchema] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value):
        if value and not PHONE_PATTERN.match(value):
            raise ValueError("Please provide a valid 10-digit phone number")
        return value

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str):
        if len(value) < 6:
            raise ValueError("Password must be at least 6 characters long.")
        return value


class LoginSchema(CamelModel):
    email: EmailStr
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class UserOut(CamelModel):
    id: uuid.UUID
    name: str
    email: str
    phone: Optional[str] = None
    role: UserRole
    address: AddressSchema
    profile_image: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class UserSummaryOut(CamelModel):
    id: uuid.UUID
    name: str
    email: str
    phone: Optional[str] = None


# ------------------------------------------------------------ properties


class CoordinatesSchema(CamelModel):
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)


class LocationSchema(CamelModel):
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = "Rajasthan"
    pincode: str
    coordinates: Optional[CoordinatesSchema] = None

    @field_validator("pincode")
    @classmethod
    def validate_pincode(cls, value: str):
        if not PINCODE_PATTERN.match(value):
            raise ValueError("Please provide a valid pincode")
        return value


class RentSchema(CamelModel):
    amount: float = Field(ge=500)
    currency: str = "INR"
    deposit: float = Field(ge=0)
    maintenance: float = Field(default=0, ge=0)


class AreaSchema(CamelModel):
    value: float = Field(ge=1)
    unit: AreaUnit = AreaUnit.SQFT


class SpecificationsSchema(CamelModel):
    bedrooms: int = Field(ge=0)
    bathrooms: int = Field(ge=1)
    area: AreaSchema
    floor: Optional[int] = None
    total_floors: Optional[int] = None
    furnished: Furnishing = Furnishing.UNFURNISHED


class AvailabilitySchema(CamelModel):
    is_available: bool = True
    available_from: Optional[datetime] = None
    preferred_tenant: PreferredTenant = PreferredTenant.ANY


class OwnerContactSchema(CamelModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    is_verified: bool = False

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value):
        if value and not PHONE_PATTERN.match(value):
            raise ValueError("Please provide a valid 10-digit phone number")
        return value


class PropertyCreate(CamelModel):
    title: str = Field(min_length=5, max_length=100)
    description: str = Field(min_length=20, max_length=1000)
    type: PropertyTypes
    location: LocationSchema
    rent: RentSchema
    amenities: List[Amenity] = Field(default_factory=list)
    specifications: SpecificationsSchema
    availability: AvailabilitySchema = Field(default_factory=AvailabilitySchema)
    owner: Optional[OwnerContactSchema] = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("amenities")
    @classmethod
    def dedupe_amenities(cls, value: List[Amenity]):
        return list(dict.fromkeys(value))


class PropertyImageOut(CamelModel):
    id: uuid.UUID
    url: str
    public_id: Optional[str] = None
    caption: str = ""
    is_primary: bool
    uploaded_at: Optional[datetime] = None


def property_to_dict(prop) -> dict:
    return {
        "id": prop.id,
        "title": prop.title,
        "description": prop.description,
        "type": prop.property_type,
        "location": {
            "address": prop.address,
            "city": prop.city,
            "state": prop.state,
            "pincode": prop.pincode,
            "coordinates": {
                "latitude": prop.latitude,
                "longitude": prop.longitude,
            },
        },
        "rent": {
            "amount": prop.rent_amount,
            "currency": prop.currency,
            "deposit": prop.deposit,
            "maintenance": prop.maintenance_charge,
        },
        "amenities": prop.amenity_names,
        "specifications": {
            "bedrooms": prop.bedrooms,
            "bathrooms": prop.bathrooms,
            "area": {"value": prop.area_value, "unit": prop.area_unit},
            "floor": prop.floor,
            "total_floors": prop.total_floors,
            "furnished": prop.furnished,
        },
        "images": list(prop.images),
        "availability": {
            "is_available": prop.is_available,
            "available_from": prop.available_from,
            "preferred_tenant": prop.preferred_tenant,
        },
        "owner": {
            "name": prop.owner_name,
            "phone": prop.owner_phone,
            "email": prop.owner_email,
            "is_verified": prop.owner_verified,
        },
        "created_by": prop.created_by_id,
        "is_active": prop.is_active,
        "views": prop.views,
        "featured": prop.featured,
        "created_at": prop.created_at,
        "updated_at": prop.updated_at,
    }


class OwnerContactOut(CamelModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    is_verified: bool = False


class PropertyOut(CamelModel):
    id: uuid.UUID
    title: str
    description: str
    type: PropertyTypes
    location: LocationSchema
    rent: RentSchema
    amenities: List[Amenity]
    specifications: SpecificationsSchema
    images: List[PropertyImageOut]
    availability: AvailabilitySchema
    owner: OwnerContactOut
    created_by: uuid.UUID
    is_active: bool
    views: int
    featured: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def from_property(cls, data):
        if isinstance(data, dict):
            return data
        return property_to_dict(data)


class PropertySummaryOut(CamelModel):
    id: uuid.UUID
    title: str
    city: str
    address: str
    rent_amount: float
    images: List[PropertyImageOut] = Field(default_factory=list)


# ----------------------------------------------------------------- images


class DeleteImageSchema(CamelModel):
    property_id: uuid.UUID


class SetPrimaryImageSchema(CamelModel):
    property_id: uuid.UUID


# ---------------------------------------------------------------- rentals


class RentalCreate(CamelModel):
    property_id: uuid.UUID
    tenant_id: uuid.UUID
    start_date: date
    end_date: date
    monthly_rent: float = Field(gt=0)
    security_deposit: float = Field(ge=0)
    maintenance_charges: float = Field(default=0, ge=0)
    terms: Optional[str] = None
    document_url: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class RentalStatusUpdate(CamelModel):
    status: RentalStatus


class RecordPaymentSchema(CamelModel):
    payment_method: PaymentMethod
    transaction_id: Optional[str] = None
    notes: Optional[str] = None


class MaintenanceCreate(CamelModel):
    issue: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    images: List[str] = Field(default_factory=list)


class MaintenanceUpdate(CamelModel):
    status: MaintenanceStatus
    assigned_to: Optional[str] = None
    cost: Optional[float] = Field(default=None, ge=0)


class NoticeCreate(CamelModel):
    type: NoticeType
    message: str = Field(min_length=1)


class PaymentOut(CamelModel):
    id: uuid.UUID
    month: str
    amount: float
    due_date: date
    paid_date: Optional[datetime] = None
    status: RENT_PAYMENT_STATUS
    payment_method: Optional[PaymentMethod] = None
    transaction_id: Optional[str] = None
    late_fee: float = 0
    notes: Optional[str] = None


class NoticeOut(CamelModel):
    id: uuid.UUID
    type: NoticeType = Field(validation_alias="notice_type")
    message: str
    date: datetime
    acknowledged: bool


class MaintenanceOut(CamelModel):
    id: uuid.UUID
    issue: str
    description: str
    reported_date: datetime
    status: MaintenanceStatus
    assigned_to: Optional[str] = None
    completed_date: Optional[datetime] = None
    cost: Optional[float] = None
    images: List[str] = Field(default_factory=list)


class AgreementOut(CamelModel):
    start_date: date
    end_date: date
    monthly_rent: float
    security_deposit: float
    maintenance_charges: float = 0
    terms: Optional[str] = None
    document_url: Optional[str] = None


class RentalOut(CamelModel):
    id: uuid.UUID
    property: Optional[PropertySummaryOut] = None
    tenant: Optional[UserSummaryOut] = None
    landlord: Optional[UserSummaryOut] = None
    agreement: AgreementOut
    status: RentalStatus
    payments: List[PaymentOut]
    total_due: float
    last_payment_date: Optional[datetime] = None
    notices: List[NoticeOut] = Field(default_factory=list)
    maintenance_requests: List[MaintenanceOut] = Field(default_factory=list)
    created_at: datetime
    updated_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def from_rental(cls, data):
        if isinstance(data, dict):
            return data
        return {
            "id": data.id,
            "property": data.property,
            "tenant": data.tenant,
            "landlord": data.landlord,
            "agreement": {
                "start_date": data.start_date,
                "end_date": data.end_date,
                "monthly_rent": data.monthly_rent,
                "security_deposit": data.security_deposit,
                "maintenance_charges": data.maintenance_charges,
                "terms": data.terms,
                "document_url": data.document_url,
            },
            "status": data.status,
            "payments": list(data.payments),
            "total_due": data.total_due,
            "last_payment_date": data.last_payment_date,
            "notices": list(data.notices),
            "maintenance_requests": list(data.maintenance_requests),
            "created_at": data.created_at,
            "updated_at": data.updated_at,
        }


class PendingPaymentOut(PaymentOut):
    rental_id: uuid.UUID
    property_title: Optional[str] = None
