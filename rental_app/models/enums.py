from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    TENANT = "tenant"


class PropertyTypes(str, Enum):
    APARTMENT = "apartment"
    VILLA = "villa"
    ROOM = "room"
    PG = "pg"
    HOSTEL = "hostel"
    HOUSE = "house"


class Amenity(str, Enum):
    WIFI = "wifi"
    PARKING = "parking"
    AC = "ac"
    FURNISHED = "furnished"
    GYM = "gym"
    SWIMMING_POOL = "swimming_pool"
    SECURITY = "security"
    ELEVATOR = "elevator"
    BALCONY = "balcony"
    GARDEN = "garden"
    POWER_BACKUP = "power_backup"
    WATER_SUPPLY = "water_supply"
    COOKING_ALLOWED = "cooking_allowed"
    PETS_ALLOWED = "pets_allowed"


class Furnishing(str, Enum):
    FULLY = "fully"
    SEMI = "semi"
    UNFURNISHED = "unfurnished"


class AreaUnit(str, Enum):
    SQFT = "sqft"
    SQM = "sqm"


class PreferredTenant(str, Enum):
    ANY = "any"
    FAMILY = "family"
    BACHELOR = "bachelor"
    STUDENT = "student"
    WORKING_PROFESSIONAL = "working_professional"


class RentalStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    EXPIRED = "expired"
    TERMINATED = "terminated"


class RENT_PAYMENT_STATUS(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    PARTIAL = "partial"


# Statuses that still count towards a rental's total due.
OUTSTANDING_PAYMENT_STATUSES = frozenset(
    {
        RENT_PAYMENT_STATUS.PENDING,
        RENT_PAYMENT_STATUS.OVERDUE,
        RENT_PAYMENT_STATUS.PARTIAL,
    }
)

# Rental statuses under which the rental keeps its property off the market.
PROPERTY_HOLDING_STATUSES = frozenset({RentalStatus.PENDING, RentalStatus.ACTIVE})


class PaymentMethod(str, Enum):
    CASH = "cash"
    UPI = "upi"
    BANK_TRANSFER = "bank_transfer"
    CHEQUE = "cheque"
    ONLINE = "online"


class NoticeType(str, Enum):
    RENT_DUE = "rent_due"
    LATE_PAYMENT = "late_payment"
    MAINTENANCE = "maintenance"
    GENERAL = "general"
    TERMINATION = "termination"


class MaintenanceStatus(str, Enum):
    REPORTED = "reported"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    REJECTED = "rejected"


class PropertyListingStatus(str, Enum):
    ALL = "all"
    AVAILABLE = "available"
    RENTED = "rented"
    INACTIVE = "inactive"
