# Overview: Typed request payloads; normalize raw JSON bodies before any database work.

"""
Request DTOs

Each write endpoint parses its body with `<Payload>.from_payload(data)`:
- omitted optional fields become None (stored as NULL)
- strings are stripped; empty strings become None
- numeric strings are parsed; malformed numbers raise ValidationError
- JSON list fields default to []

`validate()` enforces required fields. Routes call it before a transaction
is opened so a rejected request never touches the database.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from .roles import ALL_ROLES
from .validation import (
    ValidationError,
    to_bool,
    to_date,
    to_datetime,
    to_decimal,
    to_dict_list,
    to_float,
    to_int,
    to_list,
    to_raw_text,
    to_text,
)


def _require(message: str, *values) -> None:
    if any(v is None for v in values):
        raise ValidationError(message)


# =============================================================================
# Auth / users
# =============================================================================

# bcrypt only hashes the first 72 bytes and rejects longer input
MAX_PASSWORD_BYTES = 72


@dataclass
class LoginRequest:
    username: str | None
    password: str | None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "LoginRequest":
        return cls(
            username=to_text(data.get("username")),
            password=to_raw_text(data.get("password")),
        )

    def validate(self) -> None:
        _require("Username and password are required", self.username, self.password)


@dataclass
class UserPayload:
    username: str | None
    name: str | None
    role: str | None
    module_permissions: list[str]
    password: str | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "UserPayload":
        return cls(
            username=to_text(data.get("username")),
            name=to_text(data.get("name")),
            role=to_text(data.get("role")),
            module_permissions=[str(p) for p in to_list(data.get("modulePermissions"))],
            password=to_raw_text(data.get("password")),
        )

    def validate(self) -> None:
        _require("Username, name, and role are required", self.username, self.name, self.role)
        if self.role not in ALL_ROLES:
            raise ValidationError(f"Unknown role: {self.role}")
        if self.password and len(self.password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


# =============================================================================
# IT check entries
# =============================================================================

@dataclass
class SpeedTestPayload:
    url: str | None
    download_speed: float | None
    upload_speed: float | None
    ping: float | None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "SpeedTestPayload":
        return cls(
            url=to_text(data.get("url")),
            download_speed=to_float(data.get("downloadSpeed"), "downloadSpeed"),
            upload_speed=to_float(data.get("uploadSpeed"), "uploadSpeed"),
            ping=to_float(data.get("ping"), "ping"),
        )


@dataclass
class InstalledAppPayload:
    name: str | None
    version: str | None
    notes: str | None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "InstalledAppPayload":
        return cls(
            name=to_text(data.get("name")),
            version=to_text(data.get("version")),
            notes=to_text(data.get("notes")),
        )


@dataclass
class ITCheckPayload:
    name: str | None
    department: str | None
    batch_number: str | None = None
    computer_type: str | None = None
    it_check_completed: str | None = None
    ip_address: str | None = None
    isp: str | None = None
    connection_type: str | None = None
    operating_system: str | None = None
    processor_brand: str | None = None
    processor_series: str | None = None
    processor_generation: str | None = None
    processor_mac: str | None = None
    memory: str | None = None
    graphics: str | None = None
    storage: str | None = None
    pc_model: str | None = None
    status: str | None = None
    speed_tests: list[SpeedTestPayload] = field(default_factory=list)
    installed_apps: list[InstalledAppPayload] = field(default_factory=list)

    # Only honored by the migration import
    id: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "ITCheckPayload":
        processor = data.get("processor") if isinstance(data.get("processor"), dict) else {}
        return cls(
            name=to_text(data.get("name")),
            department=to_text(data.get("department")),
            batch_number=to_text(data.get("batchNumber")),
            computer_type=to_text(data.get("computerType")),
            it_check_completed=to_text(data.get("itCheckCompleted")),
            ip_address=to_text(data.get("ipAddress")),
            isp=to_text(data.get("isp")),
            connection_type=to_text(data.get("connectionType")),
            operating_system=to_text(data.get("operatingSystem")),
            processor_brand=to_text(processor.get("brand")),
            processor_series=to_text(processor.get("series")),
            processor_generation=to_text(processor.get("generation")),
            processor_mac=to_text(processor.get("macProcessor")),
            memory=to_text(data.get("memory")),
            graphics=to_text(data.get("graphics")),
            storage=to_text(data.get("storage")),
            pc_model=to_text(data.get("pcModel")),
            status=to_text(data.get("status")),
            speed_tests=[SpeedTestPayload.from_payload(t) for t in to_dict_list(data.get("speedTests"))],
            installed_apps=[InstalledAppPayload.from_payload(a) for a in to_dict_list(data.get("installedApps"))],
            id=to_text(data.get("id")),
            created_at=to_datetime(data.get("timestamp"), "timestamp"),
        )

    def validate(self) -> None:
        _require("Name and department are required", self.name, self.department)

    def root_values(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "department": self.department,
            "batch_number": self.batch_number,
            "computer_type": self.computer_type,
            "it_check_completed": self.it_check_completed,
            "ip_address": self.ip_address,
            "isp": self.isp,
            "connection_type": self.connection_type,
            "operating_system": self.operating_system,
            "processor_brand": self.processor_brand,
            "processor_series": self.processor_series,
            "processor_generation": self.processor_generation,
            "processor_mac": self.processor_mac,
            "memory": self.memory,
            "graphics": self.graphics,
            "storage": self.storage,
            "pc_model": self.pc_model,
            "status": self.status,
        }


# =============================================================================
# Software licenses
# =============================================================================

@dataclass
class AddInPayload:
    name: str | None
    cost: Decimal | None
    total_licenses: int | None
    used_licenses: int | None
    purchase_date: date | None
    expiry_date: date | None
    notes: str | None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "AddInPayload":
        return cls(
            name=to_text(data.get("name")),
            cost=to_decimal(data.get("cost"), "addIns.cost"),
            total_licenses=to_int(data.get("totalLicenses"), "addIns.totalLicenses"),
            used_licenses=to_int(data.get("usedLicenses"), "addIns.usedLicenses"),
            purchase_date=to_date(data.get("purchaseDate"), "addIns.purchaseDate"),
            expiry_date=to_date(data.get("expiryDate"), "addIns.expiryDate"),
            notes=to_text(data.get("notes")),
        )


@dataclass
class LicensePayload:
    name: str | None
    license_key: str | None
    vendor: str | None = None
    version: str | None = None
    license_type: str | None = None
    total_licenses: int | None = None
    used_licenses: int | None = 0
    purchase_date: date | None = None
    expiry_date: date | None = None
    cost: Decimal | None = None
    assigned_users: list = field(default_factory=list)
    status: str = "active"
    notes: str | None = None
    entity: str | None = None
    department: str | None = None
    addins: list[AddInPayload] = field(default_factory=list)

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "LicensePayload":
        used = to_int(data.get("usedLicenses"), "usedLicenses")
        return cls(
            name=to_text(data.get("name")),
            license_key=to_text(data.get("licenseKey")),
            vendor=to_text(data.get("vendor")),
            version=to_text(data.get("version")),
            license_type=to_text(data.get("licenseType")),
            total_licenses=to_int(data.get("totalLicenses"), "totalLicenses"),
            used_licenses=used if used is not None else 0,
            purchase_date=to_date(data.get("purchaseDate"), "purchaseDate"),
            expiry_date=to_date(data.get("expiryDate"), "expiryDate"),
            cost=to_decimal(data.get("cost"), "cost"),
            assigned_users=to_list(data.get("assignedUsers")),
            status=to_text(data.get("status")) or "active",
            notes=to_text(data.get("notes")),
            entity=to_text(data.get("entity")),
            department=to_text(data.get("department")),
            addins=[AddInPayload.from_payload(a) for a in to_dict_list(data.get("addIns"))],
        )

    def validate(self) -> None:
        _require("Name and license key are required", self.name, self.license_key)


# =============================================================================
# Password vault
# =============================================================================

@dataclass
class CustomFieldPayload:
    label: str
    value: str
    field_type: str
    is_hidden: bool

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "CustomFieldPayload":
        return cls(
            label=to_text(data.get("label")) or "Untitled Field",
            value=to_raw_text(data.get("value")) or "",
            field_type=to_text(data.get("type")) or "text",
            is_hidden=bool(to_bool(data.get("isHidden"), False)),
        )


@dataclass
class PasswordEntryPayload:
    title: str | None
    password: str | None
    website: str | None = None
    username: str | None = None
    email: str | None = None
    notes: str | None = None
    category_id: str | None = None
    is_favorite: bool = False
    is_compromised: bool = False
    last_used: datetime | None = None
    tags: list = field(default_factory=list)
    custom_fields: list[CustomFieldPayload] = field(default_factory=list)

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "PasswordEntryPayload":
        return cls(
            title=to_text(data.get("title")),
            password=to_raw_text(data.get("password")),
            website=to_text(data.get("website")),
            username=to_text(data.get("username")),
            email=to_text(data.get("email")),
            notes=to_text(data.get("notes")),
            category_id=to_text(data.get("categoryId")),
            is_favorite=bool(to_bool(data.get("isFavorite"), False)),
            is_compromised=bool(to_bool(data.get("isCompromised"), False)),
            last_used=to_datetime(data.get("lastUsed"), "lastUsed"),
            tags=to_list(data.get("tags")),
            custom_fields=[CustomFieldPayload.from_payload(f) for f in to_dict_list(data.get("customFields"))],
        )

    def validate(self) -> None:
        _require("Title and password are required", self.title, self.password)


@dataclass
class SecureNotePayload:
    title: str | None
    content: str | None
    category: str | None = None
    is_favorite: bool = False
    tags: list = field(default_factory=list)

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "SecureNotePayload":
        return cls(
            title=to_text(data.get("title")),
            content=to_raw_text(data.get("content")),
            category=to_text(data.get("category")),
            is_favorite=bool(to_bool(data.get("isFavorite"), False)),
            tags=to_list(data.get("tags")),
        )

    def validate(self) -> None:
        _require("Title and content are required", self.title, self.content)


@dataclass
class PasswordGenerateRequest:
    length: int = 16
    uppercase: bool = True
    lowercase: bool = True
    numbers: bool = True
    symbols: bool = True
    exclude_similar: bool = False
    exclude_ambiguous: bool = False

    MIN_LENGTH = 4
    MAX_LENGTH = 128

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "PasswordGenerateRequest":
        length = to_int(data.get("length"), "length")
        return cls(
            length=length if length is not None else 16,
            uppercase=bool(to_bool(data.get("includeUppercase"), True)),
            lowercase=bool(to_bool(data.get("includeLowercase"), True)),
            numbers=bool(to_bool(data.get("includeNumbers"), True)),
            symbols=bool(to_bool(data.get("includeSymbols"), True)),
            exclude_similar=bool(to_bool(data.get("excludeSimilar"), False)),
            exclude_ambiguous=bool(to_bool(data.get("excludeAmbiguous"), False)),
        )

    def validate(self) -> None:
        if not self.MIN_LENGTH <= self.length <= self.MAX_LENGTH:
            raise ValidationError(f"length must be between {self.MIN_LENGTH} and {self.MAX_LENGTH}")
        if not (self.uppercase or self.lowercase or self.numbers or self.symbols):
            raise ValidationError("No character types selected")


# =============================================================================
# Tickets
# =============================================================================

@dataclass
class TicketCreatePayload:
    title: str | None
    description: str | None
    category: str | None
    priority: str = "medium"
    assigned_to: str | None = None
    due_date: date | None = None
    parent_ticket_id: str | None = None
    labels: list = field(default_factory=list)

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "TicketCreatePayload":
        return cls(
            title=to_text(data.get("title")),
            description=to_text(data.get("description")),
            category=to_text(data.get("category")),
            priority=to_text(data.get("priority")) or "medium",
            assigned_to=to_text(data.get("assignedTo")),
            due_date=to_date(data.get("dueDate"), "dueDate"),
            parent_ticket_id=to_text(data.get("parentTicketId")),
            labels=to_list(data.get("labels")),
        )

    def validate(self) -> None:
        _require(
            "Title, description, and category are required",
            self.title, self.description, self.category,
        )


@dataclass
class TicketUpdatePayload:
    """
    Partial update: only keys present in the body are applied.

    `fields` maps column name -> normalized value for every supplied key.
    """
    fields: dict[str, Any]

    _TEXT = {
        "title": "title",
        "description": "description",
        "status": "status",
        "priority": "priority",
        "category": "category",
        "assignedTo": "assigned_to_id",
        "parentTicketId": "parent_ticket_id",
    }

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "TicketUpdatePayload":
        fields: dict[str, Any] = {}
        for key, column in cls._TEXT.items():
            if key in data:
                fields[column] = to_text(data.get(key))
        if "dueDate" in data:
            fields["due_date"] = to_date(data.get("dueDate"), "dueDate")
        if "resolvedAt" in data:
            fields["resolved_at"] = to_datetime(data.get("resolvedAt"), "resolvedAt")
        if "labels" in data:
            fields["labels"] = to_list(data.get("labels"))
        if "viewedBy" in data:
            fields["viewed_by"] = to_list(data.get("viewedBy"))
        if "slaBreached" in data:
            fields["sla_breached"] = bool(to_bool(data.get("slaBreached"), False))
        if "isBeingViewed" in data:
            fields["is_being_viewed"] = bool(to_bool(data.get("isBeingViewed"), False))
        if "responseTime" in data:
            fields["response_time_minutes"] = to_int(data.get("responseTime"), "responseTime")
        if "resolutionTime" in data:
            fields["resolution_time_minutes"] = to_int(data.get("resolutionTime"), "resolutionTime")
        return cls(fields=fields)

    def validate(self) -> None:
        for column, message in (
            ("title", "Title cannot be empty"),
            ("description", "Description cannot be empty"),
            ("category", "Category cannot be empty"),
            ("status", "Status cannot be empty"),
            ("priority", "Priority cannot be empty"),
        ):
            if column in self.fields and self.fields[column] is None:
                raise ValidationError(message)


@dataclass
class CommentPayload:
    content: str | None
    is_private: bool = False

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "CommentPayload":
        return cls(
            content=to_text(data.get("content")),
            is_private=bool(to_bool(data.get("isPrivate"), False)),
        )

    def validate(self) -> None:
        _require("Comment content is required", self.content)


# =============================================================================
# Credits / work logs
# =============================================================================

@dataclass
class CreditBlockPayload:
    block_number: int | None
    total_credits: Decimal | None
    purchase_date: date | None = None
    is_active: bool = True

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "CreditBlockPayload":
        return cls(
            block_number=to_int(data.get("blockNumber"), "blockNumber"),
            total_credits=to_decimal(data.get("totalCredits"), "totalCredits"),
            purchase_date=to_date(data.get("purchaseDate"), "purchaseDate"),
            is_active=bool(to_bool(data.get("isActive"), True)),
        )

    def validate(self) -> None:
        _require("Block number and total credits are required", self.block_number, self.total_credits)
        if self.total_credits < 0:
            raise ValidationError("totalCredits cannot be negative")


@dataclass
class WorkLogPayload:
    id_code: str | None
    client_name: str | None
    subject_issue: str | None = None
    category: str | None = None
    date_started: date | None = None
    time_started: str | None = None
    date_finished: date | None = None
    time_finished: str | None = None
    technician_name: str | None = None
    resolution_details: str | None = None
    remarks: str | None = None
    status: str | None = None
    time_consumed_minutes: int | None = None
    total_time_charge_minutes: int | None = None
    credit_consumed: Decimal | None = None
    total_credit_consumed: Decimal | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "WorkLogPayload":
        return cls(
            id_code=to_text(data.get("idCode")),
            client_name=to_text(data.get("clientName")),
            subject_issue=to_text(data.get("subjectIssue")),
            category=to_text(data.get("category")),
            date_started=to_date(data.get("dateStarted"), "dateStarted"),
            time_started=to_text(data.get("timeStarted")),
            date_finished=to_date(data.get("dateFinished"), "dateFinished"),
            time_finished=to_text(data.get("timeFinished")),
            technician_name=to_text(data.get("technicianName")),
            resolution_details=to_text(data.get("resolutionDetails")),
            remarks=to_text(data.get("remarks")),
            status=to_text(data.get("status")),
            time_consumed_minutes=to_int(data.get("timeConsumedMinutes"), "timeConsumedMinutes"),
            total_time_charge_minutes=to_int(data.get("totalTimeChargeMinutes"), "totalTimeChargeMinutes"),
            credit_consumed=to_decimal(data.get("creditConsumed"), "creditConsumed"),
            total_credit_consumed=to_decimal(data.get("totalCreditConsumed"), "totalCreditConsumed"),
        )

    def validate(self) -> None:
        _require("ID code and client name are required", self.id_code, self.client_name)

    def column_values(self, with_credits: bool) -> dict[str, Any]:
        values = {
            "id_code": self.id_code,
            "client_name": self.client_name,
            "subject_issue": self.subject_issue,
            "category": self.category,
            "date_started": self.date_started,
            "time_started": self.time_started,
            "date_finished": self.date_finished,
            "time_finished": self.time_finished,
            "technician_name": self.technician_name,
            "resolution_details": self.resolution_details,
            "remarks": self.remarks,
            "status": self.status,
            "time_consumed_minutes": self.time_consumed_minutes,
            "total_time_charge_minutes": self.total_time_charge_minutes,
        }
        if with_credits:
            values["credit_consumed"] = self.credit_consumed
            values["total_credit_consumed"] = self.total_credit_consumed
        return values


# =============================================================================
# Feedback
# =============================================================================

@dataclass
class FeedbackLinkPayload:
    customer_name: str | None
    staff_name: str | None = None
    client: str | None = None
    task_name: str | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "FeedbackLinkPayload":
        return cls(
            customer_name=to_text(data.get("customerName")),
            staff_name=to_text(data.get("staffName")),
            client=to_text(data.get("client")),
            task_name=to_text(data.get("taskName")),
        )

    def validate(self) -> None:
        _require("Customer name is required", self.customer_name)


@dataclass
class FeedbackSubmission:
    rating: int | None = None
    comments: str | None = None
    client_name: str | None = None
    client_email: str | None = None
    client_company: str | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "FeedbackSubmission":
        return cls(
            rating=to_int(data.get("rating"), "rating"),
            comments=to_text(data.get("comments")),
            client_name=to_text(data.get("clientName")),
            client_email=to_text(data.get("clientEmail")),
            client_company=to_text(data.get("clientCompany")),
        )

    def validate(self) -> None:
        if self.rating is not None and not 1 <= self.rating <= 5:
            raise ValidationError("Rating must be between 1 and 5")


# =============================================================================
# Migration import
# =============================================================================

@dataclass
class ActivityLogImport:
    id: str | None
    user_id: str | None
    action: str | None
    target_id: str | None
    target_name: str | None
    details: str | None
    created_at: datetime | None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "ActivityLogImport":
        return cls(
            id=to_text(data.get("id")),
            user_id=to_text(data.get("userId")),
            action=to_text(data.get("action")),
            target_id=to_text(data.get("targetId")),
            target_name=to_text(data.get("targetName")),
            details=to_text(data.get("details")),
            created_at=to_datetime(data.get("timestamp"), "timestamp"),
        )

    def validate(self) -> None:
        _require("Activity log id and action are required", self.id, self.action)
