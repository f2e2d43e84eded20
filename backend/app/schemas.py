"""
Pydantic schemas for request and response validation.
"""

import math
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.security import MAX_PASSWORD_BYTES


class MessageResponse(BaseModel):
    message: str


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)


# =============================================================================
# Orders
# =============================================================================


class MasterBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    cities: list[str] = Field(default_factory=list)
    status_work: str | None = None


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    rk: str | None = None
    city: str
    avito_name: str | None = None
    phone: str
    type_order: str | None = None
    client_name: str | None = None
    address: str | None = None
    date_meeting: datetime | None = None
    type_equipment: str | None = None
    problem: str | None = None
    call_record: str | None = None
    status_order: str
    master_id: int | None = None
    master: MasterBrief | None = None
    result: float | None = None
    expenditure: float | None = None
    clean: float | None = None
    master_change: float | None = None
    bso_doc: str | None = None
    expenditure_doc: str | None = None
    closing_data: datetime | None = None
    created_at: datetime | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    pagination: Pagination


class FilterOptionsResponse(BaseModel):
    statuses: list[str]
    cities: list[str]
    masters: list[str]


class OrderUpdateRequest(BaseModel):
    """Fields outside the updatable set are silently dropped."""

    model_config = ConfigDict(extra="ignore")

    rk: str | None = None
    city: str | None = None
    avito_name: str | None = None
    phone: str | None = None
    type_order: str | None = None
    client_name: str | None = None
    address: str | None = None
    date_meeting: datetime | None = None
    type_equipment: str | None = None
    problem: str | None = None
    call_record: str | None = None
    status_order: str | None = None
    master_id: int | None = None
    result: float | None = None
    expenditure: float | None = None
    clean: float | None = None
    master_change: float | None = None
    bso_doc: str | None = None
    expenditure_doc: str | None = None
    closing_data: datetime | None = None


class AssignMasterRequest(BaseModel):
    master_id: int


class CloseOrderRequest(BaseModel):
    result: float | None = None
    expenditure: float | None = None
    clean: float | None = None
    master_change: float | None = None


class OrderMutationResponse(BaseModel):
    message: str
    order: OrderResponse


# =============================================================================
# Masters
# =============================================================================


class MasterOrderSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    rk: str | None = None
    client_name: str | None = None
    status_order: str
    result: float | None = None
    date_meeting: datetime | None = None
    created_at: datetime | None = None


class MasterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    cities: list[str] = Field(default_factory=list)
    status_work: str
    passport_doc: str | None = None
    contract_doc: str | None = None
    note: str | None = None
    tg_id: str | None = None
    chat_id: str | None = None
    created_at: datetime | None = None
    orders: list[MasterOrderSummary] = Field(default_factory=list)


class MasterListResponse(BaseModel):
    masters: list[MasterResponse]
    pagination: Pagination


class _MasterCities(BaseModel):
    """``city`` is accepted as a single city or a list for older clients."""

    cities: list[str] = Field(default_factory=list)
    city: str | list[str] | None = None

    def resolved_cities(self) -> list[str]:
        if self.cities:
            return self.cities
        if isinstance(self.city, list):
            return self.city
        if self.city:
            return [self.city]
        return []


class MasterCreateRequest(_MasterCities):
    name: str = Field(min_length=1)
    status_work: str = Field(min_length=1)
    passport_doc: str | None = None
    contract_doc: str | None = None
    note: str | None = None
    tg_id: str | None = None
    chat_id: str | None = None


class MasterUpdateRequest(_MasterCities):
    name: str | None = Field(default=None, min_length=1)
    status_work: str | None = Field(default=None, min_length=1)
    passport_doc: str | None = None
    contract_doc: str | None = None
    note: str | None = None
    tg_id: str | None = None
    chat_id: str | None = None


class MasterMutationResponse(BaseModel):
    message: str
    master: MasterResponse


class MasterStats(BaseModel):
    total_orders: int
    total_revenue: float
    total_expenditure: float
    total_clean: float
    average_check: float
    salary: float


class MasterStatsResponse(BaseModel):
    master: MasterBrief
    stats: MasterStats


# =============================================================================
# Cash
# =============================================================================


class CashOperationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    amount: float
    note: str | None = None
    receipt_doc: str | None = None
    name_create: str
    city: str | None = None
    payment_purpose: str | None = None
    date_create: datetime | None = None


class CashListResponse(BaseModel):
    operations: list[CashOperationResponse]
    pagination: Pagination


class CashCreateRequest(BaseModel):
    name: str
    amount: float
    name_create: str = Field(min_length=1)
    note: str | None = None
    receipt_doc: str | None = None
    city: str | None = None
    payment_purpose: str | None = None


class CashUpdateRequest(BaseModel):
    name: str | None = None
    amount: float | None = None
    name_create: str | None = None
    note: str | None = None
    receipt_doc: str | None = None
    city: str | None = None
    payment_purpose: str | None = None


class CashMutationResponse(BaseModel):
    message: str
    operation: CashOperationResponse


class CashStats(BaseModel):
    total_income: float
    total_expenses: float
    net_income: float
    income_count: int
    expense_count: int


class CashStatsResponse(BaseModel):
    stats: CashStats


# =============================================================================
# Reports
# =============================================================================


class MasterReport(BaseModel):
    id: int
    name: str
    cities: list[str]
    orders_count: int
    total_revenue: float
    total_expenditure: float
    total_clean: float
    average_check: int
    salary: float


class MasterReportResponse(BaseModel):
    reports: list[MasterReport]


class CityReport(BaseModel):
    city: str
    closed_orders: int
    average_check: int
    total_revenue: float
    company_income: float
    cash_balance: float


class CityReportResponse(BaseModel):
    reports: list[CityReport]


# =============================================================================
# Calls
# =============================================================================


class OperatorBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    city: str | None = None


class CallResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    rk: str | None = None
    city: str | None = None
    avito_name: str | None = None
    phone_client: str | None = None
    phone_ats: str | None = None
    status: str | None = None
    record_url: str | None = None
    operator_id: int | None = None
    operator: OperatorBrief | None = None
    date_create: datetime | None = None


class CallListResponse(BaseModel):
    calls: list[CallResponse]
    pagination: Pagination


class CallBatchResponse(BaseModel):
    calls: list[CallResponse]


# =============================================================================
# Directors
# =============================================================================


def _check_password_length(value: str | None) -> str | None:
    if value is not None and len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class DirectorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    login: str
    cities: list[str] = Field(default_factory=list)
    passport_doc: str | None = None
    contract_doc: str | None = None
    note: str | None = None
    tg_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DirectorListResponse(BaseModel):
    directors: list[DirectorResponse]


class DirectorCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    login: str = Field(min_length=1, max_length=128)
    password: str = Field(min_length=1)
    cities: list[str] = Field(default_factory=list)
    passport_doc: str | None = None
    contract_doc: str | None = None
    note: str | None = None
    tg_id: str | None = None

    @field_validator("password")
    @classmethod
    def password_fits_hash(cls, value: str | None) -> str | None:
        return _check_password_length(value)


class DirectorUpdateRequest(BaseModel):
    """The login is fixed at creation; an omitted password keeps the old one."""

    name: str | None = Field(default=None, min_length=1)
    cities: list[str] | None = None
    password: str | None = Field(default=None, min_length=1)
    passport_doc: str | None = None
    contract_doc: str | None = None
    note: str | None = None
    tg_id: str | None = None

    @field_validator("password")
    @classmethod
    def password_fits_hash(cls, value: str | None) -> str | None:
        return _check_password_length(value)


class DirectorMutationResponse(BaseModel):
    message: str
    director: DirectorResponse
