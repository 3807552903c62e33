"""
Pydantic models for incentive API requests and responses
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from calculations.currency import parse_currency
from calculations.entities import (
    CashierGoal, Employee, EmployeeRole, GoalPeriod, GoalType, PaymentReceipt, ReportMode, SaleRecord,
    SalesGoal,
)
from calculations.payment_methods import normalize_payment_method, normalize_payment_methods


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _currency(value: Any) -> Decimal:
    return parse_currency(value)


def _optional_currency(value: Any) -> Optional[Decimal]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_currency(value)


# ---------------------------------------------------------------------------
# Snapshot records
# ---------------------------------------------------------------------------

class SaleModel(CamelModel):
    id: str
    store_id: str
    sale_date: date = Field(..., alias="date")
    net_value: Decimal = Field(default=Decimal("0"), description="Net value, number or '1.234,56'")
    seller_name: str = ""
    status: Optional[str] = None

    parse_net_value = field_validator("net_value", mode="before")(_currency)

    @field_validator("sale_date", mode="before")
    @classmethod
    def truncate_date(cls, value):
        if isinstance(value, str):
            return value.strip()[:10]
        return value

    def to_entity(self) -> SaleRecord:
        return SaleRecord(self.id, self.store_id, self.sale_date, self.net_value, self.seller_name, self.status)


class ReceiptModel(CamelModel):
    sale_id: str
    payment_method: Optional[str] = None
    gross_value: Decimal = Decimal("0")
    net_value: Decimal = Decimal("0")

    parse_values = field_validator("gross_value", "net_value", mode="before")(_currency)

    def to_entity(self) -> PaymentReceipt:
        return PaymentReceipt(
            sale_id=self.sale_id,
            payment_method=normalize_payment_method(self.payment_method),
            gross_value=self.gross_value,
            net_value=self.net_value,
        )


class SalesGoalModel(CamelModel):
    id: str
    type: GoalType
    period: GoalPeriod
    store_id: str
    seller_id: Optional[str] = None
    week_start: date
    week_end: date
    target_value: Decimal
    is_active: bool = True

    parse_target = field_validator("target_value", mode="before")(_currency)

    def to_entity(self) -> SalesGoal:
        return SalesGoal(
            id=self.id,
            type=self.type,
            period=self.period,
            store_id=self.store_id,
            week_start=self.week_start,
            week_end=self.week_end,
            target_value=self.target_value,
            seller_id=self.seller_id,
            is_active=self.is_active,
        )


class CashierGoalModel(CamelModel):
    id: str
    cashier_id: str
    store_id: str
    period_type: GoalPeriod = GoalPeriod.WEEKLY
    week_start: date
    week_end: date
    payment_methods: List[str] = Field(default_factory=list)
    target_percentage: Decimal
    bonus_percentage_achieved: Decimal = Decimal("0")
    bonus_percentage_not_achieved: Decimal = Decimal("0")
    is_active: bool = True

    parse_percentages = field_validator(
        "target_percentage", "bonus_percentage_achieved", "bonus_percentage_not_achieved", mode="before"
    )(_currency)

    def to_entity(self) -> CashierGoal:
        return CashierGoal(
            id=self.id,
            cashier_id=self.cashier_id,
            store_id=self.store_id,
            period_type=self.period_type,
            week_start=self.week_start,
            week_end=self.week_end,
            payment_methods=normalize_payment_methods(self.payment_methods),
            target_percentage=self.target_percentage,
            bonus_percentage_achieved=self.bonus_percentage_achieved,
            bonus_percentage_not_achieved=self.bonus_percentage_not_achieved,
            is_active=self.is_active,
        )


class EmployeeModel(CamelModel):
    id: str
    full_name: str
    role: EmployeeRole
    store_id: Optional[str] = None
    store_ids: List[str] = Field(default_factory=list)
    bonus_percentage_achieved: Optional[Decimal] = None
    bonus_percentage_not_achieved: Optional[Decimal] = None
    is_active: bool = True

    parse_rates = field_validator(
        "bonus_percentage_achieved", "bonus_percentage_not_achieved", mode="before"
    )(_optional_currency)

    def to_entity(self) -> Employee:
        return Employee(
            id=self.id,
            full_name=self.full_name,
            role=self.role,
            store_id=self.store_id,
            store_ids=tuple(self.store_ids),
            bonus_percentage_achieved=self.bonus_percentage_achieved,
            bonus_percentage_not_achieved=self.bonus_percentage_not_achieved,
            is_active=self.is_active,
        )


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class SalesSnapshotRequest(CamelModel):
    sales: List[SaleModel] = Field(default_factory=list, description="Sales covering the goal windows")
    receipts: List[ReceiptModel] = Field(default_factory=list, description="Receipts of those sales")

    def sale_entities(self) -> List[SaleRecord]:
        return [sale.to_entity() for sale in self.sales]

    def receipt_entities(self) -> List[PaymentReceipt]:
        return [receipt.to_entity() for receipt in self.receipts]


class GoalProgressRequest(SalesSnapshotRequest):
    goal: SalesGoalModel
    employees: List[EmployeeModel] = Field(default_factory=list)
    today: Optional[date] = Field(None, description="Reference day (default: business today)")


class GoalDashboardRequest(SalesSnapshotRequest):
    viewer_id: str
    employees: List[EmployeeModel] = Field(default_factory=list)
    sales_goals: List[SalesGoalModel] = Field(default_factory=list)
    store_id: Optional[str] = Field(None, description="Store filter for admin / finance viewers")
    history: List[SaleModel] = Field(default_factory=list, description="Past sales for pattern-based pacing")
    today: Optional[date] = None


class PersonalGoalsRequest(SalesSnapshotRequest):
    employee_id: str
    employees: List[EmployeeModel] = Field(default_factory=list)
    sales_goals: List[SalesGoalModel] = Field(default_factory=list)
    cashier_goals: List[CashierGoalModel] = Field(default_factory=list)
    weeks: Optional[int] = Field(None, ge=1, le=52)
    today: Optional[date] = None


class CashierGoalProgressRequest(SalesSnapshotRequest):
    cashier_goals: List[CashierGoalModel]
    today: Optional[date] = None


class CashierDashboardRequest(SalesSnapshotRequest):
    cashier_id: str
    employees: List[EmployeeModel] = Field(default_factory=list)
    cashier_goals: List[CashierGoalModel] = Field(default_factory=list)
    today: Optional[date] = None


class BonusSummaryRequest(SalesSnapshotRequest):
    employees: List[EmployeeModel] = Field(default_factory=list)
    sales_goals: List[SalesGoalModel] = Field(default_factory=list)
    cashier_goals: List[CashierGoalModel] = Field(default_factory=list)
    store_ids: Optional[List[str]] = Field(None, description="Store filter (default: every store)")
    now: Optional[datetime] = Field(None, description="Reference moment (default: business now)")


class PaymentSummaryRequest(BonusSummaryRequest):
    period_start: Optional[date] = Field(None, description="Pay period start (default: previous week)")
    period_end: Optional[date] = None
    mode: ReportMode = ReportMode.FINISHED
    period_type: Optional[GoalPeriod] = Field(None, description="Only weekly or only monthly goals")


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class IncentiveResponse(BaseModel):
    success: bool = Field(..., description="Whether the calculation was successful")
    data: Dict[str, Any] = Field(..., description="The calculation results")
    message: str = Field(..., description="Success or error message")
    execution_time: float = Field(..., description="Execution time in seconds")
    record_count: int = Field(..., description="Number of records returned")
    timestamp: datetime = Field(default_factory=datetime.now, description="Response timestamp")
