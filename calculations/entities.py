"""
Incentive Entities Module
Value types shared by every calculation module

Inputs (sales, receipts, goals, employees) are immutable snapshots handed in by the
API layer. Results (progress, bonus, summaries) are recomputed on every read and
never persisted.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional, Tuple


ZERO = Decimal("0")


class GoalPeriod(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class GoalType(str, Enum):
    INDIVIDUAL = "individual"
    TEAM = "team"


class PaymentMethod(str, Enum):
    PIX = "pix"
    DEBITO = "debito"
    DINHEIRO = "dinheiro"
    CREDITO = "credito"
    CREDIARIO = "crediario"


class EmployeeRole(str, Enum):
    VENDOR = "vendedor"
    MANAGER = "gerente"
    CASHIER = "caixa"
    ADMIN = "administrador"
    FINANCE = "financeiro"


class ReportMode(str, Enum):
    FINISHED = "finished"  # payable goals only
    CURRENT = "current"    # live estimate over goals still running


SALES_ROLES = (EmployeeRole.VENDOR, EmployeeRole.MANAGER)


@dataclass(frozen=True)
class PeriodWindow:
    """Inclusive calendar-day range."""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def total_days(self) -> int:
        return max(1, (self.end - self.start).days + 1)

    def days(self) -> Iterable[date]:
        for offset in range(self.total_days):
            yield self.start + timedelta(days=offset)


# ---------------------------------------------------------------------------
# Snapshot inputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SaleRecord:
    id: str
    store_id: str
    date: date
    net_value: Decimal
    seller_name: str
    status: Optional[str] = None


@dataclass(frozen=True)
class PaymentReceipt:
    sale_id: str
    payment_method: Optional[PaymentMethod]
    gross_value: Decimal
    net_value: Decimal


@dataclass(frozen=True)
class SalesGoal:
    id: str
    type: GoalType
    period: GoalPeriod
    store_id: str
    week_start: date
    week_end: date
    target_value: Decimal
    seller_id: Optional[str] = None
    is_active: bool = True

    @property
    def window(self) -> PeriodWindow:
        return PeriodWindow(self.week_start, self.week_end)


@dataclass(frozen=True)
class CashierGoal:
    id: str
    cashier_id: str
    store_id: str
    period_type: GoalPeriod
    week_start: date
    week_end: date
    payment_methods: FrozenSet[PaymentMethod]
    target_percentage: Decimal
    bonus_percentage_achieved: Decimal
    bonus_percentage_not_achieved: Decimal
    is_active: bool = True

    @property
    def window(self) -> PeriodWindow:
        return PeriodWindow(self.week_start, self.week_end)


@dataclass(frozen=True)
class Employee:
    id: str
    full_name: str
    role: EmployeeRole
    store_id: Optional[str] = None
    store_ids: Tuple[str, ...] = ()
    bonus_percentage_achieved: Optional[Decimal] = None
    bonus_percentage_not_achieved: Optional[Decimal] = None
    is_active: bool = True

    @property
    def all_store_ids(self) -> Tuple[str, ...]:
        """Primary store first, then any extra assignments."""
        stores = [self.store_id] if self.store_id else []
        stores.extend(s for s in self.store_ids if s not in stores)
        return tuple(stores)

    def works_in(self, store_id: str) -> bool:
        return store_id in self.all_store_ids


@dataclass(frozen=True)
class BonusRates:
    achieved: Decimal = ZERO
    not_achieved: Decimal = ZERO


# ---------------------------------------------------------------------------
# Derived values
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AggregateResult:
    total_value: Decimal = ZERO
    count: int = 0
    by_payment_method: Dict[PaymentMethod, Decimal] = field(default_factory=dict)
    by_payment_method_gross: Dict[PaymentMethod, Decimal] = field(default_factory=dict)
    by_seller: Dict[str, Decimal] = field(default_factory=dict)
    by_store: Dict[str, Decimal] = field(default_factory=dict)

    def method_total(self, methods: Iterable[PaymentMethod]) -> Decimal:
        return sum((self.by_payment_method.get(m, ZERO) for m in set(methods)), ZERO)


@dataclass(frozen=True)
class GoalProgress:
    goal_id: str
    goal_type: GoalType
    period: GoalPeriod
    store_id: str
    seller_id: Optional[str]
    week_start: date
    week_end: date
    current_value: Decimal
    target_value: Decimal
    percentage: Decimal
    achieved: bool
    is_finished: bool


@dataclass(frozen=True)
class CashierGoalProgress:
    goal_id: str
    cashier_id: str
    store_id: str
    period_type: GoalPeriod
    week_start: date
    week_end: date
    payment_methods: Tuple[PaymentMethod, ...]
    target_percentage: Decimal
    total_store_sales: Decimal
    target_method_sales: Decimal
    percentage_achieved: Decimal
    is_goal_met: bool
    bonus_percentage: Decimal
    bonus_value: Decimal
    is_finished: bool = False


@dataclass(frozen=True)
class BonusResult:
    applied_percentage: Decimal
    bonus_value: Decimal


@dataclass(frozen=True)
class BonusLineItem:
    employee_id: str
    employee_name: str
    role: EmployeeRole
    store_id: str
    goal_id: str
    goal_type: str  # individual, team or cashier
    week_start: date
    week_end: date
    target_value: Decimal
    actual_value: Decimal
    percentage: Decimal
    achieved: bool
    applied_bonus_percentage: Decimal
    own_bonus_value: Decimal
    manager_team_bonus: Decimal = ZERO
    bonus_value: Decimal = ZERO
    payment_methods: Tuple[PaymentMethod, ...] = ()


@dataclass(frozen=True)
class RoleTotals:
    vendor_total: Decimal = ZERO
    manager_total: Decimal = ZERO
    cashier_total: Decimal = ZERO
    grand_total: Decimal = ZERO


@dataclass(frozen=True)
class StoreTotals:
    store_id: str
    store_name: str
    vendor_total: Decimal = ZERO
    manager_total: Decimal = ZERO
    cashier_total: Decimal = ZERO
    total: Decimal = ZERO


@dataclass(frozen=True)
class PaymentSummary:
    period: PeriodWindow
    payment_date: date
    mode: ReportMode
    line_items: Tuple[BonusLineItem, ...]
    totals: RoleTotals
    by_store: Tuple[StoreTotals, ...]


@dataclass(frozen=True)
class PeriodBonusTotals:
    period: PeriodWindow
    vendor_bonus: Decimal
    manager_bonus: Decimal
    cashier_bonus: Decimal
    total: Decimal


@dataclass(frozen=True)
class ExpectedProgress:
    expected_percentage: float
    linear_percentage: float
    pattern_based: bool
    confidence: str
    explanation: str


@dataclass(frozen=True)
class GoalPacing:
    elapsed_days: int
    total_days: int
    expected_percentage: float
    is_on_track: bool
    pattern_based: bool = False
    confidence: str = "low"


@dataclass(frozen=True)
class AggregatedGoalProgress:
    period: GoalPeriod
    store_label: str
    goals_count: int
    week_start: date
    week_end: date
    target_value: Decimal
    current_value: Decimal
    percentage: Decimal
    pacing: Optional[GoalPacing] = None


@dataclass(frozen=True)
class DashboardGoal:
    progress: GoalProgress
    seller_name: Optional[str]
    pacing: GoalPacing
    bonus_percentage_achieved: Optional[Decimal]
    bonus_percentage_not_achieved: Optional[Decimal]
    estimated_bonus: Optional[Decimal]


@dataclass(frozen=True)
class PersonalGoalEntry:
    goal_id: str
    period: GoalPeriod
    store_id: str
    week_start: date
    week_end: date
    target_value: Decimal
    current_value: Decimal
    percentage: Decimal
    achieved: bool
    is_finished: bool
    applied_bonus_percentage: Decimal
    bonus_value: Decimal
    is_team_goal: bool = False
    is_cashier_goal: bool = False
    cashier_progress: Optional[CashierGoalProgress] = None


@dataclass(frozen=True)
class PersonalGoalsReport:
    employee: Employee
    goals: Tuple[PersonalGoalEntry, ...]
    total_goals: int
    achieved_goals: int
    total_bonus: Decimal
    total_sales: Decimal


@dataclass(frozen=True)
class CashierDashboard:
    has_goal: bool
    window: PeriodWindow
    progress: Optional[CashierGoalProgress] = None
    pacing: Optional[GoalPacing] = None
    sales_by_method: Dict[PaymentMethod, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class GoalDashboard:
    viewer_role: EmployeeRole
    goals: Tuple[DashboardGoal, ...] = ()
    aggregated: Tuple[AggregatedGoalProgress, ...] = ()
