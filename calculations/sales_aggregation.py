"""
Sales Aggregation Module

Reduces a raw sales / receipts snapshot to the totals the goal evaluators need:
- total net value and count of closed sales inside a window
- per-seller and per-store totals
- per-payment-method totals taken from receipts joined on the filtered sales

Values stay Decimal end to end; pandas is used for filtering and grouping only.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, Optional

import pandas as pd

from .entities import AggregateResult, PaymentMethod, PaymentReceipt, PeriodWindow, SaleRecord, ZERO
from .payment_methods import fold_text

logger = logging.getLogger(__name__)

DEFAULT_CLOSED_STATUSES = frozenset({
    "finalizado", "finalizada", "fechado", "fechada", "concluido", "concluida",
    "closed", "finalized", "completed",
})

SALE_COLUMNS = ["sale_id", "store_id", "sale_date", "net_value", "seller_key", "status"]
RECEIPT_COLUMNS = ["sale_id", "payment_method", "gross_value", "net_value"]


def normalize_seller_name(name: Optional[str]) -> str:
    return (name or "").strip().lower()


def is_closed_status(status: Optional[str], closed_statuses: Optional[Iterable[str]] = None) -> bool:
    """Missing status counts as closed (the ERP sync defaults it to 'Finalizado')"""
    if status is None or pd.isna(status) or not str(status).strip():
        return True
    allowed = DEFAULT_CLOSED_STATUSES if closed_statuses is None else {fold_text(s) for s in closed_statuses}
    return fold_text(str(status)) in allowed


def _decimal_sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def sales_to_frame(sales: Iterable[SaleRecord]) -> pd.DataFrame:
    records = [
        {
            "sale_id": sale.id,
            "store_id": sale.store_id,
            "sale_date": sale.date,
            "net_value": sale.net_value,
            "seller_key": normalize_seller_name(sale.seller_name),
            "status": sale.status,
        }
        for sale in sales
    ]
    return pd.DataFrame.from_records(records, columns=SALE_COLUMNS)


def receipts_to_frame(receipts: Iterable[PaymentReceipt]) -> pd.DataFrame:
    records = [
        {
            "sale_id": receipt.sale_id,
            "payment_method": receipt.payment_method.value if receipt.payment_method else None,
            "gross_value": receipt.gross_value,
            "net_value": receipt.net_value,
        }
        for receipt in receipts
    ]
    return pd.DataFrame.from_records(records, columns=RECEIPT_COLUMNS)


def filter_sales_frame(sales_df: pd.DataFrame, window: Optional[PeriodWindow] = None,
                       store_ids: Optional[Iterable[str]] = None, seller_filter: Optional[str] = None,
                       closed_statuses: Optional[Iterable[str]] = None) -> pd.DataFrame:
    """Keep closed sales inside the window / stores, optionally for one seller"""
    if sales_df.empty:
        return sales_df

    closed = None if closed_statuses is None else list(closed_statuses)
    mask = sales_df["status"].map(lambda status: is_closed_status(status, closed)).astype(bool)

    if window is not None:
        mask &= sales_df["sale_date"].map(window.contains).astype(bool)

    if store_ids is not None:
        mask &= sales_df["store_id"].isin(list(store_ids))

    if seller_filter is not None:
        seller_key = normalize_seller_name(seller_filter)
        if seller_key:
            mask &= sales_df["seller_key"] == seller_key
        else:
            mask &= False

    return sales_df[mask]


def _grouped_totals(frame: pd.DataFrame, key: str, value_column: str) -> Dict[str, Decimal]:
    if frame.empty:
        return {}
    return {group: _decimal_sum(values) for group, values in frame.groupby(key)[value_column]}


def aggregate_sales(sales: Iterable[SaleRecord], receipts: Iterable[PaymentReceipt], window: PeriodWindow,
                    store_ids: Optional[Iterable[str]] = None, seller_filter: Optional[str] = None,
                    closed_statuses: Optional[Iterable[str]] = None) -> AggregateResult:
    """
    Aggregate a sales snapshot for one window

    Args:
        sales: sale records (any status, any date)
        receipts: payment receipts; joined on sale id
        window: inclusive date window
        store_ids: stores to include (None = every store)
        seller_filter: seller full name for individual goals (None = whole store / team)
        closed_statuses: statuses that count as closed (None = defaults)

    Returns:
        AggregateResult with totals, count and per-method / seller / store breakdowns
    """
    filtered = filter_sales_frame(sales_to_frame(sales), window, store_ids, seller_filter, closed_statuses)
    if filtered.empty:
        return AggregateResult()

    receipt_df = receipts_to_frame(receipts)
    joined = receipt_df[receipt_df["sale_id"].isin(filtered["sale_id"]) & receipt_df["payment_method"].notna()]

    by_method_net = _grouped_totals(joined, "payment_method", "net_value")
    by_method_gross = _grouped_totals(joined, "payment_method", "gross_value")

    result = AggregateResult(
        total_value=_decimal_sum(filtered["net_value"]),
        count=len(filtered),
        by_payment_method={PaymentMethod(m): v for m, v in by_method_net.items()},
        by_payment_method_gross={PaymentMethod(m): v for m, v in by_method_gross.items()},
        by_seller=_grouped_totals(filtered, "seller_key", "net_value"),
        by_store=_grouped_totals(filtered, "store_id", "net_value"),
    )
    logger.debug(f"📊 Aggregated {result.count} sales in {window.start}..{window.end}: total={result.total_value}")
    return result


def daily_sales_totals(sales: Iterable[SaleRecord], store_ids: Optional[Iterable[str]] = None,
                       closed_statuses: Optional[Iterable[str]] = None) -> Dict[date, Decimal]:
    """Closed-sale totals per calendar day (history input for pattern-based pacing)"""
    filtered = filter_sales_frame(sales_to_frame(sales), None, store_ids, None, closed_statuses)
    return _grouped_totals(filtered, "sale_date", "net_value")
