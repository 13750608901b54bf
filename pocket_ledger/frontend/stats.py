# frontend/stats.py
"""
Reporting over the in-memory transaction list.

Everything here is a pure function of the list it is given; nothing is
cached, so callers simply recompute after each change. Periods are either a
single month (``month`` 1-12) of ``year`` or the whole year (``month=None``).
"""
from __future__ import annotations

import math
from datetime import date
from typing import Iterable, Optional, Sequence

import pandas as pd

from pocket_ledger.constants import DEFAULT_MONTHLY_BUDGET
from pocket_ledger.models import Account, CategorySlice, Transaction, TrendPoint

COLUMNS = ["id", "type", "amount", "category", "categoryColor", "day"]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def tx_date(tx: Transaction) -> Optional[date]:
    raw = tx.get("time") or tx.get("date")
    if not raw:
        return None
    try:
        return date.fromisoformat(str(raw)[:10])
    except ValueError:
        return None


def to_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Flatten transactions into a frame with year/month columns; undated rows are dropped."""
    rows = []
    for tx in transactions:
        day = tx_date(tx)
        if day is None:
            continue
        rows.append({
            "id": tx.get("id"),
            "type": tx.get("type"),
            "amount": float(tx.get("amount") or 0),
            "category": tx.get("category", ""),
            "categoryColor": tx.get("categoryColor", ""),
            "day": day,
        })
    df = pd.DataFrame(rows, columns=COLUMNS)
    df["year"] = [d.year for d in df["day"]]
    df["month"] = [d.month for d in df["day"]]
    return df


def _select(df: pd.DataFrame, year: int, month: Optional[int], kind: Optional[str]) -> pd.DataFrame:
    mask = df["year"] == year
    if month is not None:
        mask &= df["month"] == month
    if kind is not None:
        mask &= df["type"] == kind
    return df[mask]


def filter_period(transactions: Sequence[Transaction], year: int, month: Optional[int] = None,
                  kind: Optional[str] = None) -> list[Transaction]:
    """Transactions inside the period (and of ``kind`` if given), original order kept."""
    out = []
    for tx in transactions:
        day = tx_date(tx)
        if day is None or day.year != year:
            continue
        if month is not None and day.month != month:
            continue
        if kind is not None and tx.get("type") != kind:
            continue
        out.append(tx)
    return out


def period_total(transactions: Sequence[Transaction], kind: str, year: int,
                 month: Optional[int] = None) -> float:
    df = _select(to_frame(transactions), year, month, kind)
    return float(df["amount"].sum())


def category_breakdown(transactions: Sequence[Transaction], kind: str, year: int,
                       month: Optional[int] = None,
                       hidden: Iterable[str] = ()) -> list[CategorySlice]:
    """
    Per-category totals, largest first.

    ``percent`` is each visible group's share of the visible total, rounded
    half up. Hidden groups stay in the list (flagged) with a 0 share.
    """
    hidden = set(hidden)
    df = _select(to_frame(transactions), year, month, kind)
    if df.empty:
        return []

    grouped = (
        df.groupby("category", sort=False)
        .agg(amount=("amount", "sum"), color=("categoryColor", "first"))
        .reset_index()
        .sort_values("amount", ascending=False, kind="stable")
    )
    visible = float(grouped.loc[~grouped["category"].isin(hidden), "amount"].sum())

    slices: list[CategorySlice] = []
    for row in grouped.itertuples(index=False):
        is_hidden = row.category in hidden
        amount = float(row.amount)
        percent = round_half_up(amount / visible * 100) if visible > 0 and not is_hidden else 0
        slices.append({
            "label": row.category,
            "amount": amount,
            "color": row.color,
            "percent": percent,
            "isHidden": is_hidden,
        })
    return slices


def visible_total(breakdown: Sequence[CategorySlice]) -> float:
    return sum(s["amount"] for s in breakdown if not s["isHidden"])


def toggle_category(hidden: Sequence[str], label: str) -> list[str]:
    """Show/hide a category; a display filter only, the data is untouched."""
    if label in hidden:
        return [c for c in hidden if c != label]
    return list(hidden) + [label]


def daily_average(total: float, days: int = 30) -> float:
    return total / days


def monthly_trend(transactions: Sequence[Transaction], kind: str, year: int) -> list[TrendPoint]:
    df = _select(to_frame(transactions), year, None, kind)
    sums = df.groupby("month")["amount"].sum()
    return [
        {"label": f"{m:02d}", "month": m, "amount": float(sums.get(m, 0.0))}
        for m in range(1, 13)
    ]


def previous_month(year: int, month: int) -> tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def next_month(year: int, month: int) -> tuple[int, int]:
    return (year + 1, 1) if month == 12 else (year, month + 1)


def percent_change(current: float, previous: float) -> float:
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / previous * 100


def month_over_month(transactions: Sequence[Transaction], kind: str, year: int, month: int) -> float:
    """Change of ``month`` against the month before it (Jan compares with last December)."""
    prev_year, prev = previous_month(year, month)
    current = period_total(transactions, kind, year, month)
    previous = period_total(transactions, kind, prev_year, prev)
    return percent_change(current, previous)


def period_summary(transactions: Sequence[Transaction], year: int,
                   month: Optional[int] = None) -> dict:
    income = period_total(transactions, "income", year, month)
    expense = period_total(transactions, "expense", year, month)
    return {"income": income, "expense": expense, "balance": income - expense}


def group_by_date(transactions: Sequence[Transaction]) -> list[tuple[str, list[Transaction]]]:
    """Transactions bucketed by day, newest day first."""
    buckets: dict[str, list[Transaction]] = {}
    for tx in transactions:
        day = tx_date(tx)
        key = day.isoformat() if day else ""
        buckets.setdefault(key, []).append(tx)
    return sorted(buckets.items(), key=lambda item: item[0], reverse=True)


def dashboard_summary(accounts: Sequence[Account], transactions: Sequence[Transaction],
                      budget: float = DEFAULT_MONTHLY_BUDGET) -> dict:
    total_balance = sum(float(a.get("balance") or 0) for a in accounts)
    total_income = sum(float(t.get("amount") or 0) for t in transactions if t.get("type") == "income")
    total_expense = sum(float(t.get("amount") or 0) for t in transactions if t.get("type") == "expense")
    used = total_expense / budget * 100 if budget else 0.0
    return {
        "totalBalance": total_balance,
        "totalIncome": total_income,
        "totalExpense": total_expense,
        "budget": budget,
        "budgetPercent": round_half_up(used),
        # progress bar width
        "budgetBar": min(used, 100.0),
    }


def asset_summary(accounts: Sequence[Account]) -> dict:
    balances = [float(a.get("balance") or 0) for a in accounts]
    assets = sum(b for b in balances if b > 0)
    liabilities = sum(abs(b) for b in balances if b < 0)
    return {"assets": assets, "liabilities": liabilities, "netWorth": assets - liabilities}


def format_amount(amount: float, visible: bool = True, symbol: str = "¥") -> str:
    if not visible:
        return "****"
    return f"{symbol}{amount:,.2f}"
