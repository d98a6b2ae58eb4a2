# ==============================================================================
# dsr_commission/calculator/summary.py
# ------------------------------------------------------------------------------
# Aggregates per-sale commission results into monthly figures per
# representative and per sale type, as shown on the manager and DSR
# commission reports.
# ==============================================================================

import logging
from dataclasses import dataclass

import pandas as pd

from .engine import (breakdown_as_row, calculate_bonus_commission, calculate_sale_commission,
                     get_dsr_tier, potential_breakdown)
from .rates import DEFAULT_CONFIG, CommissionStatus, Tier

SCORE_COLUMNS = [
    'status', 'reason', 'upfront_commission', 'activation_commission',
    'package_commission', 'bonus_commission', 'total_commission', 'potential_commission'
]

DAYS_PER_MONTH = 30


@dataclass(frozen=True)
class RepresentativeMonth:
    """One representative's commission position for a calendar month."""
    dsr_id: str
    year: int
    month: int
    sales_count: int
    months_working: int
    tier: Tier
    eligible_sales: int = 0
    pending_sales: int = 0
    not_eligible_sales: int = 0
    eligible_commission: int = 0
    pending_commission: int = 0
    bonus_commission: int = 0

    @property
    def total_payable(self):
        # The bonus joins the per-sale totals only at this level
        return self.eligible_commission + self.bonus_commission

    def to_dict(self):
        return {
            'dsr_id': self.dsr_id,
            'period': f"{self.year}-{self.month:02d}",
            'sales_count': self.sales_count,
            'months_working': self.months_working,
            'tier': self.tier.value,
            'eligible_sales': self.eligible_sales,
            'pending_sales': self.pending_sales,
            'not_eligible_sales': self.not_eligible_sales,
            'eligible_commission': self.eligible_commission,
            'pending_commission': self.pending_commission,
            'bonus_commission': self.bonus_commission,
            'total_payable': self.total_payable,
        }


def _naive_utc(value):
    """Timestamp in naive UTC, so zoned and unzoned dates can be compared."""
    stamp = pd.Timestamp(value)
    if stamp.tzinfo is not None:
        stamp = stamp.tz_convert(None)
    return stamp


def months_working(joined_on, as_of):
    """Whole 30-day periods between joining and `as_of`, never negative."""
    if joined_on is None or pd.isna(joined_on):
        return 0
    elapsed = _naive_utc(as_of) - _naive_utc(joined_on)
    return max(0, elapsed.days // DAYS_PER_MONTH)


def score_sales(sales_df, config=DEFAULT_CONFIG):
    """
    Runs the per-sale calculator over a validated sales frame.

    Returns a copy of the frame with the status, reason and breakdown of
    each sale added, plus `potential_commission`: what the sale earns once
    it becomes eligible.
    """
    rows = []
    for index, row in sales_df.iterrows():
        commission = calculate_sale_commission(
            row['sale_type'],
            row.get('package_option'),
            row['payment_status'],
            row['admin_approved'],
            stock_id=row.get('stock_id'),
            sale_id=row['sale_id'],
            config=config,
        )
        record = breakdown_as_row(commission)
        record['potential_commission'] = potential_breakdown(
            row['sale_type'], row.get('package_option'), config).total_commission
        rows.append(record)

    scores = pd.DataFrame(rows, index=sales_df.index, columns=SCORE_COLUMNS)
    # Export columns sharing a score column's name are replaced
    return sales_df.drop(columns=SCORE_COLUMNS, errors='ignore').join(scores)


def sales_in_month(scored_df, year, month):
    created = scored_df['created_at']
    return scored_df[(created.dt.year == year) & (created.dt.month == month)]


def _summarize_group(dsr_id, group, year, month, tenure, config):
    status = group['status']
    eligible = status == CommissionStatus.ELIGIBLE.value
    pending = status == CommissionStatus.PENDING_APPROVAL.value

    sales_count = len(group)
    tier = get_dsr_tier(sales_count, tenure)
    return RepresentativeMonth(
        dsr_id=dsr_id,
        year=year,
        month=month,
        sales_count=sales_count,
        months_working=tenure,
        tier=tier,
        eligible_sales=int(eligible.sum()),
        pending_sales=int(pending.sum()),
        not_eligible_sales=int(sales_count - eligible.sum() - pending.sum()),
        eligible_commission=int(group.loc[eligible, 'total_commission'].sum()),
        pending_commission=int(group.loc[pending, 'potential_commission'].sum()),
        bonus_commission=calculate_bonus_commission(tier, sales_count, config),
    )


def summarize_month(sales_df, year, month, joined_dates=None, as_of=None, config=DEFAULT_CONFIG):
    """
    Builds each representative's commission summary for one calendar month.

    Args:
        sales_df (pd.DataFrame): Validated sales frame, scored or not.
        year (int), month (int): The month to report on.
        joined_dates (dict): dsr_id -> date the representative joined. Every
            representative listed here is reported, even with no sales.
        as_of: Reference date for tenure; defaults to now.
        config (CommissionConfig): Rate tables to use.

    Returns:
        dict: dsr_id -> RepresentativeMonth, ordered by dsr_id.
    """
    joined_dates = joined_dates or {}
    as_of = pd.Timestamp.now() if as_of is None else _naive_utc(as_of)

    is_scored = all(col in sales_df.columns for col in SCORE_COLUMNS)
    scored = sales_df if is_scored else score_sales(sales_df, config)
    month_sales = sales_in_month(scored, year, month)
    logging.info(f"--- Summarising {len(month_sales)} sales for {year}-{month:02d} ---")

    unassigned = month_sales['dsr_id'].isna().sum()
    if unassigned:
        logging.warning(f"{unassigned} sale(s) in {year}-{month:02d} have no dsr_id and were skipped.")

    groups = dict(tuple(month_sales.groupby('dsr_id', sort=True)))
    empty = month_sales.iloc[0:0]

    results = {}
    for dsr_id in sorted(set(groups) | set(joined_dates)):
        tenure = months_working(joined_dates.get(dsr_id), as_of)
        summary = _summarize_group(dsr_id, groups.get(dsr_id, empty), year, month, tenure, config)
        logging.debug(f"  {dsr_id}: {summary.sales_count} sales, tier {summary.tier.value}, "
                      f"eligible {summary.eligible_commission:,}, bonus {summary.bonus_commission:,}")
        results[dsr_id] = summary

    logging.info(f"--- Summary complete for {len(results)} representative(s). ---")
    return results


def summarize_by_sale_type(scored_df):
    """
    Earned, pending and potential commission per sale type.

    `earned` sums eligible totals, `pending` sums the potential of sales
    still awaiting approval and `potential` sums it over every sale.
    """
    summary = {}
    sale_types = scored_df['sale_type'].fillna('UNKNOWN')
    for sale_type, group in scored_df.groupby(sale_types, sort=True):
        pending = group['status'] == CommissionStatus.PENDING_APPROVAL.value
        summary[sale_type] = {
            'sales': len(group),
            'earned': int(group['total_commission'].sum()),
            'pending': int(group.loc[pending, 'potential_commission'].sum()),
            'potential': int(group['potential_commission'].sum()),
        }
    return summary
