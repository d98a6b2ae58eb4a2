# ==============================================================================
# dsr_commission/calculator/engine.py
# ------------------------------------------------------------------------------
# Per-sale commission, monthly bonus and DSR tier calculations.
# Every function here is pure: the result depends only on the arguments and
# the CommissionConfig passed in.
# ==============================================================================

import logging
from dataclasses import asdict, dataclass, field
from typing import Optional

from .rates import DEFAULT_CONFIG, CommissionStatus, PaymentStatus, SaleType, Tier

AWAITING_APPROVAL = 'Awaiting admin approval'
ADMIN_REJECTED = 'Admin rejected'
STOCK_UNPAID = 'Stock unpaid'
NO_PACKAGE = 'No package selected'


@dataclass(frozen=True)
class CommissionBreakdown:
    """
    Monetary components of a single sale's commission.

    `total_commission` is upfront + activation + package. The bonus is earned
    per month, not per sale, so it is always 0 here and callers add it when
    aggregating a representative's month.
    """
    upfront_commission: int = 0
    activation_commission: int = 0
    package_commission: int = 0
    bonus_commission: int = 0
    total_commission: int = 0

    def to_dict(self):
        return {
            'upfrontCommission': self.upfront_commission,
            'activationCommission': self.activation_commission,
            'packageCommission': self.package_commission,
            'bonusCommission': self.bonus_commission,
            'totalCommission': self.total_commission,
        }


@dataclass(frozen=True)
class SaleCommission:
    sale_id: str
    status: CommissionStatus
    reason: Optional[str] = None
    breakdown: CommissionBreakdown = field(default_factory=CommissionBreakdown)

    @property
    def is_eligible(self):
        return self.status == CommissionStatus.ELIGIBLE

    def to_dict(self):
        data = {
            'saleId': self.sale_id,
            'status': self.status.value,
            'breakdown': self.breakdown.to_dict(),
        }
        if self.reason is not None:
            data['reason'] = self.reason
        return data


# --- Helper Functions ---

def _check_eligibility(sale_type, package_name, payment_status, admin_approved):
    """Returns (status, reason). The order of the checks is significant."""
    if sale_type == SaleType.DVS:
        # Payment status is not checked for DVS
        if admin_approved is None:
            return CommissionStatus.PENDING_APPROVAL, AWAITING_APPROVAL
        if not admin_approved:
            return CommissionStatus.NOT_ELIGIBLE, ADMIN_REJECTED
        return CommissionStatus.ELIGIBLE, None

    if payment_status == PaymentStatus.UNPAID:
        return CommissionStatus.NOT_ELIGIBLE, STOCK_UNPAID
    if admin_approved is None:
        return CommissionStatus.PENDING_APPROVAL, AWAITING_APPROVAL
    if not admin_approved:
        return CommissionStatus.NOT_ELIGIBLE, ADMIN_REJECTED
    if not package_name:
        return CommissionStatus.NOT_ELIGIBLE, NO_PACKAGE
    return CommissionStatus.ELIGIBLE, None


def potential_breakdown(sale_type, package_name, config=DEFAULT_CONFIG):
    """
    The breakdown a sale earns once it is eligible, ignoring its current
    payment and approval state.
    """
    upfront = config.upfront_for(sale_type)
    activation = config.activation
    package = config.package_for(package_name)
    if package_name and not package:
        logging.debug(f"No package commission configured for '{package_name}'.")
    return CommissionBreakdown(
        upfront_commission=upfront,
        activation_commission=activation,
        package_commission=package,
        total_commission=upfront + activation + package,
    )


# --- Public Calculator API ---

def calculate_sale_commission(sale_type, package_name, payment_status, admin_approved,
                              stock_id=None, sale_id='', config=DEFAULT_CONFIG):
    """
    Decides whether commission is payable on one sale and, if so, computes it.

    Args:
        sale_type: SaleType or its string value ('FS', 'DO', 'DVS').
        package_name: Package sold with the sale, matched case-insensitively.
        payment_status: PaymentStatus or 'paid'/'unpaid'.
        admin_approved: True, False, or None while approval is pending.
        stock_id: Accepted for call-site compatibility; it does not affect
            the result.
        sale_id: Caller's identifier, copied onto the result.
        config (CommissionConfig): Rate tables to use.

    Returns:
        SaleCommission: status, reason and breakdown. Every breakdown field
        is 0 unless the status is eligible.
    """
    status, reason = _check_eligibility(sale_type, package_name, payment_status, admin_approved)
    logging.debug(f"Sale '{sale_id}' ({sale_type}, {package_name}, {payment_status}, "
                  f"approved={admin_approved}) -> {status.value}")

    if status != CommissionStatus.ELIGIBLE:
        return SaleCommission(sale_id=sale_id, status=status, reason=reason)

    return SaleCommission(
        sale_id=sale_id,
        status=status,
        reason=reason,
        breakdown=potential_breakdown(sale_type, package_name, config),
    )


def calculate_bonus_commission(tier, monthly_sales_count, config=DEFAULT_CONFIG):
    """
    Returns the flat monthly bonus for a tier and sales count, or 0.

    Bands are scanned in declaration order and the first one whose tier
    matches and whose inclusive range contains the count wins.
    """
    band = config.find_bonus_band(tier, monthly_sales_count)
    if band is None:
        logging.debug(f"No bonus band for tier '{tier}' with {monthly_sales_count} sales.")
        return 0
    return band.bonus_amount


def get_dsr_tier(monthly_sales_count, months_working):
    """
    Classifies a representative from this month's sales and tenure in months.

    The ladder is evaluated top-down and the first matching rule wins; the
    ranges overlap, so the order must not change.
    """
    if monthly_sales_count >= 20 and months_working >= 6:
        return Tier.TANZANITE
    if monthly_sales_count >= 25:
        return Tier.DHAHABU
    if monthly_sales_count >= 20:
        return Tier.DHAHABU
    if monthly_sales_count >= 15:
        return Tier.FEDHA
    if monthly_sales_count >= 10:
        return Tier.SHABA
    if monthly_sales_count >= 5:
        return Tier.SHABA
    if months_working > 1:
        return Tier.CHUMA
    return Tier.KURUTA


def breakdown_as_row(commission):
    """Flattens a SaleCommission into snake_case columns for a DataFrame row."""
    row = asdict(commission.breakdown)
    row['status'] = commission.status.value
    row['reason'] = commission.reason
    return row
