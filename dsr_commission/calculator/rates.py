# ==============================================================================
# dsr_commission/calculator/rates.py
# ------------------------------------------------------------------------------
# Commission rate tables and the closed value sets they are keyed by.
# The default tables are compiled in; a CommissionConfig can be built with
# alternate tables and handed to any calculator function.
# ==============================================================================

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


class _Choice(str, Enum):
    """A string-valued enum that tolerates values outside the set."""

    @classmethod
    def coerce(cls, value):
        """Returns the matching member, or None for anything unrecognised."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class SaleType(_Choice):
    FS = 'FS'    # full setup
    DO = 'DO'    # decoder only
    DVS = 'DVS'  # digital / virtual stock


class PaymentStatus(_Choice):
    PAID = 'paid'
    UNPAID = 'unpaid'


class CommissionStatus(_Choice):
    ELIGIBLE = 'eligible'
    PENDING_APPROVAL = 'pending-approval'
    NOT_ELIGIBLE = 'not-eligible'


class Tier(_Choice):
    """DSR performance tiers, declared lowest to highest."""
    KURUTA = 'KURUTA'
    CHUMA = 'CHUMA'
    SHABA = 'SHABA'
    FEDHA = 'FEDHA'
    DHAHABU = 'DHAHABU'
    TANZANITE = 'TANZANITE'


@dataclass(frozen=True)
class BonusBand:
    """One row of the bonus table. Both ends of the sales range are inclusive."""
    tier: Tier
    min_sales: int
    max_sales: int
    bonus_amount: int

    def matches(self, tier, monthly_sales_count):
        return self.tier == tier and self.min_sales <= monthly_sales_count <= self.max_sales


# --- Default tables (TZS) ---

DEFAULT_UPFRONT_COMMISSION = {
    SaleType.DO: 2000,
    SaleType.FS: 5000,
    SaleType.DVS: 0,
}

DEFAULT_ACTIVATION_COMMISSION = 1500

DEFAULT_PACKAGE_COMMISSION = {
    'PREMIUM': 65000,
    'COMPACT PLUS': 35000,
    'COMPACT': 17000,
    'SHANGWE': 6000,
    'ACCESS': 2750,
    'BOMBA': 2750,
}

DEFAULT_BONUS_BANDS = (
    # (tier, min sales, max sales, bonus)
    BonusBand(Tier.KURUTA, 3, 4, 30000),
    BonusBand(Tier.CHUMA, 1, 4, 0),
    BonusBand(Tier.SHABA, 5, 9, 50000),
    BonusBand(Tier.SHABA, 10, 14, 115000),
    BonusBand(Tier.FEDHA, 15, 19, 200000),
    BonusBand(Tier.FEDHA, 20, 24, 300000),
    BonusBand(Tier.DHAHABU, 20, 24, 425000),
    BonusBand(Tier.DHAHABU, 25, 44, 675000),
    BonusBand(Tier.TANZANITE, 20, 24, 1000000),
)


@dataclass(frozen=True)
class CommissionConfig:
    """
    The full set of rate tables used by the calculator.

    Instances are immutable: mappings are exposed read-only and the bonus
    bands are kept as a tuple in declaration order, since band lookup is
    first-match-wins. Use `with_overrides` to derive an alternate config.
    Configs compare by value but are not hashable.
    """
    __hash__ = None

    upfront: Mapping[SaleType, int] = field(default_factory=lambda: dict(DEFAULT_UPFRONT_COMMISSION))
    activation: int = DEFAULT_ACTIVATION_COMMISSION
    packages: Mapping[str, int] = field(default_factory=lambda: dict(DEFAULT_PACKAGE_COMMISSION))
    bonus_bands: Tuple[BonusBand, ...] = DEFAULT_BONUS_BANDS

    def __post_init__(self):
        upfront = {SaleType(key): int(amount) for key, amount in self.upfront.items()}
        packages = {str(name).upper(): int(amount) for name, amount in self.packages.items()}
        bands = tuple(
            band if isinstance(band, BonusBand) else BonusBand(Tier(band[0]), *band[1:])
            for band in self.bonus_bands
        )
        object.__setattr__(self, 'upfront', MappingProxyType(upfront))
        object.__setattr__(self, 'packages', MappingProxyType(packages))
        object.__setattr__(self, 'activation', int(self.activation))
        object.__setattr__(self, 'bonus_bands', bands)

    def with_overrides(self, **changes):
        """Returns a copy of this config with the given tables replaced."""
        return replace(self, **changes)

    # --- Lookups (unknown keys fall through to 0) ---

    def upfront_for(self, sale_type):
        sale_type = SaleType.coerce(sale_type)
        if sale_type is None:
            return 0
        return self.upfront.get(sale_type, 0)

    def package_for(self, package_name):
        if not package_name:
            return 0
        return self.packages.get(str(package_name).upper(), 0)

    def find_bonus_band(self, tier, monthly_sales_count) -> Optional[BonusBand]:
        tier = Tier.coerce(tier)
        if tier is None:
            return None
        for band in self.bonus_bands:
            if band.matches(tier, monthly_sales_count):
                return band
        return None

    def bonus_for(self, tier, monthly_sales_count):
        band = self.find_bonus_band(tier, monthly_sales_count)
        return band.bonus_amount if band else 0

    def describe(self):
        """Plain-data view of the tables, for JSON responses and the CLI."""
        return {
            'upfront': {sale_type.value: amount for sale_type, amount in self.upfront.items()},
            'activation': self.activation,
            'packages': dict(self.packages),
            'bonus_bands': [
                {
                    'tier': band.tier.value,
                    'min_sales': band.min_sales,
                    'max_sales': band.max_sales,
                    'bonus': band.bonus_amount,
                }
                for band in self.bonus_bands
            ],
        }


DEFAULT_CONFIG = CommissionConfig()
