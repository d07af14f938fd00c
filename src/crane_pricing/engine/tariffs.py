"""
Static tariff constants for the rent and trip cost formulas.

These are read-only for the lifetime of the process.
"""
from decimal import Decimal


ORDER_TYPES = ('micro', 'large')
DAY_NIGHT = ('day', 'night')
SHIFTS = ('single', 'double')
SUNDAY_WORKING = ('yes', 'no')
USAGE_PROFILES = ('heavy', 'light')
DEAL_TYPES = ('no_advance', 'credit', 'long_credit')
GST_BILLING = ('gst', 'no_gst')
RISK_FACTORS = ('high', 'medium', 'low')
OTHER_FACTOR_TYPES = ('area', 'condition', 'customer_reputation', 'none')

USAGE_PERCENTAGES = {
    'heavy': Decimal('0.10'),
    'light': Decimal('0.05'),
}

RISK_FACTOR_PERCENTAGES = {
    'high': Decimal('0.15'),
    'medium': Decimal('0.10'),
    'low': Decimal('0.05'),
}

GST_RATE = Decimal('0.18')
ELONGATION_PERCENTAGE = Decimal('0.05')

# Duration factor (H3)
LONG_CONTRACT_THRESHOLD_DAYS = 30
WORKING_DAYS_PER_MONTH = 26
HOURLY_BILLING_MULTIPLIER = 10
DOUBLE_SHIFT_FACTOR = 2

# Trip cost: distance is always billed both ways
ROUND_TRIP_FACTOR = 2

DEFAULT_MACHINE_KEY = 'default'
