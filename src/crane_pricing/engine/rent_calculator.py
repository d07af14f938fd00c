"""
Rent Calculator - the H2..H11 tariff model.

Every term is recomputed from the input on each call:

    H2  base rate            rate table lookup, 'default' if unlisted
    H3  duration factor      monthly blocks for long large orders, else hours
    P15 working cost         H2 × H3
    H4  food/accommodation   count × cost per resource, summed
    H5  usage surcharge      H2 × usage %
    P16 elongation           P15 × 5%
    H7  fuel cost            P15 + P16
    H8  commercial charge    deal extra charge
    H9  risk surcharge       H2 × risk %
    H10 incidental charge
    H11 other factors charge

    pre-tax = P15 + H4 + H5 + H7 + H8 + H9 + H10 + H11
    total   = pre-tax × (1 + GST) when billed with GST

H1 (order/contract) and H6 (mobilisation) are informational groups. P15
appears both on its own and inside H7; the sum is kept as the business
sheet defines it.
"""
import logging
from decimal import Decimal

from .models import RentCalculationInput, RentCalculationResult, RentComponents
from .rate_table import MachineRateTable
from .tariffs import (
    ORDER_TYPES, DAY_NIGHT, SHIFTS, SUNDAY_WORKING, USAGE_PROFILES, DEAL_TYPES,
    GST_BILLING, RISK_FACTORS, OTHER_FACTOR_TYPES,
    USAGE_PERCENTAGES, RISK_FACTOR_PERCENTAGES, GST_RATE, ELONGATION_PERCENTAGE,
    LONG_CONTRACT_THRESHOLD_DAYS, WORKING_DAYS_PER_MONTH, HOURLY_BILLING_MULTIPLIER,
    DOUBLE_SHIFT_FACTOR,
)
from .validation import require_amount, require_choice, require_positive_int, require_text

logger = logging.getLogger(__name__)

_CHOICE_FIELDS = (
    ('order_type', ORDER_TYPES),
    ('day_night', DAY_NIGHT),
    ('shift', SHIFTS),
    ('sunday_working', SUNDAY_WORKING),
    ('usage_profile', USAGE_PROFILES),
    ('deal_type', DEAL_TYPES),
    ('gst_billing', GST_BILLING),
    ('risk_factor', RISK_FACTORS),
    ('other_factor_type', OTHER_FACTOR_TYPES),
)

_AMOUNT_FIELDS = (
    'hours_per_day',
    'food_resource_count',
    'food_cost_per_resource',
    'accommodation_resource_count',
    'accommodation_cost_per_resource',
    'site_distance_km',
    'trailer_cost',
    'mob_demob_relaxation',
    'deal_extra_charge',
    'incidental_charges',
    'other_factor_charges',
)


def validate_rent_input(rent: RentCalculationInput) -> RentCalculationInput:
    """
    Validate every field and return a copy with amounts coerced to Decimal.

    Raises:
        ValidationError: on the first invalid field.
    """
    values = {'machine_type': require_text('machine_type', rent.machine_type)}
    for name, choices in _CHOICE_FIELDS:
        values[name] = require_choice(name, getattr(rent, name), choices)
    for name in _AMOUNT_FIELDS:
        values[name] = require_amount(name, getattr(rent, name))
    values['contract_days'] = require_positive_int('contract_days', rent.contract_days)
    return RentCalculationInput(**values)


def shift_factor(shift: str) -> int:
    return DOUBLE_SHIFT_FACTOR if shift == 'double' else 1


def duration_factor(rent: RentCalculationInput) -> Decimal:
    """
    H3: billable units for the contract.

    Large orders longer than 30 days bill 26 working days per 30-day block;
    everything else bills hours × 10 per day.
    """
    factor = shift_factor(rent.shift)
    if rent.contract_days > LONG_CONTRACT_THRESHOLD_DAYS and rent.order_type == 'large':
        months = max(1, rent.contract_days // LONG_CONTRACT_THRESHOLD_DAYS)
        return Decimal(WORKING_DAYS_PER_MONTH * factor * months)
    return rent.hours_per_day * factor * HOURLY_BILLING_MULTIPLIER * rent.contract_days


def accommodation_cost(rent: RentCalculationInput) -> Decimal:
    """H4: food plus accommodation for the site crew."""
    return (
        rent.food_resource_count * rent.food_cost_per_resource
        + rent.accommodation_resource_count * rent.accommodation_cost_per_resource
    )


def usage_surcharge(base_rate: Decimal, usage_profile: str) -> Decimal:
    """H5"""
    return base_rate * USAGE_PERCENTAGES.get(usage_profile, Decimal('0'))


def risk_surcharge(base_rate: Decimal, risk_factor: str) -> Decimal:
    """H9"""
    return base_rate * RISK_FACTOR_PERCENTAGES.get(risk_factor, Decimal('0'))


def compute_rent(rent: RentCalculationInput, rate_table: MachineRateTable) -> RentCalculationResult:
    """
    Compute the total rent and its H-component breakdown.

    Args:
        rent: the rental request
        rate_table: machine base rates, must contain a 'default' row

    Returns:
        RentCalculationResult with components, trace and warnings

    Raises:
        ValidationError: if any input field is invalid. No partial result.
    """
    rent = validate_rent_input(rent)

    h2, used_default = rate_table.lookup(rent.machine_type)
    if used_default:
        logger.warning(
            "Machine type '%s' not in rate table, using default rate %s",
            rent.machine_type, h2,
        )

    h3 = duration_factor(rent)
    working_cost = h2 * h3
    h4 = accommodation_cost(rent)
    h5 = usage_surcharge(h2, rent.usage_profile)
    elongation = working_cost * ELONGATION_PERCENTAGE
    h7 = working_cost + elongation
    h8 = rent.deal_extra_charge
    h9 = risk_surcharge(h2, rent.risk_factor)
    h10 = rent.incidental_charges
    h11 = rent.other_factor_charges

    pre_tax_total = working_cost + h4 + h5 + h7 + h8 + h9 + h10 + h11

    gst_amount = Decimal('0')
    total_rent = pre_tax_total
    if rent.gst_billing == 'gst':
        total_rent = pre_tax_total * (1 + GST_RATE)
        gst_amount = total_rent - pre_tax_total

    result = RentCalculationResult(
        total_rent=total_rent,
        components=RentComponents(
            h2=h2, h3=h3, h4=h4, h5=h5,
            working_cost=working_cost, elongation=elongation,
            h7=h7, h8=h8, h9=h9, h10=h10, h11=h11,
        ),
        pre_tax_total=pre_tax_total,
        gst_amount=gst_amount,
        rate_fallback=used_default,
    )

    if used_default:
        result.add_trace("H2 Base Rate", f"'{rent.machine_type}' not listed, using default rate", str(h2))
        result.add_warning(f"Default rate used for machine type '{rent.machine_type}'")
    else:
        result.add_trace("H2 Base Rate", f"Rate for {rent.machine_type}", str(h2))

    if rent.contract_days > LONG_CONTRACT_THRESHOLD_DAYS and rent.order_type == 'large':
        result.add_trace("H3 Duration", f"Monthly blocks for {rent.contract_days} days, {rent.shift} shift", str(h3))
    else:
        result.add_trace("H3 Duration", f"{rent.hours_per_day} h/day for {rent.contract_days} days, {rent.shift} shift", str(h3))

    result.add_trace("P15 Working Cost", "H2 × H3", str(working_cost))
    result.add_trace("H4 Food & Accommodation", "Resources × cost per resource", str(h4))
    result.add_trace("H5 Usage", f"{rent.usage_profile} usage surcharge", str(h5))
    result.add_trace("P16 Elongation", f"{ELONGATION_PERCENTAGE * 100}% of working cost", str(elongation))
    result.add_trace("H7 Fuel", "P15 + P16", str(h7))
    result.add_trace("H8 Commercial", f"Extra charge for {rent.deal_type} deal", str(h8))
    result.add_trace("H9 Risk", f"{rent.risk_factor} risk surcharge", str(h9))
    result.add_trace("H10 Incidental", "Incidental charges", str(h10))
    result.add_trace("H11 Other Factors", f"Charges for {rent.other_factor_type}", str(h11))
    result.add_trace("Pre-tax Total", "P15 + H4 + H5 + H7 + H8 + H9 + H10 + H11", str(pre_tax_total))
    if rent.gst_billing == 'gst':
        result.add_trace("GST", f"{GST_RATE * 100}% on pre-tax total", str(gst_amount))
    result.add_trace("Total Rent", "Billable amount", str(total_rent))

    logger.debug("Rent computed for %s: %s", rent.machine_type, total_rent)
    return result
