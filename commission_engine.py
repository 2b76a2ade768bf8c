"""
DEAL COMMISSION ALLOCATION ENGINE
Splits a deal value between commission lines
VERSION 2.0
"""

from dataclasses import dataclass
from decimal import Context, Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
import json
import logging
import math

logger = logging.getLogger(__name__)

APPLIES_TO_TOTAL = 'total'
APPLIES_TO_DEPOSIT = 'deposit'
APPLIES_TO_REMAINING = 'remaining'

MODEL_ADVANCED = 'advanced'
MODEL_SIMPLE = 'simple'
MODELS = (MODEL_ADVANCED, MODEL_SIMPLE)

# Anything at or above 1e16 is treated like a non-finite number.
MAX_NUMBER_EXPONENT = 15

# Quantizing needs more digits than the default 28 once deal values get large.
_MONEY_CONTEXT = Context(prec=60, rounding=ROUND_HALF_UP)

CURRENCY_SYMBOLS = {'EUR': '€', 'USD': '$', 'GBP': '£'}
FR_GROUP_SEPARATOR = '\u202f'

DEFAULT_LINES = [
    {
        "id": "partner-primary",
        "name": "Partner A",
        "appliesTo": APPLIES_TO_TOTAL,
        "percent": 65,
        "fixed": 0,
    },
    {
        "id": "partner-secondary",
        "name": "Partner B",
        "appliesTo": APPLIES_TO_TOTAL,
        "percent": 35,
        "fixed": 0,
    },
]


def to_number(value: Any) -> Decimal:
    """
    Coerce a loose JSON value to a finite Decimal.

    None, blank strings, NaN, infinities, out-of-range values and anything
    that is not a number or numeric string become 0. Booleans count as 1/0.
    Like JSON numbers, results are limited to double precision:
    "12.3456789012345678" reads as 12.345678901234567.
    """
    if isinstance(value, bool):
        return Decimal(int(value))

    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, int):
        number = Decimal(value)
    elif isinstance(value, float):
        number = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text or '_' in text:
            return Decimal('0')
        try:
            number = Decimal(text)
        except InvalidOperation:
            return Decimal('0')
    else:
        return Decimal('0')

    if not number.is_finite():
        return Decimal('0')
    if number and number.adjusted() > MAX_NUMBER_EXPONENT:
        logger.debug("Number out of range, coerced to 0: %r", value)
        return Decimal('0')
    # Snap to the nearest double so the JSON form reads back unchanged.
    return Decimal(repr(float(number)))


def to_flag(value: Any) -> bool:
    """Booleans pass through, "true" strings and non-zero numbers are True."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == 'true'
    if isinstance(value, (int, float, Decimal)):
        return to_number(value) != 0
    return False


def _to_text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    return ''


def _to_id(value: Any) -> str:
    """Truthy strings and numbers become the id; 2.0 is written as '2'."""
    if isinstance(value, bool):
        return ''
    if isinstance(value, float):
        if not value or not math.isfinite(value):
            return ''
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, int):
        return str(value) if value else ''
    return _to_text(value)


def _decode_json(value: Any, label: str) -> Any:
    """Decode a JSON string, passing non-string values through unchanged."""
    if not isinstance(value, str):
        return value

    text = value.strip()
    if not text:
        return None

    try:
        return json.loads(text)
    except (ValueError, RecursionError) as e:
        logger.warning("Failed to parse %s: %s", label, e)
        return None


@dataclass(frozen=True)
class CommissionLineConfig:
    """One recipient's share configuration, after sanitization."""

    id: str
    name: str
    applies_to: str = APPLIES_TO_TOTAL
    percent: Decimal = Decimal('0')
    fixed: Decimal = Decimal('0')
    substract_other_deposit: bool = False
    comment: Optional[str] = None

    @property
    def is_net_deposit_fee(self) -> bool:
        return self.applies_to == APPLIES_TO_DEPOSIT and self.substract_other_deposit

    @property
    def is_pure_deposit_fee(self) -> bool:
        return self.applies_to == APPLIES_TO_DEPOSIT and not self.substract_other_deposit

    def as_mapping(self) -> Dict[str, Any]:
        """Wire-format keys with the exact Decimal values."""
        return {
            "id": self.id,
            "name": self.name,
            "appliesTo": self.applies_to,
            "percent": self.percent,
            "fixed": self.fixed,
            "substractOtherDepostit": self.substract_other_deposit,
            "comment": self.comment,
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.as_mapping()
        data["percent"] = float(self.percent)
        data["fixed"] = float(self.fixed)
        return data


@dataclass
class CommissionLineResult:
    config: CommissionLineConfig
    base_amount: Decimal
    percent_amount: Decimal
    deposit_amount: Decimal
    remaining_amount: Decimal
    total: Decimal

    def to_dict(self) -> Dict[str, Any]:
        data = self.config.to_dict()
        data.update({
            "baseAmount": CommissionEngine.to_money(self.base_amount),
            "percentAmount": CommissionEngine.to_money(self.percent_amount),
            "depositAmount": CommissionEngine.to_money(self.deposit_amount),
            "remainingAmount": CommissionEngine.to_money(self.remaining_amount),
            "total": CommissionEngine.to_money(self.total),
        })
        return data


@dataclass
class AllocationSummary:
    """Aggregate result of splitting one deal value."""

    model: str
    deal_value: Decimal
    deposit_percent: Decimal
    deposit_amount: Decimal
    remaining_amount: Decimal
    lines: List[CommissionLineResult]
    deposit_commissions: Decimal
    total_disbursed: Decimal
    difference_to_deal_value: Decimal
    matches_deal_value: bool

    @property
    def commission_config(self) -> List[CommissionLineConfig]:
        return [line.config for line in self.lines]

    def to_dict(self) -> Dict[str, Any]:
        to_money = CommissionEngine.to_money
        return {
            "model": self.model,
            "dealValue": to_money(self.deal_value),
            "depositPercent": float(self.deposit_percent),
            "depositAmount": to_money(self.deposit_amount),
            "remainingAmount": to_money(self.remaining_amount),
            "depositCommissions": to_money(self.deposit_commissions),
            "totalDisbursed": to_money(self.total_disbursed),
            "differenceToDealValue": to_money(self.difference_to_deal_value),
            "matchesDealValue": self.matches_deal_value,
            "commissionConfig": [config.to_dict() for config in self.commission_config],
            "lines": [line.to_dict() for line in self.lines],
        }


@dataclass(frozen=True)
class StoredCommissionConfig:
    """
    Snapshot of the commission custom field stored on a deal.
    Two snapshots compare equal when their sanitized content is the same.
    """

    lines: Tuple[CommissionLineConfig, ...] = ()
    deposit_percent: Decimal = Decimal('0')
    deal_value: Optional[Decimal] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "commissionConfig": [line.to_dict() for line in self.lines],
            "depositPercent": float(self.deposit_percent),
            "dealValue": (CommissionEngine.to_money(self.deal_value)
                          if self.deal_value is not None else None),
        }


class CommissionEngine:
    """
    Splits a deal value between commission lines according to their
    percentages, fixed amounts and bases.
    All calculations are deterministic and never raise on malformed data.
    """

    def __init__(self, model: str = MODEL_ADVANCED):
        if model not in MODELS:
            raise ValueError(
                f"Invalid model: {model}. Must be 'advanced' or 'simple'")

        self.model = model
        self.MONEY_QUANTUM = Decimal('0.01')
        self.MATCH_TOLERANCE = Decimal('0.01')
        self.MAX_DEPOSIT_PERCENT = Decimal('100')
        self.HUNDRED = Decimal('100')

    @staticmethod
    def to_money(value: Decimal) -> float:
        """Convert Decimal to float with exactly 2 decimal places"""
        return round(float(value), 2)

    def quantize(self, value: Decimal) -> Decimal:
        """Round half away from zero to currency precision."""
        return value.quantize(self.MONEY_QUANTUM, rounding=ROUND_HALF_UP,
                              context=_MONEY_CONTEXT)

    def sanitize_config(self, raw_lines: Any) -> List[CommissionLineConfig]:
        """
        Normalize a raw line configuration list.

        Non-mapping entries are dropped. Defaults for id and name are
        numbered by the entry's original 1-based position, so dropped
        entries leave gaps in the numbering.
        """
        if not isinstance(raw_lines, (list, tuple)):
            if raw_lines is not None:
                logger.debug("Commission config is not a list: %r", type(raw_lines))
            return []

        lines = []
        for index, entry in enumerate(raw_lines, start=1):
            if isinstance(entry, CommissionLineConfig):
                entry = entry.as_mapping()
            if not isinstance(entry, Mapping):
                logger.debug("Dropping commission line %d: %r", index, entry)
                continue

            line_id = _to_id(entry.get('id'))

            applies_to = _to_text(entry.get('appliesTo'))
            if applies_to not in (APPLIES_TO_DEPOSIT, APPLIES_TO_REMAINING):
                applies_to = APPLIES_TO_TOTAL

            lines.append(CommissionLineConfig(
                id=line_id or f"line-{index}",
                name=_to_text(entry.get('name')) or f"Line {index}",
                applies_to=applies_to,
                percent=to_number(entry.get('percent')),
                fixed=to_number(entry.get('fixed')),
                substract_other_deposit=to_flag(entry.get('substractOtherDepostit')),
                comment=_to_text(entry.get('comment')) or None,
            ))

        return lines

    def clamp_deposit_percent(self, deposit_percent_input: Any) -> Decimal:
        deposit_percent = to_number(deposit_percent_input)
        return min(max(deposit_percent, Decimal('0')), self.MAX_DEPOSIT_PERCENT)

    def split_deposit(self, deal_value_input: Any,
                      deposit_percent_input: Any) -> Tuple[Decimal, Decimal, Decimal, Decimal]:
        """
        STEP 2: Split the deal value into deposit and remaining portions.
        Returns: (deal_value, deposit_percent, deposit_amount, remaining_amount)
        """
        deal_value = self.quantize(to_number(deal_value_input))
        deposit_percent = self.clamp_deposit_percent(deposit_percent_input)

        deposit_amount = self.quantize(deal_value * deposit_percent / self.HUNDRED)
        remaining_amount = self.quantize(deal_value - deposit_amount)

        return deal_value, deposit_percent, deposit_amount, remaining_amount

    def compute_summary(self, deal_value_input: Any, deposit_percent_input: Any,
                        raw_lines: Any, model: Optional[str] = None) -> AllocationSummary:
        """
        Main processing function - executes all steps in order.

        Malformed input degrades to defaults (empty list, zero amounts,
        'total' scope, unflagged). Whether the lines add up to the deal
        value is reported in matches_deal_value, never enforced.
        """
        model = model or self.model
        if model not in MODELS:
            raise ValueError(
                f"Invalid model: {model}. Must be 'advanced' or 'simple'")

        # STEP 1: Sanitize line configuration
        lines = self.sanitize_config(raw_lines)

        # STEP 2: Deposit / remaining split
        deal_value, deposit_percent, deposit_amount, remaining_amount = self.split_deposit(
            deal_value_input, deposit_percent_input)

        # STEP 3: Resolve bases and calculate every line
        if model == MODEL_SIMPLE:
            results, deposit_commissions = self.calculate_simple_lines(
                lines, deal_value, deposit_amount, remaining_amount)
        else:
            results, deposit_commissions = self.calculate_advanced_lines(
                lines, deal_value, deposit_amount, remaining_amount)

        # STEP 4: Aggregate validation
        total_disbursed = self.quantize(
            sum((line.total for line in results), Decimal('0')))
        difference = self.quantize(deal_value - total_disbursed)
        matches_deal_value = abs(difference) < self.MATCH_TOLERANCE

        logger.debug(
            "Commission summary: model=%s deal_value=%s lines=%d disbursed=%s matches=%s",
            model, deal_value, len(results), total_disbursed, matches_deal_value)

        return AllocationSummary(
            model=model,
            deal_value=deal_value,
            deposit_percent=deposit_percent,
            deposit_amount=deposit_amount,
            remaining_amount=remaining_amount,
            lines=results,
            deposit_commissions=self.quantize(deposit_commissions),
            total_disbursed=total_disbursed,
            difference_to_deal_value=difference,
            matches_deal_value=matches_deal_value,
        )

    def calculate_advanced_lines(
            self, lines: List[CommissionLineConfig], deal_value: Decimal,
            deposit_amount: Decimal,
            remaining_amount: Decimal) -> Tuple[List[CommissionLineResult], Decimal]:
        """
        STEP 3 (advanced): Cascading deposit fees.

        Pure deposit fees are taken from the deposit first. Net deposit fees
        (substract flag set) apply to what the pure fees leave. Total lines
        apply to the deal value minus every fixed amount and every deposit fee.
        Remaining lines apply to the remaining amount.

        Pass sums stay unrounded; each line is rounded when it is built.
        Returns: (line_results, total_deposit_commissions)
        """
        # PASS 1: Fixed amounts and pure deposit fees
        total_fixed_amounts = sum((line.fixed for line in lines), Decimal('0'))
        pure_deposit_commissions = Decimal('0')

        for line in lines:
            if line.is_pure_deposit_fee:
                pure_deposit_commissions += deposit_amount * line.percent / self.HUNDRED

        adjusted_deposit_for_net = deposit_amount - pure_deposit_commissions

        # PASS 2: Net deposit fees, on the deposit left after pure fees
        net_deposit_commissions = Decimal('0')

        for line in lines:
            if line.is_net_deposit_fee:
                net_deposit_commissions += adjusted_deposit_for_net * line.percent / self.HUNDRED

        total_all_deposit_commissions = pure_deposit_commissions + net_deposit_commissions

        # Bases for total lines, net of fixed amounts and ALL deposit fees
        adjusted_base_for_total = deal_value - total_fixed_amounts - total_all_deposit_commissions
        adjusted_deposit_for_total = deposit_amount - total_all_deposit_commissions
        adjusted_remaining_for_total = adjusted_base_for_total - adjusted_deposit_for_total

        # PASS 3: Per-line results
        results = []
        for line in lines:
            if line.applies_to == APPLIES_TO_DEPOSIT:
                if line.substract_other_deposit:
                    base_amount = adjusted_deposit_for_net
                else:
                    base_amount = deposit_amount
                percent_amount = base_amount * line.percent / self.HUNDRED
                on_deposit = percent_amount
                on_remaining = Decimal('0')
            elif line.applies_to == APPLIES_TO_REMAINING:
                base_amount = remaining_amount
                percent_amount = base_amount * line.percent / self.HUNDRED
                on_deposit = Decimal('0')
                on_remaining = percent_amount
            else:
                base_amount = adjusted_base_for_total
                percent_amount = base_amount * line.percent / self.HUNDRED
                # Display split only, need not add up to percent_amount
                on_deposit = adjusted_deposit_for_total * line.percent / self.HUNDRED
                on_remaining = adjusted_remaining_for_total * line.percent / self.HUNDRED

            results.append(self.build_line_result(
                line, base_amount, percent_amount, on_deposit, on_remaining))

        return results, total_all_deposit_commissions

    def calculate_simple_lines(
            self, lines: List[CommissionLineConfig], deal_value: Decimal,
            deposit_amount: Decimal,
            remaining_amount: Decimal) -> Tuple[List[CommissionLineResult], Decimal]:
        """
        STEP 3 (simple): Each line picks its base independently.
        The substract flag has no effect here.
        """
        results = []
        deposit_commissions = Decimal('0')

        for line in lines:
            if line.applies_to == APPLIES_TO_DEPOSIT:
                base_amount = deposit_amount
            elif line.applies_to == APPLIES_TO_REMAINING:
                base_amount = remaining_amount
            else:
                base_amount = deal_value

            percent_amount = base_amount * line.percent / self.HUNDRED

            if line.applies_to == APPLIES_TO_DEPOSIT:
                deposit_commissions += percent_amount
                on_deposit, on_remaining = percent_amount, Decimal('0')
            elif line.applies_to == APPLIES_TO_REMAINING:
                on_deposit, on_remaining = Decimal('0'), percent_amount
            else:
                on_deposit = deposit_amount * line.percent / self.HUNDRED
                on_remaining = remaining_amount * line.percent / self.HUNDRED

            results.append(self.build_line_result(
                line, base_amount, percent_amount, on_deposit, on_remaining))

        return results, deposit_commissions

    def build_line_result(self, line: CommissionLineConfig, base_amount: Decimal,
                          percent_amount: Decimal, on_deposit: Decimal,
                          on_remaining: Decimal) -> CommissionLineResult:
        """Round one line at its boundary: total = percent amount + fixed."""
        percent_amount = self.quantize(percent_amount)

        return CommissionLineResult(
            config=line,
            base_amount=self.quantize(base_amount),
            percent_amount=percent_amount,
            deposit_amount=self.quantize(on_deposit),
            remaining_amount=self.quantize(on_remaining),
            total=self.quantize(percent_amount + line.fixed),
        )


# ============================================================================
# STORED CONFIGURATION
# ============================================================================


def sanitize_config(raw_lines: Any) -> List[CommissionLineConfig]:
    return CommissionEngine().sanitize_config(raw_lines)


def ensure_config(raw_lines: Any) -> List[CommissionLineConfig]:
    """
    Sanitized lines, or the default 65% / 35% partner split when nothing
    usable is configured.
    """
    engine = CommissionEngine()
    cleaned = engine.sanitize_config(raw_lines)
    return cleaned or engine.sanitize_config(DEFAULT_LINES)


def parse_stored_config(value: Any) -> StoredCommissionConfig:
    """
    Parse the commission custom field of a deal.

    Accepted shapes, either decoded or as a JSON string:
    - combined object: {"commissionConfig": [...], "depositPercent": 20, "dealValue": 1000}
      (commissionConfig may itself be a JSON string)
    - legacy array of line configs, with no deposit percent or deal value
    Anything else yields an empty config.
    """
    engine = CommissionEngine()
    payload = _decode_json(value, 'commission config')

    if isinstance(payload, Mapping):
        raw_lines = _decode_json(payload.get('commissionConfig'), 'commissionConfig')
        raw_deal_value = payload.get('dealValue')
        deal_value = None
        if raw_deal_value is not None and raw_deal_value != '':
            deal_value = engine.quantize(to_number(raw_deal_value))

        return StoredCommissionConfig(
            lines=tuple(engine.sanitize_config(raw_lines)),
            deposit_percent=engine.clamp_deposit_percent(payload.get('depositPercent')),
            deal_value=deal_value,
        )

    if isinstance(payload, (list, tuple)):
        return StoredCommissionConfig(lines=tuple(engine.sanitize_config(payload)))

    if payload is not None:
        logger.warning("Unsupported commission config shape: %r", type(payload))
    return StoredCommissionConfig()


def serialize_config(lines: Any, deposit_percent: Any,
                     deal_value: Any = None) -> str:
    """Serialize a configuration in the combined custom-field format."""
    engine = CommissionEngine()
    stored = StoredCommissionConfig(
        lines=tuple(engine.sanitize_config(lines)),
        deposit_percent=engine.clamp_deposit_percent(deposit_percent),
        deal_value=(engine.quantize(to_number(deal_value))
                    if deal_value is not None else None),
    )
    return json.dumps(stored.to_dict())


def has_unsaved_changes(persisted: Any, edited: Any) -> bool:
    """
    Compare the last persisted configuration with the edited one.
    The deal value is not part of the comparison, it is re-fetched from the CRM.
    """
    if not isinstance(persisted, StoredCommissionConfig):
        persisted = parse_stored_config(persisted)
    if not isinstance(edited, StoredCommissionConfig):
        edited = parse_stored_config(edited)

    return (persisted.lines != edited.lines
            or persisted.deposit_percent != edited.deposit_percent)


# ============================================================================
# SUB-DEALS
# ============================================================================


def parse_sub_deal_ids(value: Any) -> List[str]:
    """Parse the sub-deal id field: a JSON array (or list) of ids."""
    if not value:
        return []

    parsed = _decode_json(value, 'sub_deal_ids')
    if not isinstance(parsed, (list, tuple)):
        return []

    ids = []
    for item in parsed:
        if item is None or isinstance(item, (dict, list)):
            continue
        text = str(item).strip()
        if text:
            ids.append(text)
    return ids


def merge_with_sub_deals(main_summary: AllocationSummary,
                         sub_deals: Optional[Iterable[Any]],
                         model: Optional[str] = None) -> Dict[str, Any]:
    """
    Group the main deal's lines with the lines of its sub-deals by line name.

    Each sub-deal is a mapping with id, title, value, depositPercent and
    commissionConfig. Sub-deals without commission lines still count towards
    the deposit / remaining sub-totals.
    """
    engine = CommissionEngine(model or main_summary.model)
    groups: Dict[str, Dict[str, Any]] = {}

    def add_line(line: CommissionLineResult, source: str,
                 deal_title: Optional[str], deal_id: Optional[str]) -> None:
        name = line.config.name
        if name not in groups:
            groups[name] = {"name": name, "items": [], "total": Decimal('0')}
        item = line.to_dict()
        item.update({"source": source, "dealTitle": deal_title, "dealId": deal_id})
        groups[name]["items"].append(item)
        groups[name]["total"] += line.total

    for line in main_summary.lines:
        add_line(line, 'main', None, None)

    sub_deposit_total = Decimal('0')
    sub_remaining_total = Decimal('0')

    for sub_deal in sub_deals or []:
        if not isinstance(sub_deal, Mapping):
            logger.debug("Skipping sub-deal that is not a mapping: %r", sub_deal)
            continue

        stored = parse_stored_config(sub_deal.get('commissionConfig'))
        deposit_percent = sub_deal.get('depositPercent', stored.deposit_percent)

        _, _, deposit_amount, remaining_amount = engine.split_deposit(
            sub_deal.get('value'), deposit_percent)
        sub_deposit_total += deposit_amount
        sub_remaining_total += remaining_amount

        if not stored.lines:
            continue

        sub_summary = engine.compute_summary(
            sub_deal.get('value'), deposit_percent, list(stored.lines))
        deal_id = sub_deal.get('id')
        for line in sub_summary.lines:
            add_line(line, 'subdeal', sub_deal.get('title'),
                     str(deal_id) if deal_id is not None else None)

    return {
        "groups": [
            {
                "name": group["name"],
                "items": group["items"],
                "total": engine.to_money(engine.quantize(group["total"])),
            }
            for group in groups.values()
        ],
        "subDealsDepositTotal": engine.to_money(engine.quantize(sub_deposit_total)),
        "subDealsRemainingTotal": engine.to_money(engine.quantize(sub_remaining_total)),
    }


def format_currency(value: Any, currency: Optional[str] = 'EUR') -> str:
    """
    Format an amount the way the deal widget shows it: fr-FR grouping
    (narrow no-break space, decimal comma) behind the currency symbol,
    e.g. '€1 234,50'. Codes without a known symbol go after the amount.
    """
    engine = CommissionEngine()
    amount = engine.quantize(to_number(value))
    text = f"{amount:,.2f}".replace(',', FR_GROUP_SEPARATOR).replace('.', ',')

    symbol = CURRENCY_SYMBOLS.get(currency or '')
    if symbol:
        return f"{symbol}{text}"
    return f"{text} {currency or ''}".strip()


# ============================================================================
# API FUNCTIONS
# ============================================================================


def compute_summary_from_dict(input_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Compute a summary from a Python dict and return a Python dict.
    Keys: dealValue, depositPercent, commissionConfig, optional model.
    """
    engine = CommissionEngine(input_data.get('model') or MODEL_ADVANCED)
    raw_lines = _decode_json(input_data.get('commissionConfig'), 'commissionConfig')
    summary = engine.compute_summary(
        input_data.get('dealValue'), input_data.get('depositPercent'), raw_lines)
    return summary.to_dict()


def compute_summary_from_json(json_input: str) -> str:
    """
    Compute a summary from JSON string input and return JSON string output.
    This is the function that will be called by the panel backend.
    """
    try:
        # Parse input JSON
        input_data = json.loads(json_input)
        if not isinstance(input_data, dict):
            raise ValueError("Input must be a JSON object")

        result = compute_summary_from_dict(input_data)

        return json.dumps(result, indent=2)

    except ValueError as e:
        # Return validation error
        error_response = {"error": str(e), "status": "validation_failed"}
        return json.dumps(error_response, indent=2)

    except Exception as e:
        logger.exception("Commission summary failed")
        error_response = {"error": str(e), "status": "failed"}
        return json.dumps(error_response, indent=2)
