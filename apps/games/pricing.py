"""
Bet pricing and expansion.

Turns raw wager input (grid cells, crossing digits, pasted number lists with
optional Palti) into a flat list of elementary bets, each carrying the payout
multiplier resolved once for the batch. Nothing here touches the database;
rates are passed in as a ``PayoutRates`` value.
"""
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional, Tuple

from core.exceptions import InvalidBetException

JODI = 'jodi'
HARUF_ANDAR = 'haruf_andar'
HARUF_BAHAR = 'haruf_bahar'
BET_TYPES = (JODI, HARUF_ANDAR, HARUF_BAHAR)

BET_TYPE_ALIASES = {
    'jodi': JODI,
    'haruf_andar': HARUF_ANDAR,
    'andar': HARUF_ANDAR,
    'haruf_bahar': HARUF_BAHAR,
    'bahar': HARUF_BAHAR,
}

JODI_RE = re.compile(r'[0-9]{2}')
HARUF_RE = re.compile(r'[0-9]')
CENT = Decimal('0.01')
# Bet.payout_multiplier stores 4 places, 10 digits
MULTIPLIER_STEP = Decimal('0.0001')
MAX_MULTIPLIER = Decimal('999999.9999')


@dataclass(frozen=True)
class BetSpec:
    bet_type: str
    bet_number: str
    bet_amount: Decimal
    payout_multiplier: Decimal


def is_valid_rate(value) -> bool:
    """A rate is stored exactly as given, so it must fit the multiplier column"""
    return (
        isinstance(value, Decimal)
        and value.is_finite()
        and 0 < value <= MAX_MULTIPLIER
        and value == value.quantize(MULTIPLIER_STEP)
    )


@dataclass(frozen=True)
class PayoutRates:
    """Payout multipliers per bet type; andar/bahar fall back to the shared haruf rate"""
    jodi: Decimal
    haruf: Decimal
    haruf_andar: Optional[Decimal] = None
    haruf_bahar: Optional[Decimal] = None

    def __post_init__(self):
        for name in ('jodi', 'haruf', 'haruf_andar', 'haruf_bahar'):
            value = getattr(self, name)
            if value is None and name in ('haruf_andar', 'haruf_bahar'):
                continue
            if not is_valid_rate(value):
                raise ValueError(f"Invalid {name} rate: {value!r}")

    def multiplier_for(self, bet_type: str) -> Decimal:
        if bet_type == JODI:
            return self.jodi
        if bet_type == HARUF_ANDAR:
            return self.haruf_andar if self.haruf_andar is not None else self.haruf
        if bet_type == HARUF_BAHAR:
            return self.haruf_bahar if self.haruf_bahar is not None else self.haruf
        raise InvalidBetException(f"Unknown bet type: {bet_type}")

    @classmethod
    def from_mapping(cls, values: dict, default_jodi: Decimal, default_haruf: Decimal) -> 'PayoutRates':
        """Build from the raw settings store (decimal strings keyed rate_*)"""
        def rate(key, default=None):
            raw = values.get(key)
            if raw in (None, ''):
                return default
            try:
                parsed = Decimal(str(raw))
            except InvalidOperation:
                return default
            return parsed if is_valid_rate(parsed) else default

        return cls(
            jodi=rate('rate_jodi', default_jodi),
            haruf=rate('rate_haruf', default_haruf),
            haruf_andar=rate('rate_haruf_andar'),
            haruf_bahar=rate('rate_haruf_bahar'),
        )


def normalize_bet_type(value) -> str:
    bet_type = BET_TYPE_ALIASES.get(str(value or '').strip().lower())
    if bet_type is None:
        raise InvalidBetException(f"Unknown bet type: {value}")
    return bet_type


def parse_amount(value) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidBetException(f"Invalid bet amount: {value!r}")
    if not amount.is_finite() or amount <= 0:
        raise InvalidBetException("Bet amount must be greater than zero")
    if amount != amount.quantize(CENT):
        raise InvalidBetException("Bet amount cannot have more than 2 decimal places")
    return amount.quantize(CENT)


def is_valid_jodi_number(number) -> bool:
    return isinstance(number, str) and JODI_RE.fullmatch(number) is not None and 0 <= int(number) <= 99


def is_valid_haruf_number(number) -> bool:
    return isinstance(number, str) and HARUF_RE.fullmatch(number) is not None and 0 <= int(number) <= 9


def is_valid_number(bet_type: str, number) -> bool:
    if bet_type == JODI:
        return is_valid_jodi_number(number)
    return is_valid_haruf_number(number)


def generate_crossing_bets(digits: str, amount) -> List[Tuple[str, Decimal]]:
    """
    Every ordered pair of the unique input digits, doubles included.

    "123" gives 9 numbers (11, 12, 13, 21, ...); repeated or non-digit
    characters do not add combinations.
    """
    amount = parse_amount(amount)
    unique_digits = list(dict.fromkeys(ch for ch in str(digits) if HARUF_RE.fullmatch(ch)))
    return [(first + second, amount) for first in unique_digits for second in unique_digits]


def apply_palti(number: str, amount) -> List[Tuple[str, Decimal]]:
    """The number plus its reversal, the reversal only when it differs"""
    amount = parse_amount(amount)
    bets = [(number, amount)]
    reverse = number[::-1]
    if reverse != number:
        bets.append((reverse, amount))
    return bets


def calculate_total_amount(bets: Iterable[BetSpec]) -> Decimal:
    return sum((bet.bet_amount for bet in bets), Decimal('0.00'))


def _expand_cells(cells, rates: PayoutRates) -> List[BetSpec]:
    # Grid input is structured, so a bad cell refuses the whole batch
    specs = []
    for cell in cells:
        if not isinstance(cell, dict):
            raise InvalidBetException("Each bet must be an object with type, number and amount")
        bet_type = normalize_bet_type(cell.get('type'))
        number = str(cell.get('number', '')).strip()
        if not is_valid_number(bet_type, number):
            raise InvalidBetException(f"Invalid {bet_type} number: {number!r}")
        specs.append(BetSpec(bet_type, number, parse_amount(cell.get('amount')), rates.multiplier_for(bet_type)))
    return specs


def _expand_numbers(numbers, bet_type, amount, palti, rates: PayoutRates) -> List[BetSpec]:
    # Pasted free text: invalid candidates are skipped, not fatal
    bet_type = normalize_bet_type(bet_type or JODI)
    amount = parse_amount(amount)
    multiplier = rates.multiplier_for(bet_type)
    specs = []
    for raw in numbers:
        number = str(raw).strip()
        if not is_valid_number(bet_type, number):
            continue
        if palti and bet_type == JODI:
            specs.extend(BetSpec(bet_type, n, a, multiplier) for n, a in apply_palti(number, amount))
        else:
            specs.append(BetSpec(bet_type, number, amount, multiplier))
    return specs


def expand_bets(rates: PayoutRates, cells=None, crossing_digits=None, numbers=None,
                bet_type=None, amount=None, palti=False) -> List[BetSpec]:
    """
    Expand exactly one input mode into elementary bets.

    Modes, checked in this order: grid ``cells`` ({type, number, amount}
    dicts), ``crossing_digits`` with ``amount``, or ``numbers`` with
    ``bet_type``, ``amount`` and optional ``palti``.
    """
    if cells is not None:
        specs = _expand_cells(cells, rates)
    elif crossing_digits:
        multiplier = rates.multiplier_for(JODI)
        specs = [BetSpec(JODI, n, a, multiplier) for n, a in generate_crossing_bets(crossing_digits, amount)]
    elif numbers is not None:
        specs = _expand_numbers(numbers, bet_type, amount, palti, rates)
    else:
        raise InvalidBetException("Invalid bet format")

    if not specs:
        raise InvalidBetException("No valid bets identified")
    return specs
