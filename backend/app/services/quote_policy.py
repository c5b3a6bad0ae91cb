"""
Quote presentation policy.

A session starts in range mode: only cost × (1 ± variance) is shown. Once a
lead passes local validation the session moves to exact mode for good. Lead
delivery happens afterwards and its outcome never moves the session back.
"""
import math
import re
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger("quote-engine.quotes")

_MIN_MOBILE_DIGITS = 10
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class LeadValidationError(ValueError):
    """Lead form failed local validation; the session stays in range mode."""


class DisplayMode(str, Enum):
    RANGE = "range"
    EXACT = "exact"


@dataclass
class DisplayValue:
    mode: DisplayMode = DisplayMode.RANGE
    low: float = 0.0
    high: float = 0.0
    exact: Optional[float] = None       # never populated in range mode


@dataclass
class LeadRecord:
    name: str
    city: str
    mobile: str
    email: str = ""


def presented_amount(cost: float, lead_captured: bool, variance: float) -> DisplayValue:
    """What the customer may see for *cost*: the true figure only after a lead is captured."""
    if lead_captured:
        return DisplayValue(mode=DisplayMode.EXACT, low=cost, high=cost, exact=cost)
    return DisplayValue(mode=DisplayMode.RANGE, low=cost * (1 - variance), high=cost * (1 + variance))


def validate_lead(name: Any, city: Any, mobile: Any, email: Any = "") -> LeadRecord:
    """
    Check the lead form the way the quote widget does.

    Name, city and mobile are required; mobile needs at least ten digits.
    Email is optional but must look like an address when given.
    """
    name = str(name or "").strip()
    city = str(city or "").strip()
    mobile = str(mobile or "").strip()
    email = str(email or "").strip()

    if not name or not city or not mobile:
        raise LeadValidationError("Please fill in all required fields")
    if sum(ch.isdigit() for ch in mobile) < _MIN_MOBILE_DIGITS:
        raise LeadValidationError("Please enter a valid mobile number")
    if email and not _EMAIL_RE.match(email):
        raise LeadValidationError("Please enter a valid email address")
    return LeadRecord(name=name, city=city, mobile=mobile, email=email)


def _group_indian(digits: str) -> str:
    # Last three digits, then pairs: 12,34,56,789
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_inr(amount: float) -> str:
    """Rupees rounded half-up to a whole number with Indian digit grouping: ₹1,23,456."""
    try:
        value = float(amount)
    except (TypeError, ValueError):
        value = 0.0
    if not math.isfinite(value):
        value = 0.0
    rounded = int(math.floor(value + 0.5))
    sign = "-" if rounded < 0 else ""
    return f"{sign}₹{_group_indian(str(abs(rounded)))}"


@dataclass
class QuoteSession:
    """
    Per-visitor quote context.

    Holds the captured lead (if any) and the last pricing result per product
    id so a lead submission can summarise what the visitor was looking at.
    """
    session_id: str
    lead: Optional[LeadRecord] = None
    last_results: Dict[str, Any] = field(default_factory=dict)

    @property
    def mode(self) -> DisplayMode:
        return DisplayMode.EXACT if self.lead is not None else DisplayMode.RANGE

    @property
    def lead_captured(self) -> bool:
        return self.lead is not None

    def capture_lead(self, lead: LeadRecord) -> None:
        """Switch to exact mode. Idempotent; a later lead replaces the stored record."""
        if self.lead is None:
            logger.info("Lead captured; exact pricing unlocked", extra={"session_id": self.session_id})
        self.lead = lead

    def presented_amount(self, cost: float, variance: float) -> DisplayValue:
        return presented_amount(cost, self.lead_captured, variance)

    def remember(self, product_id: str, result: Any) -> None:
        self.last_results[product_id] = result

    def last_result(self, product_id: str) -> Optional[Any]:
        return self.last_results.get(product_id)
