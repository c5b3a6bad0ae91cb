"""
Lead submission gateway.

Builds the quotation summary sent to the sales inbox and hands it to the
delivery channel without making the caller wait. One submission per key
(session) may be in flight; the guard clears itself after a fixed timeout
even if the channel never answers.
"""
import time
import logging
from typing import Any, Callable, Dict, Optional, Tuple

from app.config import DEFAULT_LEAD_RESUBMIT_TIMEOUT_S
from app.models.catalog_schema import ProductConfig
from app.services.delivery_channel import HttpLeadDeliveryChannel, LeadDeliveryError
from app.services.measurement_engine import Measurement, parse_unit
from app.services.pricing_engine import OptionSelection, PricingResult, is_l_corner
from app.services.quote_policy import LeadRecord, format_inr

logger = logging.getLogger("quote-engine.leads")

_OPTION_LABELS: Dict[str, str] = {
    "glass": "Glass Type",
    "coating": "Coating",
    "lock": "Lock",
    "mesh": "Mesh",
    "grill": "Grill",
    "color": "Colour",
    "profile": "Profile",
    "panel_config": "Panel Configuration",
    "track": "Track",
    "door_type": "Door Type",
    "door_count": "Doors",
    "shower_type": "Layout",
    "hardware_finish": "Hardware Finish",
    "glass_type": "Glass",
    "lock_option": "Lock",
    "project_type": "Project Type",
    "thickness": "Thickness",
    "color_type": "Colour Type",
    "brand": "Brand",
    "installation_type": "Installation",
}


def _option_value(value: Any) -> str:
    if value is True:
        return "Yes"
    return str(value)


def build_quote_summary(
    product: ProductConfig,
    measurement: Measurement,
    selection: OptionSelection,
    result: PricingResult,
    lead: LeadRecord,
) -> Tuple[str, str]:
    """Return (subject, body) for the sales inbox and the WhatsApp message."""
    title = product.name or product.id
    subject = f"New Quote Request - {title}"

    unit = parse_unit(measurement.unit).value
    if measurement.right_width not in (None, "") and is_l_corner(product, selection):
        size = f"{measurement.width} + {measurement.right_width} × {measurement.height} {unit}"
    else:
        size = f"{measurement.width} × {measurement.height} {unit}"

    lines = [
        f"New Quote Request - {title}",
        "",
        "User Details:",
        f"- Name: {lead.name}",
        f"- City: {lead.city}",
        f"- Mobile: {lead.mobile}",
    ]
    if lead.email:
        lines.append(f"- Email: {lead.email}")

    lines += [
        "",
        f"Product: {title}",
        f"Size: {size}",
        f"Area: {result.area_used:.2f} sq.ft",
        f"Quantity: {result.number_of_units}",
    ]

    options = selection.describe()
    if options:
        lines += ["", "Selected Options:"]
        lines += [f"- {_OPTION_LABELS.get(k, k)}: {_option_value(v)}" for k, v in options.items()]

    lines += ["", "Calculated Amount:"]
    if result.wastage is not None and result.wastage.total > 0:
        lines.append(f"- Cutting Wastage: {format_inr(result.wastage.total)}")
    lines += [
        f"- Per Unit: {format_inr(result.per_unit_cost)}",
        f"- Total Cost: {format_inr(result.total_cost)}",
        "",
        "---",
        "Generated from Live Price Calculator",
    ]
    return subject, "\n".join(lines)


class LeadSubmissionGateway:
    """
    Fire-and-forget lead hand-off with an in-flight guard.

    ``schedule`` is any callable with the ``BackgroundTasks.add_task``
    signature; without one, delivery is awaited directly. Delivery failures
    are logged at ERROR for the operator and never reach the caller.
    """

    def __init__(
        self,
        channel: HttpLeadDeliveryChannel,
        resubmit_timeout_s: float = DEFAULT_LEAD_RESUBMIT_TIMEOUT_S,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.channel = channel
        self.resubmit_timeout_s = resubmit_timeout_s
        self._clock = clock
        self._in_flight: Dict[str, float] = {}     # key -> start time

    def is_in_flight(self, key: str = "default") -> bool:
        started = self._in_flight.get(key)
        if started is None:
            return False
        if self._clock() - started >= self.resubmit_timeout_s:
            # Channel hung; let the next submission through
            del self._in_flight[key]
            return False
        return True

    async def submit_lead(
        self,
        subject: str,
        body_text: str,
        lead: LeadRecord,
        key: str = "default",
        schedule: Optional[Callable[..., Any]] = None,
    ) -> bool:
        """
        Start delivering a lead. Returns False, without delivering, when a
        submission for the same key is still in flight.
        """
        if self.is_in_flight(key):
            logger.info("Lead submission already in flight; ignoring duplicate", extra={"session_id": key})
            return False

        started = self._clock()
        self._in_flight[key] = started
        if schedule is not None:
            schedule(self._deliver, subject, body_text, lead, key, started)
        else:
            await self._deliver(subject, body_text, lead, key, started)
        return True

    async def _deliver(self, subject: str, body_text: str, lead: LeadRecord, key: str, started: float) -> None:
        try:
            transport = await self.channel.deliver(subject, body_text, lead)
            logger.info(f"Lead for {lead.name} delivered via {transport}", extra={"session_id": key})
        except LeadDeliveryError as e:
            logger.error(f"Lead delivery failed for {lead.name} ({lead.mobile}): {e}", extra={"session_id": key})
        except Exception as e:
            logger.error(
                f"Lead delivery failed for {lead.name} ({lead.mobile}): unexpected {type(e).__name__}: {e}",
                exc_info=True, extra={"session_id": key},
            )
        finally:
            # A newer submission may own the slot after a timeout
            if self._in_flight.get(key) == started:
                del self._in_flight[key]
