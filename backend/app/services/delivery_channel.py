"""
Lead delivery channel.

Primary: email relay worker (form POST, access key stays server-side)
Fallback: Web3Forms JSON API
Also builds the WhatsApp click-to-chat link carrying the same quotation.
"""
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from app.config import (
    DEFAULT_DELIVERY_TIMEOUT_S,
    DEFAULT_LEAD_RECIPIENT_EMAIL,
    WEB3FORMS_SUBMIT_URL,
    WHATSAPP_BASE_URL,
    Settings,
)
from app.services.quote_policy import LeadRecord

logger = logging.getLogger("quote-engine.leads")

_DEFAULT_FROM_NAME = "Website Quote Calculator"
_DEFAULT_FROM_EMAIL = "noreply@example.com"


class LeadDeliveryError(RuntimeError):
    """Every configured transport failed (or none is configured)."""


def whatsapp_link(number: str, message: str) -> str:
    """Click-to-chat URL with the message pre-filled; empty when no number is configured."""
    digits = "".join(ch for ch in (number or "") if ch.isdigit())
    if not digits:
        return ""
    return f"{WHATSAPP_BASE_URL}/{digits}?text={quote(message, safe='')}"


def _succeeded(response: httpx.Response) -> bool:
    try:
        body = response.json()
    except ValueError:
        return False
    return isinstance(body, dict) and bool(body.get("success"))


class HttpLeadDeliveryChannel:
    """
    Hands a lead to the email transports over HTTP.

    A transport counts as delivered only when it answers with a JSON body
    whose ``success`` is truthy.
    """

    def __init__(
        self,
        worker_url: str = "",
        web3forms_access_key: str = "",
        recipient_email: str = DEFAULT_LEAD_RECIPIENT_EMAIL,
        whatsapp_number: str = "",
        timeout_s: float = DEFAULT_DELIVERY_TIMEOUT_S,
        web3forms_url: str = WEB3FORMS_SUBMIT_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.worker_url = worker_url
        self.web3forms_access_key = web3forms_access_key
        self.recipient_email = recipient_email
        self.whatsapp_number = whatsapp_number
        self.timeout_s = timeout_s
        self.web3forms_url = web3forms_url
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "HttpLeadDeliveryChannel":
        return cls(
            worker_url=settings.email_worker_url,
            web3forms_access_key=settings.web3forms_access_key,
            recipient_email=settings.lead_recipient_email,
            whatsapp_number=settings.whatsapp_business_number,
            timeout_s=settings.delivery_timeout_s,
            transport=transport,
        )

    def whatsapp_link(self, message: str) -> str:
        return whatsapp_link(self.whatsapp_number, message)

    def _worker_form(self, subject: str, message: str, lead: LeadRecord) -> Dict[str, Any]:
        form = {
            "_subject": subject,
            "message": message,
            "Name": lead.name,
            "City": lead.city,
            "Mobile": lead.mobile,
        }
        if lead.email:
            form["Email"] = lead.email
        return form

    def _web3forms_payload(self, subject: str, message: str, lead: LeadRecord) -> Dict[str, Any]:
        return {
            "access_key": self.web3forms_access_key,
            "subject": subject,
            "from_name": lead.name or _DEFAULT_FROM_NAME,
            "from_email": lead.email or _DEFAULT_FROM_EMAIL,
            "to_email": self.recipient_email,
            "message": message,
        }

    async def deliver(self, subject: str, message: str, lead: LeadRecord) -> str:
        """
        Try the worker, then Web3Forms. Returns the name of the transport that
        accepted the lead; raises LeadDeliveryError when none did.
        """
        if not self.worker_url and not self.web3forms_access_key:
            raise LeadDeliveryError("No lead delivery transport configured (EMAIL_WORKER_URL / WEB3FORMS_ACCESS_KEY)")

        async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
            # Try the relay worker first
            if self.worker_url:
                try:
                    response = await client.post(self.worker_url, data=self._worker_form(subject, message, lead))
                    if _succeeded(response):
                        logger.info("Lead delivered via email worker")
                        return "worker"
                    logger.warning(f"Email worker rejected lead (HTTP {response.status_code}); falling back to Web3Forms")
                except httpx.HTTPError as e:
                    logger.warning(f"Email worker error ({type(e).__name__}: {e}); falling back to Web3Forms")

            if not self.web3forms_access_key:
                raise LeadDeliveryError("Email worker failed and no Web3Forms access key is configured")

            # Fallback to Web3Forms
            try:
                response = await client.post(self.web3forms_url, json=self._web3forms_payload(subject, message, lead))
            except httpx.HTTPError as e:
                raise LeadDeliveryError(f"Web3Forms request failed: {e}") from e
            if not _succeeded(response):
                raise LeadDeliveryError(f"Web3Forms rejected lead (HTTP {response.status_code})")
            logger.info("Lead delivered via Web3Forms")
            return "web3forms"
