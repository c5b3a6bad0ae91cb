"""
test_lead_gateway.py — Unit tests for lead delivery and the in-flight guard.

Tests cover:
  - LeadSubmissionGateway: duplicate suppression, timeout self-clear,
    failure logging, per-key slots
  - HttpLeadDeliveryChannel: worker primary, Web3Forms fallback, failures
  - whatsapp_link: digits-only number, URL-encoded message
  - build_quote_summary: subject and body lines
"""

import json
import logging
from urllib.parse import parse_qs

import httpx
import pytest

from app.services.delivery_channel import HttpLeadDeliveryChannel, LeadDeliveryError, whatsapp_link
from app.services.lead_gateway import LeadSubmissionGateway, build_quote_summary
from app.services.measurement_engine import Measurement
from app.services.pricing_engine import OptionSelection

WORKER_URL = "https://worker.test/lead"


class RecordingChannel:
    """Delivery channel stand-in that records calls and can be told to fail."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []

    async def deliver(self, subject, message, lead):
        self.calls.append((subject, message, lead))
        if self.fail:
            raise LeadDeliveryError("relay down")
        return "worker"


class DeferredSchedule:
    """Collects scheduled jobs instead of running them (a pending background task)."""

    def __init__(self):
        self.jobs = []

    def __call__(self, func, *args):
        self.jobs.append((func, args))

    async def run(self, index: int = 0):
        func, args = self.jobs[index]
        await func(*args)


# ===========================================================================
# Class 1: In-flight guard
# ===========================================================================

class TestLeadSubmissionGateway:

    async def test_direct_delivery_clears_slot(self, lead, fake_clock):
        channel = RecordingChannel()
        gateway = LeadSubmissionGateway(channel, resubmit_timeout_s=10, clock=fake_clock)
        assert await gateway.submit_lead("Subject", "Body", lead) is True
        assert len(channel.calls) == 1
        assert not gateway.is_in_flight()

    async def test_duplicate_while_in_flight_is_ignored(self, lead, fake_clock):
        channel = RecordingChannel()
        schedule = DeferredSchedule()
        gateway = LeadSubmissionGateway(channel, resubmit_timeout_s=10, clock=fake_clock)

        assert await gateway.submit_lead("S", "B", lead, key="s-1", schedule=schedule) is True
        assert await gateway.submit_lead("S", "B", lead, key="s-1", schedule=schedule) is False
        assert len(schedule.jobs) == 1

    async def test_guard_self_clears_after_timeout(self, lead, fake_clock):
        schedule = DeferredSchedule()
        gateway = LeadSubmissionGateway(RecordingChannel(), resubmit_timeout_s=10, clock=fake_clock)

        await gateway.submit_lead("S", "B", lead, key="s-1", schedule=schedule)
        fake_clock.advance(9.9)
        assert gateway.is_in_flight("s-1")
        fake_clock.advance(0.1)
        assert not gateway.is_in_flight("s-1")
        assert await gateway.submit_lead("S", "B", lead, key="s-1", schedule=schedule) is True

    async def test_completed_delivery_clears_slot(self, lead, fake_clock):
        schedule = DeferredSchedule()
        channel = RecordingChannel()
        gateway = LeadSubmissionGateway(channel, resubmit_timeout_s=10, clock=fake_clock)

        await gateway.submit_lead("S", "B", lead, key="s-1", schedule=schedule)
        await schedule.run()
        assert len(channel.calls) == 1
        assert not gateway.is_in_flight("s-1")

    async def test_failure_logged_and_slot_cleared(self, lead, fake_clock, caplog):
        gateway = LeadSubmissionGateway(RecordingChannel(fail=True), resubmit_timeout_s=10, clock=fake_clock)
        with caplog.at_level(logging.ERROR, logger="quote-engine.leads"):
            accepted = await gateway.submit_lead("S", "B", lead, key="s-1")
        assert accepted is True
        assert "Lead delivery failed" in caplog.text
        assert not gateway.is_in_flight("s-1")

    async def test_unexpected_channel_error_logged_not_raised(self, lead, fake_clock, caplog):
        class BrokenChannel:
            async def deliver(self, subject, message, lead):
                raise KeyError("relay payload")

        gateway = LeadSubmissionGateway(BrokenChannel(), resubmit_timeout_s=10, clock=fake_clock)
        with caplog.at_level(logging.ERROR, logger="quote-engine.leads"):
            accepted = await gateway.submit_lead("S", "B", lead, key="s-1")
        assert accepted is True
        assert "unexpected KeyError" in caplog.text
        assert caplog.records[-1].exc_info is not None
        assert not gateway.is_in_flight("s-1")

    async def test_keys_are_independent(self, lead, fake_clock):
        schedule = DeferredSchedule()
        gateway = LeadSubmissionGateway(RecordingChannel(), resubmit_timeout_s=10, clock=fake_clock)
        assert await gateway.submit_lead("S", "B", lead, key="s-1", schedule=schedule)
        assert await gateway.submit_lead("S", "B", lead, key="s-2", schedule=schedule)

    async def test_stale_completion_keeps_newer_slot(self, lead, fake_clock):
        """A delivery that outlived the timeout must not release the slot its successor holds."""
        schedule = DeferredSchedule()
        gateway = LeadSubmissionGateway(RecordingChannel(), resubmit_timeout_s=10, clock=fake_clock)

        await gateway.submit_lead("S", "B", lead, key="s-1", schedule=schedule)
        fake_clock.advance(10)
        await gateway.submit_lead("S", "B", lead, key="s-1", schedule=schedule)
        await schedule.run(0)
        assert gateway.is_in_flight("s-1")


# ===========================================================================
# Class 2: HTTP delivery channel
# ===========================================================================

class TestHttpLeadDeliveryChannel:

    async def test_worker_success(self, lead):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"success": True})

        channel = HttpLeadDeliveryChannel(worker_url=WORKER_URL, transport=httpx.MockTransport(handler))
        assert await channel.deliver("Subject", "Body", lead) == "worker"

        form = parse_qs(seen[0].content.decode())
        assert form["_subject"] == ["Subject"]
        assert form["Name"] == ["Asha Verma"]
        assert form["Email"] == ["asha@example.com"]

    async def test_worker_rejects_then_web3forms(self, lead):
        seen = []

        def handler(request):
            seen.append(request)
            if request.url.host == "worker.test":
                return httpx.Response(200, json={"success": False})
            return httpx.Response(200, json={"success": True})

        channel = HttpLeadDeliveryChannel(
            worker_url=WORKER_URL,
            web3forms_access_key="key-123",
            recipient_email="sales@test.example",
            transport=httpx.MockTransport(handler),
        )
        assert await channel.deliver("Subject", "Body", lead) == "web3forms"

        payload = json.loads(seen[1].content)
        assert payload["access_key"] == "key-123"
        assert payload["to_email"] == "sales@test.example"
        assert payload["from_email"] == "asha@example.com"

    async def test_worker_non_json_falls_back(self, lead):
        def handler(request):
            if request.url.host == "worker.test":
                return httpx.Response(200, content=b"OK")
            return httpx.Response(200, json={"success": True})

        channel = HttpLeadDeliveryChannel(
            worker_url=WORKER_URL, web3forms_access_key="key-123", transport=httpx.MockTransport(handler),
        )
        assert await channel.deliver("S", "B", lead) == "web3forms"

    async def test_both_fail(self, lead):
        def handler(request):
            if request.url.host == "worker.test":
                raise httpx.ConnectError("down", request=request)
            return httpx.Response(500, json={"success": False})

        channel = HttpLeadDeliveryChannel(
            worker_url=WORKER_URL, web3forms_access_key="key-123", transport=httpx.MockTransport(handler),
        )
        with pytest.raises(LeadDeliveryError):
            await channel.deliver("S", "B", lead)

    async def test_worker_fails_without_fallback_key(self, lead):
        channel = HttpLeadDeliveryChannel(
            worker_url=WORKER_URL,
            transport=httpx.MockTransport(lambda request: httpx.Response(502)),
        )
        with pytest.raises(LeadDeliveryError, match="no Web3Forms access key"):
            await channel.deliver("S", "B", lead)

    async def test_nothing_configured(self, lead):
        with pytest.raises(LeadDeliveryError, match="No lead delivery transport configured"):
            await HttpLeadDeliveryChannel().deliver("S", "B", lead)


class TestWhatsappLink:

    def test_link(self):
        link = whatsapp_link("+91 78953 28080", "Hi there & more")
        assert link == "https://wa.me/917895328080?text=Hi%20there%20%26%20more"

    def test_newlines_encoded(self):
        assert whatsapp_link("917895328080", "a\nb").endswith("?text=a%0Ab")

    def test_no_number(self):
        assert whatsapp_link("", "Hi") == ""


# ===========================================================================
# Class 3: Quote summary
# ===========================================================================

class TestBuildQuoteSummary:

    def test_standard_window_summary(self, pricing_engine, products, lead):
        product = products["29mm-sliding"]
        measurement = Measurement(width=10, height=5)
        selection = OptionSelection()
        result = pricing_engine.quote(product, measurement, selection)

        subject, body = build_quote_summary(product, measurement, selection, result, lead)
        assert subject == "New Quote Request - 29mm Sliding Series Aluminium Window"
        lines = body.splitlines()
        assert "- Name: Asha Verma" in lines
        assert "- Email: asha@example.com" in lines
        assert "Size: 10 × 5 ft" in lines
        assert "Area: 50.00 sq.ft" in lines
        assert "Quantity: 1" in lines
        assert "- Per Unit: ₹39,700" in lines
        assert "- Total Cost: ₹39,700" in lines
        assert "Selected Options:" not in lines
        assert lines[-1] == "Generated from Live Price Calculator"

    def test_options_and_l_corner_size(self, pricing_engine, products, lead):
        product = products["frameless-shower-partition"]
        measurement = Measurement(width=3, height=7, right_width=2)
        selection = OptionSelection(shower_type="l-corner", door_count=2, hardware_finish="black")
        result = pricing_engine.quote(product, measurement, selection)

        _, body = build_quote_summary(product, measurement, selection, result, lead)
        lines = body.splitlines()
        assert "Size: 3 + 2 × 7 ft" in lines
        assert "- Layout: l-corner" in lines
        assert "- Doors: 2" in lines
        assert "- Hardware Finish: black" in lines
        assert "- Total Cost: ₹23,250" in lines

    def test_email_omitted_when_blank(self, pricing_engine, products):
        from app.services.quote_policy import LeadRecord

        product = products["29mm-sliding"]
        measurement = Measurement(width=10, height=5)
        result = pricing_engine.quote(product, measurement)
        _, body = build_quote_summary(
            product, measurement, OptionSelection(), result, LeadRecord("Ravi", "Kanpur", "9999988888"),
        )
        assert "Email" not in body

    def test_louver_summary_lists_wastage(self, pricing_engine, products, lead):
        product = products["wooden-finish-aluminium-louvers"]
        measurement = Measurement(width=10, height=7)
        result = pricing_engine.quote(product, measurement)
        _, body = build_quote_summary(product, measurement, OptionSelection(), result, lead)
        assert "- Cutting Wastage: ₹2,013" in body.splitlines()
