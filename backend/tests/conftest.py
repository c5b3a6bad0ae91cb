"""
conftest.py — Shared pytest fixtures for the quote engine test suite.

No network or external service fixtures are defined here. HTTP collaborators
(catalog host, email relays) are replaced per test with ``httpx.MockTransport``.

Import-path bootstrapping:
    The ``backend/`` directory is inserted into sys.path so that all
    ``app.*`` imports resolve correctly regardless of where pytest is invoked.
"""

import sys
import os
import pytest

# ---------------------------------------------------------------------------
# Ensure ``backend/`` is on the import path before any app imports occur.
# ---------------------------------------------------------------------------
_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)


# ---------------------------------------------------------------------------
# Catalog fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def catalog_document():
    """The embedded fallback catalog, validated."""
    from app.models.catalog_schema import CatalogDocument
    from app.services.fallback_catalog import FALLBACK_CATALOG
    return CatalogDocument.model_validate(FALLBACK_CATALOG)


@pytest.fixture(scope="session")
def products(catalog_document):
    """
    Every fallback product resolved against the global rates, keyed by id.

    Global glass: 6mm 0, 8mm 30, 10mm 50, 12mm 80, dgu 180, laminated/safety 220.
    Global lock: multiPoint 1200, mortice 1500. Global coating: wooden 65.
    """
    from app.services.catalog_engine import resolve_product
    return {
        p.id: resolve_product(p, catalog_document.global_rates)
        for p in catalog_document.products
    }


@pytest.fixture
def make_product():
    """Factory for ad-hoc products: make_product(rates={...}, features=[...], archetype=...)."""
    from app.models.catalog_schema import ProductConfig

    def _make(product_id="test-product", rates=None, features=None, **fields):
        return ProductConfig.model_validate({
            "id": product_id,
            "name": fields.pop("name", "Test Product"),
            "rates": rates or {},
            "features": features or [],
            **fields,
        })
    return _make


# ---------------------------------------------------------------------------
# Engine fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def pricing_engine():
    """PricingEngine with the built-in archetype strategies (stateless)."""
    from app.services.pricing_engine import PricingEngine
    return PricingEngine()


@pytest.fixture(scope="session")
def cladding_engine():
    """CladdingEngine with the default 5% wastage."""
    from app.services.cladding_engine import CladdingEngine
    return CladdingEngine()


@pytest.fixture
def diagnostics():
    """The diagnostics tracker, reset before and after the test."""
    from app.services.diagnostics import tracker
    tracker.reset()
    yield tracker
    tracker.reset()


# ---------------------------------------------------------------------------
# Lead fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def lead():
    from app.services.quote_policy import LeadRecord
    return LeadRecord(name="Asha Verma", city="Lucknow", mobile="9876543210", email="asha@example.com")


class FakeClock:
    """Monotonic clock stand-in advanced by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()
