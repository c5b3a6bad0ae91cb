"""
test_import_safety.py — Import and layering checks.

Verifies that:
  1. Every service, model and API module imports without circular import failures
     (no network call is made at import time).
  2. The pricing core (measurement, cutting, cladding, rules, pricing engine)
     does not depend on FastAPI, the HTTP client or the catalog loader, so it
     can be reused outside the web service.
  3. app.main builds a FastAPI instance on import.

No network or external services are required.
"""

import sys
import os
import importlib
import inspect
import pytest

_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)


# ---------------------------------------------------------------------------
# All modules import without circular import errors
# ---------------------------------------------------------------------------

_SERVICE_MODULES = [
    "app.services.measurement_engine",
    "app.services.cutting_list_engine",
    "app.services.cladding_engine",
    "app.services.pricing_rules",
    "app.services.pricing_engine",
    "app.services.catalog_engine",
    "app.services.fallback_catalog",
    "app.services.quote_policy",
    "app.services.delivery_channel",
    "app.services.lead_gateway",
    "app.services.diagnostics",
    "app.services.logging_config",
    "app.services.middleware",
]

_MODEL_AND_API_MODULES = [
    "app.config",
    "app.models.catalog_schema",
    "app.models.quote_models",
    "app.api.deps",
    "app.api.catalog_routes",
    "app.api.quote_routes",
    "app.api.lead_routes",
]

# Pure computation: no web framework, HTTP client or catalog I/O
_PURE_CORE_MODULES = [
    "app.services.measurement_engine",
    "app.services.cutting_list_engine",
    "app.services.cladding_engine",
    "app.services.pricing_rules",
    "app.services.pricing_engine",
]


class TestModuleImports:

    @pytest.mark.parametrize("module_path", _SERVICE_MODULES)
    def test_service_module_imports(self, module_path):
        mod = importlib.import_module(module_path)
        assert mod is not None, f"Module {module_path} is None after import"

    @pytest.mark.parametrize("module_path", _MODEL_AND_API_MODULES)
    def test_model_and_api_modules_import(self, module_path):
        assert importlib.import_module(module_path) is not None

    def test_main_builds_app(self):
        from fastapi import FastAPI
        import app.main as main
        assert isinstance(main.app, FastAPI)
        paths = {route.path for route in main.app.routes}
        assert "/api/quotes/{product_id}" in paths
        assert "/api/leads/{product_id}" in paths


class TestLayering:
    """The pricing core must stay independent of the transport layers."""

    @pytest.mark.parametrize("module_path", _PURE_CORE_MODULES)
    def test_core_has_no_transport_imports(self, module_path):
        src = inspect.getsource(importlib.import_module(module_path))
        for forbidden in ("import httpx", "from fastapi", "catalog_engine", "delivery_channel"):
            assert forbidden not in src, f"{module_path} must not depend on {forbidden!r}"

    def test_quote_policy_is_standalone(self):
        """Presentation policy must not know how leads are delivered."""
        import app.services.quote_policy as qp
        src = inspect.getsource(qp)
        assert "httpx" not in src
        assert "lead_gateway" not in src
