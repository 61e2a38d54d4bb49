"""Architectural boundary tests using pytest-archon.

These tests verify that the codebase follows clean architecture principles:
- Domain layer has no dependencies on adapters or application services
- Application services don't depend on adapters
- Adapters can depend on domain but not on application services
"""

from pytest_archon import archrule


def test_domain_models_have_no_dependencies() -> None:
    """Domain models should not import any other project layer."""
    (
        archrule("domain models", comment="Domain models should be independent")
        .match("kmb_eta.domain.models*")
        .should_not_import("kmb_eta.adapters*")
        .should_not_import("kmb_eta.application*")
        .should_not_import("kmb_eta.domain.ports*")
        .may_import("kmb_eta.domain.models*")
        .check("kmb_eta")
    )


def test_domain_ports_have_no_dependencies() -> None:
    """Domain ports (interfaces) should not import adapters or application."""
    (
        archrule("domain ports", comment="Domain ports should be independent")
        .match("kmb_eta.domain.ports*")
        .should_not_import("kmb_eta.adapters*")
        .should_not_import("kmb_eta.application*")
        .may_import("kmb_eta.domain*")
        .check("kmb_eta")
    )


def test_application_services_dont_import_adapters() -> None:
    """Application services should not depend on adapters (infrastructure layer)."""
    (
        archrule(
            "application services", comment="Application services should not depend on adapters"
        )
        .match("kmb_eta.application*")
        .should_not_import("kmb_eta.adapters*")
        .may_import("kmb_eta.domain*")
        .may_import("kmb_eta.application*")
        .check("kmb_eta")
    )


def test_adapters_dont_import_application() -> None:
    """Adapters should not import application services (to avoid cycles)."""
    (
        archrule(
            "adapters independence", comment="Adapters should not depend on application services"
        )
        .match("kmb_eta.adapters*")
        .should_not_import("kmb_eta.application*")
        .may_import("kmb_eta.domain*")
        .may_import("kmb_eta.adapters*")
        .check("kmb_eta", only_direct_imports=True)
    )
