from pytest_archon import archrule


def test_core_has_no_web_framework() -> None:
    """
    Everything outside contrib must stay framework-agnostic.
    FastAPI is an optional extra and may only be imported by contrib.fastapi.
    """
    (
        archrule("core_is_framework_agnostic")
        .match("cqrs_ddd_otp*")
        .exclude("cqrs_ddd_otp.contrib*")
        .should_not_import("fastapi*")
        .should_not_import("starlette*")
        .should_not_import("cqrs_ddd_otp.contrib*")
        .check("cqrs_ddd_otp", only_direct_imports=True)
    )


def test_code_generation_isolation() -> None:
    """
    Code generation is the lowest level.
    It must not import adapters, the provider or any storage client.
    """
    (
        archrule("code_generation_isolation")
        .match("cqrs_ddd_otp.totp")
        .should_not_import("cqrs_ddd_otp.cache*")
        .should_not_import("cqrs_ddd_otp.provider*")
        .should_not_import("redis*")
        .check("cqrs_ddd_otp", only_direct_imports=True)
    )


def test_ports_layering() -> None:
    """
    Ports (interfaces) should not depend on Adapters (implementations).
    """
    (
        archrule("ports_layering")
        .match("cqrs_ddd_otp.ports")
        .should_not_import("cqrs_ddd_otp.cache*")
        .should_not_import("cqrs_ddd_otp.identity*")
        .should_not_import("redis*")
        .check("cqrs_ddd_otp", only_direct_imports=True)
    )


def test_provider_depends_on_ports_only() -> None:
    """
    The provider talks to its cache and identity store through ports.
    Concrete adapters are injected, never imported.
    """
    (
        archrule("provider_uses_ports")
        .match("cqrs_ddd_otp.provider")
        .match("cqrs_ddd_otp.issuance")
        .should_not_import("cqrs_ddd_otp.cache*")
        .should_not_import("cqrs_ddd_otp.identity*")
        .should_not_import("redis*")
        .check("cqrs_ddd_otp", only_direct_imports=True)
    )


def test_observability_has_no_domain_dependencies() -> None:
    """Observability helpers must not import the provider or adapters."""
    (
        archrule("observability_independence")
        .match("cqrs_ddd_otp.observability*")
        .should_not_import("cqrs_ddd_otp.provider*")
        .should_not_import("cqrs_ddd_otp.cache*")
        .check("cqrs_ddd_otp", only_direct_imports=True)
    )
