import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13", "3.14"]

_AREAS = ["catalog", "cart", "customer", "checkout", "order", "payment"]


def _install(session: nox.Session) -> None:
    """Install the project with its test extra into the nox virtualenv."""
    session.run(
        "poetry",
        "install",
        "--all-extras",
        external=True,
    )


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run full test suite across Python versions."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Run domain-layer tests only (no store or HTTP involved)."""
    _install(session)
    session.run("pytest", *[f"tests/{area}/domain/" for area in _AREAS])


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_integration(session: nox.Session) -> None:
    """Run the HTTP API tests through the FastAPI TestClient."""
    _install(session)
    session.run("pytest", "-m", "integration")


@nox.session(python=PYTHON_VERSIONS[-1])
def coverage(session: nox.Session) -> None:
    """Run the full suite with a coverage report for the storefront package."""
    _install(session)
    session.run(
        "pytest",
        "--cov=storefront",
        "--cov-report=term-missing",
        *session.posargs,
    )
