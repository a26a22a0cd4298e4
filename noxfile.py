import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]

# Binary wheels that must match the session's interpreter.
_C_EXT_PACKAGES = ["psycopg2-binary"]

_DOMAIN_TESTS = [
    "tests/identity/domain/",
    "tests/catalogue/domain/",
    "tests/ordering/domain/",
    "tests/payments/domain/",
    "tests/cache/",
]


def _install(session: nox.Session) -> None:
    """Install the project with its test extra into the nox virtualenv."""
    session.run("poetry", "install", "--extras", "test", external=True)
    session.run(
        "pip",
        "install",
        "--force-reinstall",
        "--no-cache-dir",
        *_C_EXT_PACKAGES,
    )


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run full test suite across Python versions."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Run domain-layer tests only (no HTTP stack involved)."""
    _install(session)
    session.run("pytest", *_DOMAIN_TESTS)


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_integration(session: nox.Session) -> None:
    """Run the HTTP and BDD suites."""
    _install(session)
    session.run("pytest", "-m", "integration")
