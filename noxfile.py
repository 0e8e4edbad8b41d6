import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13", "3.14"]


def _install(session: nox.Session) -> None:
    """Install the project with the test group into the nox virtualenv."""
    session.run(
        "poetry",
        "install",
        "--with",
        "test",
        external=True,
    )


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run full test suite across Python versions."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Run domain-layer tests only (no infrastructure required)."""
    _install(session)
    session.run("pytest", "-m", "domain", *session.posargs)


@nox.session(python=PYTHON_VERSIONS[0])
def tests_api(session: nox.Session) -> None:
    """Run the HTTP integration tests."""
    _install(session)
    session.run("pytest", "tests/api/", *session.posargs)


@nox.session(python=PYTHON_VERSIONS[0])
def loadtest(session: nox.Session) -> None:
    """Run the headless order lifecycle load test against a running server."""
    session.run("poetry", "install", "--with", "load", external=True)
    session.run(
        "locust",
        "-f",
        "loadtests/locustfile.py",
        "OrderingUser",
        "--headless",
        "-u",
        "20",
        "-r",
        "2",
        "-t",
        "120s",
        "--host",
        "http://localhost:8000",
        *session.posargs,
    )
