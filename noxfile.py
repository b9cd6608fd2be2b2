import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]

# The PostgreSQL driver ships a C extension; a cached wheel may target another interpreter
_REBUILD = ["psycopg2"]


def _install(session: nox.Session) -> None:
    session.run("poetry", "install", "--all-extras", external=True)
    session.run("pip", "install", "--force-reinstall", "--no-cache-dir", *_REBUILD)


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run full test suite across Python versions."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_domain(session: nox.Session) -> None:
    """Aggregates, state machine and locks only (no thread pools, no HTTP)."""
    _install(session)
    session.run("pytest", "tests/ordering/domain/")


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_concurrency(session: nox.Session) -> None:
    """Racing reservations and status updates, repeated to shake out ordering bugs."""
    _install(session)
    for _ in range(int(session.posargs[0]) if session.posargs else 5):
        session.run("pytest", "-m", "slow", "tests/ordering/application/")


@nox.session(python=PYTHON_VERSIONS[-1])
def bdd(session: nox.Session) -> None:
    """Feature files under tests/ordering/bdd/."""
    _install(session)
    session.run("pytest", "tests/ordering/bdd/")
