import nox

nox.needs_version = ">=2024.4.15"
nox.options.default_venv_backend = "uv|virtualenv"


@nox.session
@nox.parametrize("editable", [True, False])
def install(session: nox.Session, editable: bool) -> None:
    session.install("-e." if editable else ".")
    version = session.run("python", "-c", "import rest_content; print(rest_content.__version__)", silent=True)
    assert version and version.strip(), "rest_content has no version"

    # The package has no runtime dependencies of its own.
    res = session.run("python", "-c", "import rest_content, sys; print(sorted(sys.modules))", silent=True)
    assert "python_multipart" not in res


@nox.session
def tests(session: nox.Session) -> None:
    session.install("-e.[test]")
    session.run("pytest", "--cov=rest_content", "--cov-report=term-missing", "tests", *session.posargs)
