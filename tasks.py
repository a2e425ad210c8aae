# type: ignore
from invoke import task


@task
def venv(ctx):
    """Create .venv and install lampctl with test and dev extras."""
    ctx.run("uv venv")
    ctx.run("uv pip install -e '.[test,dev]'")


@task
def lint(ctx):
    """
    Check style and types of the lampctl sources.
    """
    ctx.run("ruff check src tests", pty=True)
    ctx.run("ruff format --check src tests", pty=True)
    ctx.run("mypy src", pty=True)


@task
def test(ctx):
    """
    Run the test suite with coverage for the lampctl package.
    """
    ctx.run("pytest --cov=lampctl --cov-report=term-missing", pty=True)


@task
def mock(ctx, name="MockLamp"):
    """Run a simulated lamp on the default protocol ports."""
    ctx.run(f"lampctl --verbose mock --name {name}", pty=True)


@task
def build_package(ctx):
    """
    Build sdist and wheel into dist/.
    """
    ctx.run("rm -rf dist")
    ctx.run("uv build")
