# type: ignore
from invoke import task


@task
def venv(ctx):
    """Create the virtualenv and install the project with its test extras."""
    print("Syncing development environment with uv...")

    ctx.run("uv sync --all-extras")

    print("Development environment initialization complete!")


@task
def lint(ctx):
    """Lint, format-check and type-check the sources."""
    ctx.run("ruff check src tests", pty=True)
    ctx.run("ruff format --check src", pty=True)
    ctx.run("mypy src", pty=True)


@task
def test(ctx):
    """Run the test suite with coverage."""
    ctx.run("pytest --cov=roomlink --cov-report=term-missing", pty=True)


@task
def build_package(ctx):
    """Build the sdist and wheel with uv."""
    ctx.run("rm -rf dist")
    ctx.run("uv build")
