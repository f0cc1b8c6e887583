"""Global pytest fixtures for PERIODICA."""

pytest_plugins = [
    "tests.fixtures.sqlite",
    "tests.fixtures.catalog",
]
