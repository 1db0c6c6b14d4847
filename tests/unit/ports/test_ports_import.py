import importlib

import pytest

PORT_MODULES = [
    "snapverify.ports.strategy",
    "snapverify.ports.telemetry",
]

PUBLIC_MODULES = [
    "snapverify",
    "snapverify.strategies",
    "snapverify.cli.snap",
    "snapverify.pytest_plugin",
]


@pytest.mark.parametrize("module_name", PORT_MODULES + PUBLIC_MODULES)
def test_all_modules_import(module_name):
    assert importlib.import_module(module_name)


def test_public_api_is_exported():
    package = importlib.import_module("snapverify")
    for name in package.__all__:
        assert hasattr(package, name), f"snapverify.{name} missing"
