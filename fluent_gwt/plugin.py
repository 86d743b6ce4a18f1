"""pytest plugin — one FluentTest per test, checked for completeness after a passing body.

Registered through the ``pytest11`` entry point. Tests ask for the
``fluent_test`` fixture; projects override ``fluent_test_options`` to hand
infrastructure, factories and hooks to every orchestrator::

    @pytest.fixture
    def fluent_test_options(weather_app):
        return {"infrastructure": weather_app, "assertions": ResponseAssertions}
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

from fluent_gwt.config import load_settings
from fluent_gwt.engine.orchestrator import FluentTest
from fluent_gwt.errors import IncompleteProtocolError
from fluent_gwt.store.records import RecordStore

if TYPE_CHECKING:
    from fluent_gwt.config import Settings

logger = logging.getLogger(__name__)

settings_key = pytest.StashKey["Settings"]()
store_key = pytest.StashKey["RecordStore | None"]()
_REPORT_ATTR = "_fluent_gwt_reports"


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("fluent-gwt")
    group.addoption(
        "--fluent-gwt-record-db",
        dest="fluent_gwt_record_db",
        default=None,
        help="sqlite file to record given/when/then executions into (overrides the config file)",
    )
    parser.addini("fluent_gwt_config", help="path of the fluent-gwt YAML config file", default="")


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "fluent_gwt: test driven through the fluent_test fixture")
    rootdir = Path(str(config.rootpath))
    ini_path = config.getini("fluent_gwt_config")
    try:
        settings = load_settings(rootdir / ini_path if ini_path else None, cwd=rootdir)
    except ValueError as e:
        raise pytest.UsageError(f"fluent-gwt config error: {e}") from e

    record_db = config.getoption("fluent_gwt_record_db")
    if record_db:
        settings.record_db = Path(record_db)
    config.stash[settings_key] = settings
    config.stash[store_key] = RecordStore(settings.record_db) if settings.record_db else None


def pytest_unconfigure(config: pytest.Config) -> None:
    store = config.stash.get(store_key, None)
    if store is not None:
        store.close()
        config.stash[store_key] = None


@pytest.hookimpl(hookwrapper=True, tryfirst=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo):
    outcome = yield
    report = outcome.get_result()
    reports = item.__dict__.setdefault(_REPORT_ATTR, {})
    reports[report.when] = report


def _body_outcome(item: pytest.Item) -> str:
    reports = item.__dict__.get(_REPORT_ATTR, {})
    call_report = reports.get("call")
    if call_report is None:
        return "skipped"
    return call_report.outcome


@pytest.fixture
def fluent_test_options() -> dict[str, Any]:
    """Keyword arguments for every FluentTest; override to inject infrastructure."""
    return {}


@pytest.fixture
def fluent_test(request: pytest.FixtureRequest, fluent_test_options: dict[str, Any]):
    settings: Settings = request.config.stash[settings_key]
    options = {"policy": settings.policy, **fluent_test_options}
    test = FluentTest(request.node.nodeid, **options)

    yield test

    body = _body_outcome(request.node)
    store = request.config.stash.get(store_key, None)

    # A failed body already reports its own error; checking here would mask it
    if body != "passed":
        logger.debug("Skipping completeness check of %s (%s)", request.node.nodeid, body)
        if store is not None:
            store.save_record(test.to_record(body))
        return

    try:
        test.verify()
    except IncompleteProtocolError:
        if store is not None:
            store.save_record(test.to_record("failed"))
        raise
    if store is not None:
        store.save_record(test.to_record(body))
