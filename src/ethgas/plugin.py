"""
pytest plugin: charge the gas of each passing test to contract methods and
deployments, and print a gas report at the end of the session.

Registered through the ``pytest11`` entry point and inert unless pytest is
run with ``--gas-report``.
"""

from typing import List, Optional, Tuple

import pytest

from ethgas.config import load_config
from ethgas.core.run_controller import GasReportData, GasUsage, RunController
from ethgas.report.gas_table import write_report
from ethgas.rpc.client import SyncRPCClient
from ethgas.utils.exceptions import EthGasError
from ethgas.utils.logging import get_logger

logger = get_logger('plugin')

PLUGIN_NAME = "ethgas-reporter"


def pytest_addoption(parser):
    group = parser.getgroup("ethgas", "gas usage reporting")
    group.addoption("--gas-report", action="store_true", default=False,
                    help="Attribute gas used by passing tests to contract methods and deployments")
    group.addoption("--gas-config", default=None,
                    help="Reporter config file (default: ./.ethgas.json if present)")
    group.addoption("--gas-rpc-url", default=None, help="RPC URL of the node the tests run against")
    group.addoption("--gas-artifacts", default=None, help="Folder of compiled contract artifacts")
    group.addoption("--gas-src", default=None, help="Solidity source folder restricting tracked contracts")
    group.addoption("--gas-show-time", action="store_true", default=None,
                    help="Show test durations next to their gas")


def pytest_configure(config):
    if not config.getoption("gas_report"):
        return
    try:
        reporter_config = load_config(
            config.getoption("gas_config"),
            overrides={
                "rpc_url": config.getoption("gas_rpc_url"),
                "artifacts": config.getoption("gas_artifacts"),
                "src": config.getoption("gas_src"),
                "show_time_spent": config.getoption("gas_show_time"),
            },
        )
    except EthGasError as e:
        raise pytest.UsageError(f"ethgas: {e.message}") from e
    config.pluginmanager.register(GasReporterPlugin(reporter_config), PLUGIN_NAME)


class GasReporterPlugin:
    """
    Drives a RunController from pytest's test lifecycle.

    ``pytest_runtest_setup`` marks the deployment baseline before fixtures
    run; ``pytest_runtest_call`` marks the method baseline once they are
    done, so fixture transactions are not charged to the test's methods.
    """

    def __init__(self, config, client_factory=SyncRPCClient):
        self.config = config
        self.client_factory = client_factory
        self.client = None
        self.controller: Optional[RunController] = None
        self.results: List[Tuple[str, GasUsage]] = []
        self.data: Optional[GasReportData] = None

    def pytest_sessionstart(self, session):
        try:
            self.client = self.client_factory(self.config.rpc_url, timeout=self.config.rpc_timeout)
            self.controller = RunController(
                self.client,
                artifacts_dir=self.config.artifacts,
                src_path=self.config.src,
                show_time_spent=self.config.show_time_spent,
            )
            self.controller.start()
        except EthGasError as e:
            pytest.exit(f"ethgas: {e.message}", returncode=pytest.ExitCode.USAGE_ERROR)

    @pytest.hookimpl(tryfirst=True)
    def pytest_runtest_setup(self, item):
        self.controller.begin_test()

    @pytest.hookimpl(tryfirst=True)
    def pytest_runtest_call(self, item):
        self.controller.hooks_done()

    def pytest_runtest_logreport(self, report):
        if report.when == "setup" and not report.passed:
            self.controller.test_failed()
        elif report.when == "call":
            if report.passed:
                usage = self.controller.test_passed(duration=report.duration)
                self.results.append((report.nodeid, usage))
            else:
                self.controller.test_failed()

    def pytest_sessionfinish(self, session):
        if self.controller is not None and not self.controller.finished:
            self.data = self.controller.finish()

    def pytest_terminal_summary(self, terminalreporter):
        if self.data is None:
            return
        terminalreporter.write_sep("=", "gas usage")
        for nodeid, usage in self.results:
            terminalreporter.write_line(format_test_usage(nodeid, usage))
        write_report(
            self.data,
            self.config,
            client=self.client,
            stream=terminalreporter,
            colors=terminalreporter.hasmarkup,
        )


def format_test_usage(nodeid: str, usage: GasUsage) -> str:
    parts = []
    if usage.duration is not None:
        parts.append(f"{round(usage.duration * 1000)}ms")
    if usage.gas_used:
        parts.append(f"{usage.gas_used} gas")
    suffix = f" ({', '.join(parts)})" if parts else ""
    return f"  {nodeid}{suffix}"
