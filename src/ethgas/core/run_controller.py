"""
Run lifecycle: when to scan, and over which blocks.

A run is driven by the host test runner:

    controller.start()
    for each test:
        controller.begin_test()      # before setup hooks
        controller.hooks_done()      # after setup hooks, before the body
        controller.test_passed(...)  # or controller.test_failed()
    data = controller.finish()

Deployments are attributed from the head at ``begin_test`` so contracts
created in setup hooks are registered; method calls are attributed only
from the block after ``hooks_done`` so setup transactions are not charged
to the test's methods.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from ethgas.artifacts import build_records
from ethgas.core.attribution import ContractResolver, DeploymentAttributor, MethodAttributor
from ethgas.core.records import DeploymentRecord, MethodRecord, RunState
from ethgas.utils.exceptions import RunFinishedError
from ethgas.utils.logging import get_logger

logger = get_logger('run')


@dataclass(frozen=True)
class GasUsage:
    """Gas surfaced for one passing test."""
    gas_used: int
    duration: Optional[float] = None


@dataclass(frozen=True)
class GasReportData:
    """Final, read-only view of a run handed to the reporter."""
    methods: Tuple[MethodRecord, ...]
    deployments: Tuple[DeploymentRecord, ...]
    code_hashes: Mapping[str, str]
    block_limit: Optional[int] = None


class RunController:
    """
    Owns the state of one gas run.

    Args:
        client: Synchronous RPC client
        artifacts_dir: Compiled artifacts to build records from
        src_path: Optional Solidity source path restricting tracked contracts
        state: Pre-built records; skips artifact loading when given
        show_time_spent: Surface test durations alongside gas
    """

    def __init__(
        self,
        client,
        artifacts_dir=None,
        src_path=None,
        state: Optional[RunState] = None,
        show_time_spent: bool = False,
    ):
        self.client = client
        self.artifacts_dir = artifacts_dir
        self.src_path = src_path
        self.show_time_spent = show_time_spent
        self.state = state

        self.deploy_baseline: Optional[int] = None
        self.method_baseline: Optional[int] = None
        self._last_deploy_scanned: Optional[int] = None
        self._last_method_scanned: Optional[int] = None
        self._finished = False
        self._deployments: Optional[DeploymentAttributor] = None
        self._methods: Optional[MethodAttributor] = None

    @property
    def started(self) -> bool:
        return self._methods is not None

    @property
    def finished(self) -> bool:
        return self._finished

    def start(self) -> RunState:
        """Build the run's records and the attributors that mutate them."""
        self._check_running("start")
        if self.state is None:
            self.state = build_records(self.artifacts_dir, src_path=self.src_path, client=self.client)
        resolver = ContractResolver(self.client, self.state)
        self._deployments = DeploymentAttributor(self.client, self.state, resolver)
        self._methods = MethodAttributor(self.client, self.state, resolver)
        logger.debug(
            f"Gas run started with {len(self.state.method_records)} methods, "
            f"{len(self.state.deployment_records)} deployments"
        )
        return self.state

    def begin_test(self) -> None:
        self._check_running("begin a test")
        self.deploy_baseline = self.client.block_number()
        self.method_baseline = None

    def hooks_done(self) -> None:
        self._check_running("mark hooks done")
        self.method_baseline = self.client.block_number() + 1

    def test_passed(self, duration: Optional[float] = None) -> GasUsage:
        """
        Attribute the gas of a passing test.

        Returns:
            Block-level gas of the test's method window. It includes reverted
            and unattributed transactions, so it can exceed the sum of the
            samples recorded for the same blocks.
        """
        self._check_running("attribute a test")
        if not self.started:
            self.start()

        head = self.client.block_number()
        deploy_start = self.deploy_baseline if self.deploy_baseline is not None else head
        method_start = self.method_baseline if self.method_baseline is not None else deploy_start

        self._scan_deployments(deploy_start, head)
        gas_used = self._scan_methods(method_start, head)

        self.deploy_baseline = None
        self.method_baseline = None
        return GasUsage(gas_used, duration if self.show_time_spent else None)

    def test_failed(self) -> None:
        """Failed tests are not charged; their blocks are skipped by later windows too."""
        self._check_running("skip a test")
        head = self.client.block_number()
        self._last_deploy_scanned = max(head, self._last_deploy_scanned or 0)
        self._last_method_scanned = max(head, self._last_method_scanned or 0)
        self.deploy_baseline = None
        self.method_baseline = None

    def attribute_range(self, start: int, end: Optional[int] = None) -> int:
        """
        Attribute deployments, then calls, over ``[start, end]`` outside any test.

        Returns:
            Block-level gas of the range
        """
        self._check_running("attribute a block range")
        if not self.started:
            self.start()
        head = self.client.block_number() if end is None else end
        self._scan_deployments(start, head)
        return self._scan_methods(start, head)

    def finish(self) -> GasReportData:
        """End the run. Records are frozen from here on."""
        self._check_running("finish")
        if not self.started:
            self.start()
        self._finished = True

        block_limit = None
        head_block = self.client.get_block(self.client.block_number())
        if head_block is not None:
            block_limit = head_block.gas_limit

        return GasReportData(
            methods=tuple(self.state.method_records.values()),
            deployments=tuple(self.state.deployment_records),
            code_hashes=MappingProxyType(self.state.code_hashes.as_dict()),
            block_limit=block_limit,
        )

    def _scan_deployments(self, start: int, head: int) -> None:
        start = self._clamp(start, self._last_deploy_scanned)
        logger.debug(f"Scanning deployments in blocks {start}..{head}")
        self._deployments.scan(start, head)
        if head >= start:
            self._last_deploy_scanned = head

    def _scan_methods(self, start: int, head: int) -> int:
        start = self._clamp(start, self._last_method_scanned)
        logger.debug(f"Scanning method calls in blocks {start}..{head}")
        gas_used = self._methods.scan(start, head)
        if head >= start:
            self._last_method_scanned = head
        return gas_used

    @staticmethod
    def _clamp(start: int, last_scanned: Optional[int]) -> int:
        # Consecutive windows share a boundary block; never scan it twice
        if last_scanned is not None and start <= last_scanned:
            return last_scanned + 1
        return start

    def _check_running(self, operation: str) -> None:
        if self._finished:
            raise RunFinishedError(operation)
