import argparse
import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from ripple.engine.events import Complete, Discovered, TargetPropagated
from ripple.engine.models import AUTHORITATIVE, Endpoint, PropagationResult
from ripple.orchestrator import install_interrupt_handler, run_check

NS1 = Endpoint(name="ns1.example.com", address="192.0.2.1")


@pytest.fixture
def mock_args():
    """Creates a mock argparse.Namespace object."""
    args = argparse.Namespace()
    args.quiet = False
    args.verbose = False
    args.output = "table"
    args.output_file = None
    return args


class FakePoller:
    """Stands in for PropagationPoller: replays a fixed event sequence."""

    events = [
        Discovered(endpoints=(NS1,)),
        TargetPropagated(endpoint=NS1, role=AUTHORITATIVE, matched_record="A 93.184.216.34", found_after=0.1),
        Complete(elapsed=0.2),
    ]

    def __init__(self, config):
        self.config = config

    async def run(self, events, cancel=None):
        for event in self.events[:-1]:
            events.publish(event)
        await events.close(self.events[-1])
        return PropagationResult(
            domain=self.config.domain, criteria=self.config.criteria, outcome="complete", elapsed=0.2
        )


@pytest.mark.asyncio
@patch("ripple.orchestrator.PropagationPoller", FakePoller)
@patch("ripple.orchestrator.console")
async def test_run_check_table(mock_console, run_config, mock_args):
    result = await run_check(run_config, mock_args)

    assert result.outcome == "complete"
    printed = [str(c.args[0]) for c in mock_console.print.call_args_list if c.args]
    assert any("Testing DNS propagation for" in line for line in printed)
    assert any("authoritative [cyan]ns1.example.com[/cyan] has record A" in line for line in printed)
    assert any("All servers propagated" in line for line in printed)


@pytest.mark.asyncio
@patch("ripple.orchestrator.PropagationPoller", FakePoller)
@patch("ripple.orchestrator.console")
async def test_run_check_quiet_prints_nothing(mock_console, run_config, mock_args):
    mock_args.quiet = True
    await run_check(run_config, mock_args)
    mock_console.print.assert_not_called()


@pytest.mark.asyncio
@patch("ripple.orchestrator.PropagationPoller", FakePoller)
async def test_run_check_sse(run_config, mock_args, capsys):
    mock_args.output = "sse"
    await run_check(run_config, mock_args)

    out = capsys.readouterr().out
    types = [json.loads(f[len("data: "):])["type"] for f in out.split("\n\n") if f]
    assert types == ["discovered", "auth_propagated", "complete"]


@pytest.mark.asyncio
@patch("ripple.orchestrator.handle_output")
@patch("ripple.orchestrator.PropagationPoller", FakePoller)
async def test_run_check_json_report_and_file(mock_handle_output, run_config, mock_args):
    mock_args.output = "json"
    mock_args.output_file = "report.yaml"
    result = await run_check(run_config, mock_args)

    assert mock_handle_output.call_count == 2
    mock_handle_output.assert_any_call(result, "json")
    mock_handle_output.assert_any_call(result, "yaml", "report.yaml")


@pytest.mark.asyncio
async def test_interrupt_handler_sets_cancel():
    cancel = asyncio.Event()
    loop = MagicMock()
    with patch("ripple.orchestrator.asyncio.get_running_loop", return_value=loop):
        install_interrupt_handler(cancel)

    handler = loop.add_signal_handler.call_args.args[1]
    handler()
    assert cancel.is_set()


@pytest.mark.asyncio
async def test_interrupt_handler_unsupported_platform():
    loop = MagicMock()
    loop.add_signal_handler.side_effect = NotImplementedError
    with patch("ripple.orchestrator.asyncio.get_running_loop", return_value=loop):
        install_interrupt_handler(asyncio.Event())  # Does not raise


@pytest.mark.asyncio
async def test_run_check_passes_cancel_to_poller(run_config, mock_args):
    cancel = asyncio.Event()
    poller = MagicMock()
    poller.run = AsyncMock(side_effect=FakePoller(run_config).run)
    with (
        patch("ripple.orchestrator.PropagationPoller", return_value=poller),
        patch("ripple.orchestrator.console"),
    ):
        await run_check(run_config, mock_args, cancel)

    assert poller.run.await_args.args[1] is cancel
