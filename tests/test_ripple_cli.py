import argparse
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import yaml

import ripple_cli
from ripple.parser_setup import setup_parser


class TestRippleParser(unittest.TestCase):
    def test_setup_parser(self):
        parser = setup_parser()
        self.assertIsInstance(parser, argparse.ArgumentParser)
        args = parser.parse_args(['example.com', '-t', 'txt', '-m', 'v=spf1', '-w', '30s', '-r', '3s'])
        self.assertEqual(args.domain, 'example.com')
        self.assertEqual(args.type, 'txt')
        self.assertEqual(args.match, 'v=spf1')
        self.assertEqual(args.wait, '30s')
        self.assertEqual(args.retry, '3s')
        self.assertEqual(args.output, 'table')

    def test_output_choices(self):
        parser = setup_parser()
        with self.assertRaises(SystemExit):
            parser.parse_args(['example.com', '--output', 'xml'])


def _result(all_propagated):
    result = MagicMock()
    result.all_propagated = all_propagated
    return result


@pytest.mark.asyncio
@pytest.mark.parametrize("all_propagated, exit_code", [(True, 0), (False, 1)])
@patch("ripple_cli.install_interrupt_handler")
@patch("ripple_cli.setup_logging")
async def test_main_exit_code_follows_result(mock_logging, mock_handler, all_propagated, exit_code):
    with patch("ripple_cli.run_check", new=AsyncMock(return_value=_result(all_propagated))) as mock_run:
        code = await ripple_cli.main(["example.com", "-m", "93.184.216.34", "-w", "10s"])

    assert code == exit_code
    run_config, args, cancel = mock_run.await_args.args
    assert run_config.domain == "example.com."
    assert run_config.deadline == 10.0
    assert args.match == "93.184.216.34"
    mock_handler.assert_called_once_with(cancel)


@pytest.mark.asyncio
@patch("ripple_cli.install_interrupt_handler")
@patch("ripple_cli.setup_logging")
async def test_main_cancelled_run_exits_130(mock_logging, mock_handler):
    result = _result(False)
    result.outcome = "cancelled"
    with patch("ripple_cli.run_check", new=AsyncMock(return_value=result)):
        code = await ripple_cli.main(["example.com", "-m", "93.184.216.34"])

    assert code == 130


@pytest.mark.asyncio
@patch("ripple_cli.console.print")
@patch("ripple_cli.setup_logging")
async def test_main_invalid_config(mock_logging, mock_print):
    with patch("ripple_cli.run_check", new=AsyncMock()) as mock_run:
        code = await ripple_cli.main(["example.com", "-m", "x", "-t", "srv"])

    assert code == 1
    assert "Unsupported record type" in mock_print.call_args.args[0]
    mock_run.assert_not_awaited()


@pytest.mark.asyncio
@patch("ripple_cli.console.print")
async def test_main_missing_config_file(mock_print):
    code = await ripple_cli.main(["example.com", "-m", "x", "-c", "missing.yaml"])
    assert code == 1


@pytest.mark.asyncio
@patch("ripple_cli.console.print")
@patch("ripple_cli.setup_logging")
async def test_main_save_config_without_domain(mock_logging, mock_print, tmp_path):
    path = tmp_path / "ripple.yaml"
    code = await ripple_cli.main(["--save-config", str(path), "-r", "2s"])

    assert code == 0
    saved = yaml.safe_load(path.read_text())
    assert saved["defaults"]["retry"] == "2s"
    assert "Configuration saved" in mock_print.call_args.args[0]


@patch("ripple_cli.console.print")
def test_main_wrapper_keyboard_interrupt(mock_print):
    with patch("ripple_cli.asyncio.run", side_effect=KeyboardInterrupt):
        with pytest.raises(SystemExit) as exc_info:
            ripple_cli.main_wrapper()
    assert exc_info.value.code == 130
