"""
Unit tests for the PowerShell-backed platform info provider.

PowerShell is never launched: run_command is patched and fed canned JSON.
"""

import json
from decimal import Decimal
from unittest.mock import patch

import pytest

from proccapture.platform_info import WindowsPlatformInfoProvider
from proccapture.platform_info.windows import (
    build_query_script,
    chunk_pids,
    is_system_path,
    map_priority_class,
    parse_process_rows,
)

RUN_COMMAND = "proccapture.platform_info.windows.run_command"


def ids_in_script(args):
    script = args[-1]
    id_list = script.split("Get-Process -Id ", 1)[1].split(" ", 1)[0]
    return [int(x) for x in id_list.split(",")]


@pytest.mark.unit
class TestHelpers:
    """Test cases for the pure helpers."""

    def test_chunk_pids(self):
        chunks = chunk_pids(list(range(1, 86)), 40)

        assert [len(c) for c in chunks] == [40, 40, 5]
        assert chunks[2] == [81, 82, 83, 84, 85]

    def test_build_query_script(self):
        script = build_query_script([4, 8])

        assert script.startswith("[Console]::OutputEncoding = [System.Text.Encoding]::UTF8; ")
        assert "Get-Process -Id 4,8 -ErrorAction SilentlyContinue" in script
        assert "ConvertTo-Json" in script

    @pytest.mark.parametrize(
        "value,expected",
        [("Idle", 1), ("BelowNormal", 3), ("normal", 5), ("AboveNormal", 7), ("High", 9),
         ("RealTime", 10), (64, 1), (16384, 3), (32, 5), (32768, 7), (128, 9), (256, 10),
         ("128", 9), ("Bogus", None), (None, None), (999, None)],
    )
    def test_map_priority_class(self, value, expected):
        assert map_priority_class(value) == expected

    @pytest.mark.parametrize(
        "path,expected",
        [(None, True), ("", True), ("C:\\Windows\\explorer.exe", True),
         ("D:\\Windows\\System32\\svchost.exe", True), ("c:/windows/notepad.exe", True),
         ("C:\\Program Files\\App\\app.exe", False)],
    )
    def test_is_system_path(self, path, expected):
        assert is_system_path(path) is expected

    def test_parse_single_object(self):
        output = json.dumps(
            {"Id": 42, "WorkingSet64": 10485760, "PriorityClass": "High", "Path": "C:\\x\\a.exe"}
        )

        result = parse_process_rows(output)

        assert result[42].memory_mb == Decimal("10.00")
        assert result[42].priority == 9
        assert result[42].is_system_process is False

    def test_parse_list_with_fallbacks(self):
        output = json.dumps([
            {"Id": 1, "WorkingSet": 1572864, "PriorityClass": 32, "Path": None},
            {"Id": None, "WorkingSet64": 1},
            "junk",
            {"Id": 2},
        ])

        result = parse_process_rows(output)

        assert set(result) == {1, 2}
        assert result[1].memory_mb == Decimal("1.50")
        assert result[1].priority == 5
        assert result[1].is_system_process is True
        assert result[2].memory_mb is None
        assert result[2].priority is None

    def test_parse_invalid_json(self):
        with pytest.raises(ValueError):
            parse_process_rows("not json")


@pytest.mark.unit
class TestWindowsPlatformInfoProvider:
    """Test cases for WindowsPlatformInfoProvider.fetch."""

    @patch(RUN_COMMAND)
    def test_batches_never_exceed_forty(self, mock_run):
        def fake_run(args, timeout=None):
            rows = [{"Id": pid, "WorkingSet64": 1048576, "PriorityClass": "Normal",
                     "Path": "C:\\Apps\\a.exe"} for pid in ids_in_script(args)]
            return 0, json.dumps(rows), ""

        mock_run.side_effect = fake_run
        provider = WindowsPlatformInfoProvider(batch_size=40, timeout=5.0)

        result = provider.fetch(range(1, 101))

        assert mock_run.call_count == 3
        for call in mock_run.call_args_list:
            args, kwargs = call
            assert len(ids_in_script(args[0])) <= 40
            assert kwargs["timeout"] == 5.0
            assert args[0][:4] == ["powershell.exe", "-NoLogo", "-NoProfile", "-Command"]
        assert len(result) == 100
        assert result[77].memory_mb == Decimal("1.00")

    def test_batch_size_is_capped(self):
        assert WindowsPlatformInfoProvider(batch_size=500).batch_size == 40
        assert WindowsPlatformInfoProvider(batch_size=0).batch_size == 1

    @patch(RUN_COMMAND)
    def test_failed_batch_only_loses_its_pids(self, mock_run):
        mock_run.side_effect = [
            (-1, "", "Error: Command timed out after 10.0s"),
            (0, json.dumps({"Id": 45, "PriorityClass": "Idle", "Path": "C:\\a.exe"}), ""),
        ]
        provider = WindowsPlatformInfoProvider(batch_size=40)

        result = provider.fetch(range(1, 51))

        assert list(result) == [45]
        assert result[45].priority == 1

    @patch(RUN_COMMAND, return_value=(0, "   ", ""))
    def test_empty_output(self, mock_run):
        assert WindowsPlatformInfoProvider().fetch([1, 2]) == {}

    @patch(RUN_COMMAND, return_value=(0, "{broken", ""))
    def test_unparseable_output(self, mock_run):
        assert WindowsPlatformInfoProvider().fetch([1]) == {}

    @patch(RUN_COMMAND)
    def test_no_pids_no_calls(self, mock_run):
        assert WindowsPlatformInfoProvider().fetch([]) == {}
        mock_run.assert_not_called()
