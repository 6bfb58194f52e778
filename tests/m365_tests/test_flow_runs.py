"""Tests for `flow run list`."""

from __future__ import annotations

import json
import unittest
from unittest.mock import patch

import yaml

from core.cli_errors import ExitCode
from m365.errors import ApiError
from m365.flow import commands
from m365.flow.runs import flow_runs_url, list_flow_runs, summarize_run
from tests.fakes.m365 import FakeM365Client
from tests.fixtures import capture_stderr, capture_stdout, make_args

ENV = "Default-d87a7535-dd31-4437-bfe1-95340acd55c5"
FLOW = "0f64d9dd-01bb-4c1b-95b3-cb4a1a08ac72"

RUNS = [
    {
        "name": "08586653536760200319026785874CU62",
        "id": "/providers/Microsoft.ProcessSimple/environments/x/flows/y/runs/08586653536760200319026785874CU62",
        "type": "Microsoft.ProcessSimple/environments/flows/runs",
        "properties": {
            "startTime": "2018-09-07T19:46:16.7479281Z",
            "endTime": "2018-09-07T19:46:17.6004811Z",
            "status": "Succeeded",
            "trigger": {"name": "Recurrence"},
        },
    },
    {
        "name": "08586653536760200319026785874CU63",
        "properties": {"startTime": "2018-09-07T19:47:16.7479281Z", "status": "Failed"},
    },
]


class TestFlowRunsApi(unittest.TestCase):
    def test_url(self):
        self.assertEqual(
            flow_runs_url(ENV, FLOW),
            "https://management.azure.com/providers/Microsoft.ProcessSimple/environments/"
            f"{ENV}/flows/{FLOW}/runs?api-version=2016-11-01",
        )

    def test_url_encodes_segments(self):
        self.assertIn("/environments/a%2Fb/flows/c%20d/", flow_runs_url("a/b", "c d"))

    def test_list_uses_plain_json(self):
        client = FakeM365Client(responses={"/runs?": {"value": RUNS}})
        self.assertEqual(list_flow_runs(client, ENV, FLOW), RUNS)
        self.assertEqual(client.calls[0][3]["accept"], "application/json")

    def test_summarize(self):
        self.assertEqual(
            summarize_run(RUNS[0]),
            {"name": RUNS[0]["name"], "startTime": "2018-09-07T19:46:16.7479281Z", "status": "Succeeded"},
        )
        self.assertEqual(summarize_run({"name": "n"}), {"name": "n", "startTime": None, "status": None})


class TestFlowRunListCommand(unittest.TestCase):
    def run_command(self, client, **kwargs):
        args = make_args(environment=ENV, flow=FLOW, **kwargs)
        with patch.object(commands, "build_client", return_value=client):
            with capture_stdout() as out, capture_stderr() as err:
                rc = commands.run_flow_run_list(args)
        return rc, out.getvalue(), err.getvalue()

    def test_json_output_is_raw(self):
        rc, out, _ = self.run_command(FakeM365Client(responses={"/runs?": {"value": RUNS}}), output="json")
        self.assertEqual(rc, 0)
        self.assertEqual(json.loads(out), RUNS)

    def test_text_output_is_summarized(self):
        rc, out, _ = self.run_command(FakeM365Client(responses={"/runs?": {"value": RUNS}}))
        self.assertEqual(rc, 0)
        lines = out.splitlines()
        self.assertEqual(lines[0].split(), ["name", "startTime", "status"])
        self.assertTrue(set(lines[1]) <= {"-", " "})
        self.assertEqual(lines[2].split(), [RUNS[0]["name"], "2018-09-07T19:46:16.7479281Z", "Succeeded"])
        self.assertEqual(lines[3].split()[-1], "Failed")
        self.assertNotIn("trigger", out)

    def test_yaml_output_is_summarized(self):
        rc, out, _ = self.run_command(FakeM365Client(responses={"/runs?": {"value": RUNS}}), output="yaml")
        self.assertEqual(rc, 0)
        self.assertEqual(yaml.safe_load(out)[1], {"name": RUNS[1]["name"], "startTime": RUNS[1]["properties"]["startTime"], "status": "Failed"})

    def test_empty_result_prints_nothing(self):
        for fmt in ("text", "json"):
            rc, out, _ = self.run_command(FakeM365Client(responses={"/runs?": {"value": []}}), output=fmt)
            self.assertEqual(rc, 0)
            self.assertEqual(out, "")

    def test_empty_result_logged_when_verbose(self):
        with self.assertLogs("m365.flow.pipeline", level="INFO") as logs:
            self.run_command(FakeM365Client(), verbose=True)
        self.assertTrue(any("No runs found" in line for line in logs.output))

    def test_api_error(self):
        client = FakeM365Client()
        client.fail_on("/runs?", ApiError("The caller with object id 'x' does not have permission", status_code=403))
        rc, _, err = self.run_command(client)
        self.assertEqual(rc, ExitCode.PERMISSION_DENIED)
        self.assertIn("does not have permission", err)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
