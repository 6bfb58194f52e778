"""Tests for core/pipeline.py."""

from __future__ import annotations

import io
import unittest
from unittest.mock import patch

from core.cli_errors import CLIError, ExitCode, NotFoundError
from core.cli_output import OutputConfig, OutputWriter
from core.pipeline import BaseProducer, RequestConsumer, ResultEnvelope, SafeProcessor, run_pipeline


class EchoProcessor(SafeProcessor[dict, dict]):
    def _process_safe(self, payload: dict) -> dict:
        if payload.get("raise"):
            raise payload["raise"]
        return {"echo": payload["value"]}


class RecordingProducer(BaseProducer):
    def __init__(self, writer=None):
        super().__init__(writer)
        self.produced = []

    def _produce_success(self, payload, diagnostics):
        self.produced.append(payload)
        self.writer.print(payload["echo"])


class TestResultEnvelopeOk(unittest.TestCase):
    """Tests for ResultEnvelope.ok() method."""

    def test_ok_returns_true_for_success(self):
        self.assertTrue(ResultEnvelope(status="success").ok())
        self.assertTrue(ResultEnvelope(status="SUCCESS").ok())

    def test_ok_returns_false_otherwise(self):
        self.assertFalse(ResultEnvelope(status="error").ok())


class TestRequestConsumer(unittest.TestCase):
    def test_returns_request(self):
        req = {"value": 1}
        self.assertIs(RequestConsumer(req).consume(), req)


class TestSafeProcessor(unittest.TestCase):
    def test_success(self):
        env = EchoProcessor().process({"value": "hi"})
        self.assertTrue(env.ok())
        self.assertEqual(env.payload, {"echo": "hi"})

    def test_cli_error_keeps_code_and_hint(self):
        env = EchoProcessor().process({"raise": CLIError("nope", ExitCode.AUTH_ERROR, "sign in")})
        self.assertFalse(env.ok())
        self.assertEqual(env.diagnostics, {"message": "nope", "code": 4, "hint": "sign in"})

    def test_unexpected_error_is_generic(self):
        env = EchoProcessor().process({"raise": RuntimeError("boom")})
        self.assertEqual(env.diagnostics, {"message": "boom", "code": 1})

    def test_base_requires_override(self):
        env = SafeProcessor().process({})
        self.assertFalse(env.ok())
        self.assertIn("_process_safe", env.diagnostics["message"])


class TestRunPipeline(unittest.TestCase):
    def test_success_returns_zero(self):
        buf = io.StringIO()
        producer = RecordingProducer(OutputWriter(OutputConfig(file=buf)))
        self.assertEqual(run_pipeline({"value": "hi"}, EchoProcessor(), producer), 0)
        self.assertEqual(buf.getvalue(), "hi\n")

    def test_error_returns_code_and_prints_stderr(self):
        producer = RecordingProducer()
        with patch("sys.stderr", new_callable=io.StringIO) as err:
            rc = run_pipeline({"raise": NotFoundError("missing", hint="check the id")}, EchoProcessor(), producer)
        self.assertEqual(rc, ExitCode.NOT_FOUND)
        self.assertEqual(err.getvalue(), "Error: missing\nHint: check the id\n")
        self.assertEqual(producer.produced, [])

    def test_error_without_code_defaults_to_one(self):
        class BareProcessor:
            def process(self, payload):
                return ResultEnvelope(status="error", diagnostics={"message": "x"})

        with patch("sys.stderr", new_callable=io.StringIO):
            self.assertEqual(run_pipeline({}, BareProcessor(), RecordingProducer()), 1)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
