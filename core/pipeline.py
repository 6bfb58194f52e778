"""Shared consumer/processor/producer scaffolding."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, Protocol, TypeVar

from .cli_errors import CLIError, ExitCode
from .cli_errors import print_error as _print_error
from .cli_output import OutputWriter


PayloadT = TypeVar("PayloadT")
ResultT = TypeVar("ResultT")
RequestT = TypeVar("RequestT")
T = TypeVar("T")
R = TypeVar("R")

LOG = logging.getLogger(__name__)


@dataclass
class ResultEnvelope(Generic[ResultT]):
    status: str
    payload: Optional[ResultT] = None
    diagnostics: Optional[dict[str, Any]] = None

    def ok(self) -> bool:
        return self.status.lower() == "success"


class Consumer(Protocol[PayloadT]):
    def consume(self) -> PayloadT:
        ...


class RequestConsumer(Generic[RequestT], Consumer[RequestT]):
    """Consumer that hands back the request object it was built with."""

    def __init__(self, request: RequestT) -> None:
        self._request = request

    def consume(self) -> RequestT:  # pragma: no cover - trivial
        return self._request


class SafeProcessor(Generic[T, R]):
    """Base processor that turns exceptions into error envelopes.

    Subclasses implement _process_safe(). A CLIError keeps its exit code
    and hint in the diagnostics; anything else becomes a generic error.

    Example usage:
        class MyProcessor(SafeProcessor[Request, Result]):
            def _process_safe(self, payload: Request) -> Result:
                return Result(...)
    """

    def process(self, payload: T) -> ResultEnvelope[R]:
        try:
            result = self._process_safe(payload)
            return ResultEnvelope(status="success", payload=result)
        except CLIError as e:
            diagnostics: Dict[str, Any] = {"message": e.message, "code": int(e.code)}
            if e.hint:
                diagnostics["hint"] = e.hint
            return ResultEnvelope(status="error", diagnostics=diagnostics)
        except Exception as e:
            LOG.debug("Unexpected failure in %s", type(self).__name__, exc_info=True)
            return ResultEnvelope(
                status="error",
                diagnostics={"message": str(e), "code": int(ExitCode.ERROR)},
            )

    def _process_safe(self, payload: T) -> R:
        """Override to implement processing logic without error handling boilerplate."""
        raise NotImplementedError("Subclass must implement _process_safe")


class BaseProducer:
    """Base class for pipeline producers with common error handling.

    Subclasses override _produce_success(); failures are reported on
    stderr here so command output on stdout stays machine-readable.
    """

    def __init__(self, writer: Optional[OutputWriter] = None) -> None:
        self.writer = writer or OutputWriter()

    def produce(self, result: ResultEnvelope) -> None:
        if self.print_error(result):
            return
        self._produce_success(result.payload, result.diagnostics)

    def _produce_success(self, payload: Any, diagnostics: Optional[Dict[str, Any]]) -> None:
        raise NotImplementedError("Subclass must implement _produce_success")

    @staticmethod
    def print_error(result: ResultEnvelope) -> bool:
        """Print error message if result failed. Returns True if error was printed."""
        if result.ok():
            return False
        diag = result.diagnostics or {}
        _print_error(diag.get("message"), diag.get("hint"))
        return True


def run_pipeline(request: Any, processor: Any, producer: Any) -> int:
    """Execute a pipeline and return CLI exit code.

    Args:
        request: The request object to process
        processor: Processor instance
        producer: Producer instance

    Returns:
        0 on success, or the error code from diagnostics (default 1)

    Example:
        def run_teams_guestsettings_list(args) -> int:
            request = GuestSettingsListRequest(client=..., team_id=args.team_id)
            return run_pipeline(request, GuestSettingsListProcessor(), GuestSettingsListProducer(args._output))
    """
    payload = RequestConsumer(request).consume()
    envelope = processor.process(payload)
    producer.produce(envelope)
    return 0 if envelope.ok() else int((envelope.diagnostics or {}).get("code", ExitCode.ERROR))
