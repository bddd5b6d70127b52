from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Optional

from runlab.errors import EntitlementDenied, Unauthenticated
from runlab.languages import get_runtime
from runlab.services.entitlement_service import DEFAULT_FREE_TIER_LANGUAGE, EntitlementService, authorize
from runlab.services.piston_client import RuntimeTimeout, RuntimeTransportError

# Configure logging
logger = logging.getLogger(__name__)

NO_CODE_MESSAGE = "no code to run"
TRANSPORT_ERROR_MESSAGE = "execution request failed"
TIMEOUT_MESSAGE = "execution request timed out"


class ExecutionState(str, Enum):
    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    DISPATCHING = "DISPATCHING"
    AWAITING_RESULT = "AWAITING_RESULT"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class FailureKind(str, Enum):
    INPUT = "input"
    API = "api"
    COMPILE = "compile"
    RUNTIME = "runtime"
    TRANSPORT = "transport"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class ExecutionOutcome:
    code: str
    output: str = ""
    error: Optional[str] = None
    status: ExecutionState = ExecutionState.SUCCEEDED
    failure: Optional[FailureKind] = None

    @property
    def succeeded(self):
        return self.status == ExecutionState.SUCCEEDED

    @property
    def persistable(self):
        """Input errors are not execution attempts and are never stored."""
        return self.failure != FailureKind.INPUT

    @classmethod
    def failed(cls, code, error, failure):
        return cls(code=code, output="", error=error, status=ExecutionState.FAILED, failure=failure)

    def to_dict(self):
        return {
            "code": self.code,
            "output": self.output,
            "error": self.error,
            "status": self.status.value,
            "failure": self.failure.value if self.failure else None,
        }


@dataclass
class EditorSession:
    """Editor state for one client, passed explicitly into the service."""
    language: str = DEFAULT_FREE_TIER_LANGUAGE
    theme: str = "vs-dark"
    font_size: int = 16
    code: str = ""
    output: str = ""
    error: Optional[str] = None
    is_running: bool = False
    execution_result: Optional[ExecutionOutcome] = None
    saved_code: dict = field(default_factory=dict)

    def get_code(self):
        return self.code or ""

    def set_code(self, code):
        self.code = code

    def set_theme(self, theme):
        self.theme = theme

    def set_font_size(self, font_size):
        self.font_size = int(font_size)

    def set_language(self, language):
        # Keep what was typed for the old language and bring back the new one's
        if self.code:
            self.saved_code[self.language] = self.code
        self.language = language
        self.code = self.saved_code.get(language, "")
        self.output = ""
        self.error = None


def _phase_error(phase):
    error = phase.get("stderr") or phase.get("output") or phase.get("stdout")
    if error:
        return error
    # A phase killed by a signal reports code None
    if phase.get("signal"):
        return f"terminated by signal {phase['signal']}"
    return f"exited with code {phase.get('code')}"


def classify_response(code, data):
    """Turn a Piston response body into an outcome; the first matching layer wins."""
    message = data.get("message")
    if message:
        return ExecutionOutcome.failed(code, message, FailureKind.API)

    compile_phase = data.get("compile")
    if compile_phase and compile_phase.get("code") != 0:
        return ExecutionOutcome.failed(code, _phase_error(compile_phase), FailureKind.COMPILE)

    run_phase = data.get("run")
    if not run_phase:
        return ExecutionOutcome.failed(code, TRANSPORT_ERROR_MESSAGE, FailureKind.TRANSPORT)
    if run_phase.get("code") != 0:
        return ExecutionOutcome.failed(code, _phase_error(run_phase), FailureKind.RUNTIME)

    output = run_phase.get("output")
    if output is None:
        output = run_phase.get("stdout") or ""
    return ExecutionOutcome(code=code, output=output.strip(), error=None, status=ExecutionState.SUCCEEDED)


class CodeExecutionService:

    def __init__(self, client, store=None, free_tier_language=DEFAULT_FREE_TIER_LANGUAGE):
        self.client = client
        self.store = store
        self.free_tier_language = free_tier_language

    def run(self, language, source_code):
        """Run one program against the runtime; never raises for run failures"""
        state = ExecutionState.VALIDATING
        logger.info(f"Execution {language}: {ExecutionState.IDLE.value} → {state.value}")

        if not source_code or not source_code.strip():
            logger.info(f"Execution {language}: {state.value} → FAILED (empty source)")
            return ExecutionOutcome.failed(source_code or "", NO_CODE_MESSAGE, FailureKind.INPUT)

        runtime = get_runtime(language)
        if runtime is None:
            logger.warning(f"Unsupported language: {language}")
            return ExecutionOutcome.failed(source_code, f"unsupported language: {language}", FailureKind.INPUT)

        state = ExecutionState.DISPATCHING
        runtime_language, version = runtime
        logger.info(f"📤 Execution {language}: {state.value} to {runtime_language} {version}")

        state = ExecutionState.AWAITING_RESULT
        try:
            data = self.client.execute(runtime_language, version, source_code)
        except RuntimeTimeout:
            logger.warning(f"Execution {language}: {state.value} → FAILED (timeout)")
            return ExecutionOutcome.failed(source_code, TIMEOUT_MESSAGE, FailureKind.TIMEOUT)
        except RuntimeTransportError:
            logger.error(f"Execution {language}: {state.value} → FAILED (transport)")
            return ExecutionOutcome.failed(source_code, TRANSPORT_ERROR_MESSAGE, FailureKind.TRANSPORT)

        outcome = classify_response(source_code, data)
        if outcome.succeeded:
            logger.info(f"✅ Execution {language}: {state.value} → {outcome.status.value}")
        else:
            logger.warning(f"⚠️ Execution {language}: {state.value} → {outcome.status.value} ({outcome.failure.value})")
        return outcome

    def run_session(self, session):
        """Run the session's current code and write the result back into it"""
        code = session.get_code()
        if not code:
            session.error = "Please enter some code to run."
            return None

        session.is_running = True
        session.error = None
        session.output = ""
        try:
            outcome = self.run(session.language, code)
        finally:
            session.is_running = False

        session.output = outcome.output
        session.error = outcome.error
        session.execution_result = outcome
        return outcome

    def execute_for_user(self, identity, language, source_code):
        """Gate, run and record one execution for an authenticated caller.

        Returns ``(outcome, record_id)``; ``record_id`` is None when the
        outcome is an input error and nothing was stored.
        """
        if identity is None:
            raise Unauthenticated()

        entitlement = EntitlementService.get_entitlement(identity.user_id)
        decision = authorize(language, entitlement, self.free_tier_language)
        if not decision.allowed:
            logger.warning(f"🚫 User {identity.user_id} denied {language}: {decision.reason}")
            raise EntitlementDenied(decision.reason)

        outcome = self.run(language, source_code)
        if not outcome.persistable:
            return outcome, None

        record_id = self.store.append(
            identity,
            language=language,
            code=outcome.code,
            output=outcome.output if outcome.succeeded else None,
            error=outcome.error,
        )
        logger.info(f"📝 Execution {record_id} recorded for user {identity.user_id}")
        return outcome, record_id
