"""Execution of user-submitted code.

Each run gets its own temporary working directory, removed when the run
ends. Compilers and programs are started as argument vectors, never through
a shell, with a wall-clock timeout that kills the whole process group and,
on POSIX, CPU and memory limits.
"""

import asyncio
import logging
import os
import signal
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional

import config
from core.exceptions import UpstreamError, ValidationError
from schemas.others import CompileResult

if sys.platform != "win32":
    import resource

logger = logging.getLogger(__name__)

EXECUTION_FAILED_MESSAGE = "Failed to compile or execute code."


@dataclass(frozen=True)
class LanguageSpec:
    """How to build and run one language inside a working directory."""

    source_name: str
    run: Callable[[Path], List[str]]
    compile: Optional[Callable[[Path], List[str]]] = None
    # The JVM and V8 reserve far more address space than they use
    limit_memory: bool = True


LANGUAGES: Dict[str, LanguageSpec] = {
    "python": LanguageSpec(
        source_name="main.py",
        run=lambda d: [config.PYTHON_EXECUTABLE, str(d / "main.py")],
    ),
    "javascript": LanguageSpec(
        source_name="main.js",
        run=lambda d: [config.NODE_EXECUTABLE, str(d / "main.js")],
        limit_memory=False,
    ),
    "java": LanguageSpec(
        source_name="Main.java",
        compile=lambda d: [config.JAVAC_EXECUTABLE, str(d / "Main.java")],
        run=lambda d: [config.JAVA_EXECUTABLE, "-cp", str(d), "Main"],
        limit_memory=False,
    ),
    "cpp": LanguageSpec(
        source_name="main.cpp",
        compile=lambda d: [config.CXX_EXECUTABLE, str(d / "main.cpp"), "-o", str(d / "a.out")],
        run=lambda d: [str(d / "a.out")],
    ),
}


@dataclass
class StepResult:
    returncode: Optional[int]
    stdout: str
    stderr: str
    timed_out: bool = False


class CodeRunner:
    """Runs a snippet of code and captures its output."""

    def __init__(
        self,
        timeout: float = config.CODE_EXECUTION_TIMEOUT,
        max_output_chars: int = config.CODE_MAX_OUTPUT_CHARS,
        cpu_limit_seconds: int = config.CODE_CPU_LIMIT_SECONDS,
        memory_limit_mb: int = config.CODE_MEMORY_LIMIT_MB,
    ):
        """Initialize CodeRunner.

        Args:
            timeout: Wall-clock seconds allowed per compile or run step.
            max_output_chars: Captured output is truncated to this length.
            cpu_limit_seconds: CPU-time limit per process (POSIX only).
            memory_limit_mb: Address-space limit per program; 0 disables it.
        """
        self.timeout = timeout
        self.max_output_chars = max_output_chars
        self.cpu_limit_seconds = cpu_limit_seconds
        self.memory_limit_mb = memory_limit_mb

    @staticmethod
    def resolve_language(language: Optional[str]) -> LanguageSpec:
        spec = LANGUAGES.get((language or "").strip().lower())
        if spec is None:
            raise ValidationError("Unsupported language.")
        return spec

    async def run(self, language: Optional[str], code: Optional[str]) -> CompileResult:
        """Compile (if needed) and run the code.

        Raises:
            ValidationError: If input is missing or the language is unsupported.
            UpstreamError: If the toolchain cannot be started.
        """
        if not language or not code:
            raise ValidationError("Language and code are required.")
        spec = self.resolve_language(language)

        with tempfile.TemporaryDirectory(prefix="lms-run-") as tmp:
            workdir = Path(tmp)
            (workdir / spec.source_name).write_text(code, encoding="utf-8")

            if spec.compile is not None:
                compiled = await self._exec(spec.compile(workdir), workdir, limit_memory=False)
                if compiled.timed_out:
                    return self._timeout_result()
                if compiled.returncode != 0:
                    return CompileResult(
                        success=False,
                        output=self._truncate(
                            compiled.stderr or compiled.stdout or "Compilation failed."
                        ),
                    )

            result = await self._exec(spec.run(workdir), workdir, limit_memory=spec.limit_memory)

        if result.timed_out:
            return self._timeout_result()
        if result.returncode != 0:
            return CompileResult(
                success=False,
                output=self._truncate(
                    result.stderr or f"Process exited with code {result.returncode}"
                ),
            )
        return CompileResult(
            success=True,
            output=self._truncate(result.stdout or "Program finished with exit code 0"),
        )

    def _timeout_result(self) -> CompileResult:
        return CompileResult(
            success=False,
            output=f"Execution timed out after {self.timeout:g} seconds.",
        )

    def _truncate(self, text: str) -> str:
        if len(text) <= self.max_output_chars:
            return text
        return text[: self.max_output_chars] + "\n... (output truncated)"

    def _limits(self, limit_memory: bool) -> Optional[Callable[[], None]]:
        if sys.platform == "win32":
            return None
        cpu = self.cpu_limit_seconds
        memory = self.memory_limit_mb * 1024 * 1024 if limit_memory else 0

        def apply_limits() -> None:
            if cpu > 0:
                resource.setrlimit(resource.RLIMIT_CPU, (cpu, cpu))
            if memory > 0:
                resource.setrlimit(resource.RLIMIT_AS, (memory, memory))

        return apply_limits

    async def _exec(self, argv: List[str], workdir: Path, limit_memory: bool) -> StepResult:
        env = {
            "PATH": os.environ.get("PATH", ""),
            "HOME": str(workdir),
            "LANG": "C.UTF-8",
        }
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                cwd=str(workdir),
                env=env,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
                preexec_fn=self._limits(limit_memory),
            )
        except OSError as e:
            logger.error("Failed to start %s: %s", argv[0], e)
            raise UpstreamError(EXECUTION_FAILED_MESSAGE) from e

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("Killing %s after %gs timeout", argv[0], self.timeout)
            _kill_group(proc)
            await proc.communicate()
            return StepResult(returncode=None, stdout="", stderr="", timed_out=True)

        return StepResult(
            returncode=proc.returncode,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )


def _kill_group(proc: asyncio.subprocess.Process) -> None:
    try:
        if sys.platform == "win32":
            proc.kill()
        else:
            os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
