"""Tests for the code execution endpoint and runner."""

import asyncio
import shutil
import sys
import tempfile

import pytest

import config
from core.exceptions import UpstreamError, ValidationError
from utils.code_runner import CodeRunner


def test_python_program_output(client):
    response = client.post("/api/compile", json={"language": "python", "code": "print(1+1)"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert "2" in body["output"]


def test_unsupported_language_is_400(client):
    response = client.post("/api/compile", json={"language": "ruby", "code": "puts 1"})

    assert response.status_code == 400
    assert response.json()["error"] == "Unsupported language."


@pytest.mark.parametrize("payload", [{"language": "python"}, {"code": "print(1)"}, {}])
def test_missing_language_or_code_is_400(client, payload):
    response = client.post("/api/compile", json=payload)

    assert response.status_code == 400
    assert response.json()["error"] == "Language and code are required."


def test_silent_program_reports_exit_code(client):
    response = client.post("/api/compile", json={"language": "python", "code": "x = 1"})
    assert response.json() == {"success": True, "output": "Program finished with exit code 0"}


def test_failing_program_returns_stderr(client):
    response = client.post(
        "/api/compile", json={"language": "python", "code": "raise ValueError('bad input')"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert "ValueError: bad input" in body["output"]


def test_nonzero_exit_without_stderr(client):
    response = client.post(
        "/api/compile", json={"language": "python", "code": "raise SystemExit(3)"}
    )
    assert response.json() == {"success": False, "output": "Process exited with code 3"}


def test_missing_toolchain_is_500(client, monkeypatch):
    monkeypatch.setattr(config, "NODE_EXECUTABLE", "/nonexistent/node")

    response = client.post("/api/compile", json={"language": "javascript", "code": "1"})

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to compile or execute code."


def test_timeout_kills_program_and_cleans_up(tmp_path, monkeypatch):
    """A runaway program is stopped and its working directory removed."""
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    runner = CodeRunner(timeout=1)

    result = asyncio.run(runner.run("python", "import time\ntime.sleep(30)"))

    assert result.success is False
    assert result.output == "Execution timed out after 1 seconds."
    assert not list(tmp_path.glob("lms-run-*"))


def test_working_directory_removed_after_success(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))

    result = asyncio.run(CodeRunner().run("python", "import os\nprint(os.getcwd())"))

    assert result.success is True
    assert "lms-run-" in result.output
    assert not list(tmp_path.glob("lms-run-*"))


def test_output_is_truncated():
    runner = CodeRunner(max_output_chars=10)

    result = asyncio.run(runner.run("python", "print('x' * 100)"))

    assert result.output.startswith("x" * 10)
    assert result.output.endswith("(output truncated)")


def test_language_tag_is_case_insensitive():
    result = asyncio.run(CodeRunner().run("Python", "print('hi')"))
    assert result.output.strip() == "hi"


def test_runner_errors_are_typed(monkeypatch):
    runner = CodeRunner()
    with pytest.raises(ValidationError):
        asyncio.run(runner.run("cobol", "DISPLAY 'HI'."))

    monkeypatch.setattr(config, "PYTHON_EXECUTABLE", "/nonexistent/python")
    with pytest.raises(UpstreamError):
        asyncio.run(runner.run("python", "print(1)"))


@pytest.mark.skipif(sys.platform == "win32", reason="resource limits are POSIX only")
def test_cpu_limit_applies(tmp_path):
    runner = CodeRunner(timeout=20, cpu_limit_seconds=1)

    result = asyncio.run(runner.run("python", "while True:\n    pass"))

    assert result.success is False


def _requires(*executables):
    missing = [e for e in executables if shutil.which(e) is None]
    return pytest.mark.skipif(bool(missing), reason=f"{', '.join(missing)} not installed")


@_requires(config.NODE_EXECUTABLE)
def test_javascript_program_output(client):
    response = client.post(
        "/api/compile", json={"language": "javascript", "code": "console.log(1+1)"}
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "output": "2\n"}


@_requires(config.CXX_EXECUTABLE)
def test_cpp_program_output(client):
    code = '#include <iostream>\nint main() { std::cout << "hello" << std::endl; return 0; }\n'

    response = client.post("/api/compile", json={"language": "cpp", "code": code})

    assert response.json() == {"success": True, "output": "hello\n"}


@_requires(config.CXX_EXECUTABLE)
def test_cpp_compile_error(client):
    response = client.post("/api/compile", json={"language": "cpp", "code": "int main( {"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert "error" in body["output"]


@_requires(config.JAVAC_EXECUTABLE, config.JAVA_EXECUTABLE)
def test_java_program_output():
    code = (
        "public class Main {\n"
        "    public static void main(String[] args) { System.out.println(\"hi\"); }\n"
        "}\n"
    )

    result = asyncio.run(CodeRunner(timeout=60).run("java", code))

    assert result.success is True
    assert result.output.strip() == "hi"
