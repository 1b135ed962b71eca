"""Code execution route."""

from fastapi import APIRouter

from core.dependencies import CodeRunnerDep
from schemas.others import CompileRequest, CompileResult

router = APIRouter(prefix="/api", tags=["Compiler"])


@router.post("/compile", response_model=CompileResult, summary="Compile and run code")
async def compile_code(req: CompileRequest, code_runner: CodeRunnerDep) -> CompileResult:
    """Run the submitted code in a throwaway working directory.

    A program that fails to compile, exits non-zero or times out still
    yields 200 with ``success: false`` and the error output.
    """
    return await code_runner.run(req.language, req.code)
