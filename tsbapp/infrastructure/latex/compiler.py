import logging
import shutil
import subprocess
import threading
from pathlib import Path
from typing import Dict, Optional

from tsbapp import config
from tsbapp.errors import CompilerError, MarkupBuildError

logger = logging.getLogger(__name__)

_round_locks: Dict[str, threading.Lock] = {}
_round_locks_guard = threading.Lock()


def round_lock(round_code: str) -> threading.Lock:
    """One lock per round code so two requests never write the same files."""
    with _round_locks_guard:
        lock = _round_locks.get(round_code)
        if lock is None:
            lock = _round_locks[round_code] = threading.Lock()
        return lock


def write_tex(output_dir: Path, name: str, source: str) -> Path:
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / f"{name}.tex"
        path.write_text(source, encoding="utf-8")
        logger.info(f"Wrote {path}")
        return path
    except OSError as e:
        logger.error(f"Could not write {name}.tex to {output_dir}: {e}", exc_info=True)
        raise MarkupBuildError(f"Could not write {name}.tex: {e}") from e


def copy_logo(output_dir: Path, logo_path: Optional[Path], filename: str) -> Optional[Path]:
    if logo_path is None or not Path(logo_path).is_file():
        logger.warning(f"Logo not found at {logo_path}; documents will be built without it")
        return None
    target = output_dir / filename
    try:
        shutil.copyfile(logo_path, target)
    except OSError as e:
        raise MarkupBuildError(f"Could not copy logo: {e}") from e
    return target


def compile_tex(
    tex_path: Path,
    compiler: Optional[str] = None,
    timeout: Optional[int] = None,
) -> Path:
    """Run the LaTeX compiler on ``tex_path`` and return the PDF beside it.

    Raises CompilerError when the compiler is missing, times out, exits
    non-zero or leaves no PDF behind.
    """
    compiler = compiler or config.LATEX_COMPILER
    timeout = timeout or config.LATEX_TIMEOUT_SECONDS
    pdf_path = tex_path.with_suffix(".pdf")
    if pdf_path.exists():
        pdf_path.unlink()

    cmd = [compiler, "-interaction=nonstopmode", "-halt-on-error", tex_path.name]
    logger.info(f"Compiling {tex_path.name} with {compiler}")
    try:
        result = subprocess.run(
            cmd,
            cwd=tex_path.parent,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        logger.error(f"LaTeX compiler '{compiler}' not found")
        raise CompilerError(f"LaTeX compiler '{compiler}' not found") from e
    except subprocess.TimeoutExpired as e:
        logger.error(f"Compiling {tex_path.name} timed out after {timeout}s")
        raise CompilerError(f"Compiling {tex_path.name} timed out after {timeout} seconds") from e

    if result.stderr:
        logger.warning(f"{compiler} stderr for {tex_path.name}: {result.stderr.strip()}")
    if result.returncode != 0:
        logger.error(
            f"{compiler} exited with {result.returncode} for {tex_path.name}: "
            f"{result.stdout[-2000:] if result.stdout else ''}"
        )
        raise CompilerError(f"{compiler} exited with status {result.returncode} for {tex_path.name}")
    if not pdf_path.exists():
        logger.error(f"{compiler} finished but {pdf_path.name} was not produced")
        raise CompilerError(f"PDF file was not generated for {tex_path.name}")
    return pdf_path
