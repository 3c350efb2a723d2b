import logging
from pathlib import Path
from typing import Optional

from sqlalchemy.orm import Session

from tsbapp import config
from tsbapp.application.documents.latex_renderer import LOGO_FILENAME, render_document
from tsbapp.application.documents.layout import build_main_layout, build_replacement_layout
from tsbapp.application.rounds import get_round
from tsbapp.errors import MarkupBuildError
from tsbapp.infrastructure.latex.compiler import compile_tex, copy_logo, round_lock, write_tex
from tsbapp.infrastructure.repositories.question_repo_impl import list_questions

logger = logging.getLogger(__name__)


def generate_round_documents(
    db: Session,
    round_code: str,
    output_dir: Optional[Path] = None,
    logo_path: Optional[Path] = None,
    compiler: Optional[str] = None,
    timeout: Optional[int] = None,
    compile_pdf: bool = True,
) -> dict:
    """Write ``{code}.tex`` and ``{code}-replacements.tex`` and compile them.

    The replacements PDF is only built when the round has replacement
    questions. Returns the file names produced, keyed by kind.
    Raises UnknownRoundCodeError, MarkupBuildError or CompilerError.
    """
    round_ = get_round(round_code)
    code, name, number = round_.code, round_.name, round_.number
    output_dir = Path(output_dir or config.GENERATED_DIR)
    logo_path = config.LOGO_PATH if logo_path is None else logo_path

    with round_lock(code):
        questions = list_questions(db, round=number)
        logger.info(f"Generating documents for {code} (round {number}) from {len(questions)} questions")

        try:
            main_layout = build_main_layout(questions, name)
            replacement_layout = build_replacement_layout(questions, f"{name} Replacements")
            main_source = render_document(main_layout)
            replacement_source = render_document(replacement_layout)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Could not build LaTeX for {code}: {e}", exc_info=True)
            raise MarkupBuildError(f"Could not build LaTeX for {code}: {e}") from e

        main_tex = write_tex(output_dir, code, main_source)
        replacement_tex = write_tex(output_dir, f"{code}-replacements", replacement_source)
        copy_logo(output_dir, logo_path, LOGO_FILENAME)

        files = {"tex": main_tex.name, "replacementsTex": replacement_tex.name}
        if compile_pdf:
            files["pdf"] = compile_tex(main_tex, compiler, timeout).name
            if replacement_layout.question_count:
                files["replacementsPdf"] = compile_tex(replacement_tex, compiler, timeout).name
            else:
                logger.info(f"No replacement questions for {code}; skipping replacements PDF")
                stale = replacement_tex.with_suffix(".pdf")
                if stale.exists():
                    logger.info(f"Removing stale {stale.name}")
                    stale.unlink()

    logger.info(f"Generated documents for {code}: {sorted(files.values())}")
    return {
        "round": code,
        "files": files,
        "questions": main_layout.question_count,
        "replacements": replacement_layout.question_count,
    }
