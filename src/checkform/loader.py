"""Load modules with their ``assert_that`` calls expanded."""

from __future__ import annotations

import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType

from checkform.transformers import rewrite_source

logger = logging.getLogger(__name__)


def load_module(path: Path | str, module_name: str | None = None) -> ModuleType:
    """Import the file at ``path`` after rewriting its ``assert_that`` calls.

    Args:
        path: Python source file to load.
        module_name: Name to register the module under in ``sys.modules``.
            Defaults to the file stem.

    Raises:
        SyntaxError: If the file is not valid Python, or one of its
            ``assert_that`` calls has a malformed check string.
    """
    path = Path(path).resolve()
    name = module_name or path.stem
    source = path.read_text(encoding="utf-8")
    code = compile(rewrite_source(source, str(path)), str(path), "exec")

    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None:
        raise ImportError(f"Cannot create a module spec for {path}")
    module = importlib.util.module_from_spec(spec)

    sys.modules[name] = module
    try:
        exec(code, module.__dict__)
    except BaseException:
        sys.modules.pop(name, None)
        raise
    logger.debug("Loaded %s as %s", path, name)
    return module
