from __future__ import annotations

import importlib
import sys
from typing import Iterable


BUILTIN_TOKENIZER_MODULES: tuple[str, ...] = (
    "strum.tokenizers.builtin",
)


_LOADED = False


def load_builtin_tokenizers(*, reload: bool = False, modules: Iterable[str] = BUILTIN_TOKENIZER_MODULES) -> None:
    """Import built-in tokenizer modules so their decorators register them.

    Decoders call this lazily; only the first call imports anything.
    reload=True clears the registry first and re-runs the decorators, which
    restores the built-in strategies after a test has replaced them.
    """

    global _LOADED

    if _LOADED and not reload:
        return

    if reload:
        from strum.tokenizers.registry import TokenizerRegistry

        TokenizerRegistry.clear()

    for module_name in modules:
        if reload:
            sys.modules.pop(module_name, None)
        importlib.import_module(module_name)

    _LOADED = True
