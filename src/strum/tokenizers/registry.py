from __future__ import annotations

from typing import Callable, ClassVar, Dict, List, Optional

from strum.core.contracts import Tokenizer
from strum.core.exceptions import TokenizerRegistryError
from strum.models.decoder_config import DecoderConfig

# A factory builds a ready tokenizer from the decoder's settings.
TokenizerFactory = Callable[[DecoderConfig], Tokenizer]


class TokenizerRegistry:
    _registry: ClassVar[Dict[str, TokenizerFactory]] = {}

    @classmethod
    def register(
        cls,
        *,
        name: str,
        factory: TokenizerFactory,
        overwrite: bool = False,
    ) -> None:
        if not overwrite and name in cls._registry:
            existing = cls._registry[name]
            raise TokenizerRegistryError(f"Tokenizer already registered for name={name!r}: {existing}")
        cls._registry[name] = factory

    @classmethod
    def get(cls, name: str) -> TokenizerFactory:
        try:
            return cls._registry[name]
        except KeyError as exc:
            raise TokenizerRegistryError(
                f"No tokenizer registered for name={name!r} (known: {sorted(cls._registry)})"
            ) from exc

    @classmethod
    def try_get(cls, name: str) -> Optional[TokenizerFactory]:
        return cls._registry.get(name)

    @classmethod
    def names(cls) -> List[str]:
        return sorted(cls._registry)

    @classmethod
    def clear(cls) -> None:
        cls._registry.clear()


def register_tokenizer(
    name: str,
    *,
    overwrite: bool = False,
) -> Callable[[TokenizerFactory], TokenizerFactory]:
    def decorator(factory: TokenizerFactory) -> TokenizerFactory:
        TokenizerRegistry.register(name=name, factory=factory, overwrite=overwrite)
        return factory

    return decorator


def build_tokenizer(config: DecoderConfig) -> Tokenizer:
    """Resolve the configured strategy and build its tokenizer."""
    from strum.bootstrap import load_builtin_tokenizers

    load_builtin_tokenizers()
    return TokenizerRegistry.get(config.tokenizer)(config)
