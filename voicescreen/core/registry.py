"""Registry of audio decoders available to the screening pipeline"""

import logging
from typing import Dict, Type, Optional, List, Any

from voicescreen.core.base import AudioDecoder

logger = logging.getLogger(__name__)


class DecoderRegistry:
    """Registry for audio decoders"""

    def __init__(self):
        self._decoders: Dict[str, Type[AudioDecoder]] = {}
        self._metadata: Dict[str, Dict[str, Any]] = {}

    def register(self,
                 name: str,
                 decoder_class: Type[AudioDecoder],
                 metadata: Optional[Dict[str, Any]] = None,
                 override: bool = False):
        """
        Register a decoder in the registry

        Args:
            name: Name to register decoder under
            decoder_class: Decoder class (must inherit from AudioDecoder)
            metadata: Additional metadata about the decoder
            override: Whether to override existing registration
        """
        if not (isinstance(decoder_class, type) and issubclass(decoder_class, AudioDecoder)):
            raise ValueError(f"{decoder_class} must inherit from AudioDecoder")

        if name in self._decoders and not override:
            raise ValueError(f"Decoder '{name}' already registered. Use override=True to replace.")

        self._decoders[name] = decoder_class
        self._metadata[name] = metadata if metadata is not None else {
            'class_name': decoder_class.__name__,
            'module': decoder_class.__module__,
        }

        logger.info(f"Registered decoder '{name}' ({decoder_class.__name__})")

    def get(self, name: str) -> Type[AudioDecoder]:
        """Get decoder class by name"""
        if name not in self._decoders:
            raise KeyError(f"Decoder '{name}' not found in registry. "
                           f"Available decoders: {self.list_decoders()}")
        return self._decoders[name]

    def create(self, name: str, **kwargs) -> AudioDecoder:
        """Create an (unopened) decoder instance"""
        decoder = self.get(name)(**kwargs)
        logger.debug(f"Created decoder '{name}': {decoder!r}")
        return decoder

    def list_decoders(self) -> List[str]:
        return list(self._decoders.keys())

    def get_metadata(self, name: str) -> Dict[str, Any]:
        return self._metadata.get(name, {})

    def __contains__(self, name: str) -> bool:
        return name in self._decoders

    def __len__(self) -> int:
        return len(self._decoders)

    def __repr__(self) -> str:
        return f"DecoderRegistry({len(self._decoders)} decoders registered)"


# Global registry instance
_global_registry = DecoderRegistry()


def register_decoder(name: str,
                     decoder_class: Type[AudioDecoder] = None,
                     metadata: Optional[Dict[str, Any]] = None,
                     override: bool = False):
    """
    Register a decoder in the global registry

    Can be used as a decorator:
    @register_decoder("my_decoder")
    class MyDecoder(AudioDecoder):
        ...

    Or as a function:
    register_decoder("my_decoder", MyDecoder)
    """
    def decorator(cls):
        _global_registry.register(name, cls, metadata, override)
        return cls

    if decoder_class is None:
        return decorator
    _global_registry.register(name, decoder_class, metadata, override)


def get_decoder(name: str) -> Type[AudioDecoder]:
    """Get decoder class from global registry"""
    return _global_registry.get(name)


def create_decoder(name: str, **kwargs) -> AudioDecoder:
    """Create decoder instance from global registry"""
    return _global_registry.create(name, **kwargs)


def list_decoders() -> List[str]:
    """List all decoders in global registry"""
    return _global_registry.list_decoders()
