# src/fencecat/utils/tokenizer.py
import logging

import tiktoken

logger = logging.getLogger(__name__)

ENCODINGS = ("cl100k_base", "p50k_base")


class Tokenizer:
    _encoding = None
    _unavailable = False

    @classmethod
    def get_encoding(cls):
        """
        Loads the first encoding that works. tiktoken fetches BPE files on
        first use, so this can fail offline; callers then fall back to an
        estimate.
        """
        if cls._encoding is None and not cls._unavailable:
            for name in ENCODINGS:
                try:
                    cls._encoding = tiktoken.get_encoding(name)
                    break
                except Exception as e:
                    logger.debug("tiktoken encoding %s unavailable: %s", name, e)
            else:
                cls._unavailable = True
                logger.warning("No tiktoken encoding could be loaded; token counts are estimates")
        return cls._encoding

    @staticmethod
    def count(text: str) -> int:
        """Estimates token count for a given text."""
        encoding = Tokenizer.get_encoding()
        if encoding is None:
            return len(text) // 4
        return len(encoding.encode(text, disallowed_special=()))
