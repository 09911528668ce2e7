from .config import CodecConfig

__all__ = ["CodecConfig"]
