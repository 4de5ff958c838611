"""Levelled logging: plain or JSON messages to the console, a rotating file or both, written at once or by a background thread."""

__version__ = "0.1.0"
__all__ = ["config", "encoder", "writers", "linelog", "logger", "glog", "demo"]