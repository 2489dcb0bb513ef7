"""Kernel configuration modelling and validation, and a compact printf-style log formatter."""

__version__ = "0.1.0"
__all__ = ["build", "config", "hooks", "libspace", "logfmt", "rtx_os"]