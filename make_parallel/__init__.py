"""
make_parallel - rotate a BIM element parallel to a reference element in plan.

The host application picks two elements and applies the resulting rotation;
this package resolves their directions and computes the rotation.
Command-line diagnostics run through main.py.
"""

from make_parallel.logging_config import (
    LogContext,
    configure_default_logging,
    get_logger,
    log_timing,
    setup_logging,
    timed,
)

__version__ = "1.0.0"

__all__ = [
    "setup_logging",
    "get_logger",
    "configure_default_logging",
    "log_timing",
    "timed",
    "LogContext",
]
