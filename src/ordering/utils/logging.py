"""Logging helpers for the ordering context.

Process-wide configuration lives with the identity context; this module only
hands out loggers and quiets framework chatter.
"""

import logging

import structlog

# Suppress noisy library loggers
logging.getLogger("protean").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
