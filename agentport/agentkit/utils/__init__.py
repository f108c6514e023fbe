"""Utility functions for agentkit."""

from agentkit.utils.identifiers import (
    generate_batch_id,
    generate_module_name,
    utc_timestamp,
)
from agentkit.utils.log_config import setup_logging

__all__ = [
    "generate_batch_id",
    "generate_module_name",
    "utc_timestamp",
    "setup_logging",
]
