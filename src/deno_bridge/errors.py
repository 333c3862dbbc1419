"""Error handling for the deno bridge."""
import logging
from typing import Any, Dict, Optional, Sequence

from deno_bridge.logging import get_logger


def log_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None
) -> None:
    """Log an error with context."""
    logger = logger or get_logger(__name__)

    error_info = {
        "error_type": error.__class__.__name__,
        "error_message": str(error)
    }
    if context:
        error_info["context"] = context
    if isinstance(error, BridgeError):
        error_info["details"] = error.details

    logger.error("Bridge error occurred", extra={"data": error_info})


class BridgeError(Exception):
    """Base error class for the bridge."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class BinaryVerificationError(BridgeError):
    """Downloaded binary did not report a version."""
    def __init__(self, binary_path: str):
        super().__init__(
            "Could not read downloaded binary",
            details={"binary_path": str(binary_path)}
        )
        self.binary_path = str(binary_path)


class BinaryExecutionError(BridgeError):
    """Binary exited with a non-zero status."""
    def __init__(self, command: Sequence[str], returncode: int):
        command = [str(part) for part in command]
        super().__init__(
            f"Command {' '.join(command)} failed with exit code {returncode}",
            details={"command": command, "returncode": returncode}
        )
        self.command = command
        self.returncode = returncode
