"""
Custom exceptions for ethgas.

The attribution core never raises for missing chain data, reverted
transactions or unresolvable calls; those are recovered locally. The
exceptions below cover the ambient layers: RPC connectivity, configuration,
artifact loading and misuse of a finished run.
"""

import json
from typing import Any, Dict, Optional


class EthGasError(Exception):
    """
    Base exception for all ethgas errors.

    Attributes:
        message: Human-readable error message
        details: Additional context as key-value pairs
        error_code: Optional error code for programmatic handling
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON serialization."""
        return {
            "error": True,
            "type": self.error_code,
            "message": self.message,
            **self.details
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert exception to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)


# ============================================================================
# Connection Errors
# ============================================================================

class RPCConnectionError(EthGasError):
    """Raised when the RPC endpoint cannot be reached."""

    def __init__(self, message: str, rpc_url: Optional[str] = None, **kwargs):
        details = {"rpc_url": rpc_url} if rpc_url else {}
        details.update(kwargs)
        super().__init__(message, details, "RPCConnectionError")


# ============================================================================
# Configuration Errors
# ============================================================================

class ConfigError(EthGasError):
    """Raised when reporter configuration is invalid."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        details = {"path": path} if path else {}
        details.update(kwargs)
        super().__init__(message, details, "ConfigError")


# ============================================================================
# Artifact Errors
# ============================================================================

class ArtifactError(EthGasError):
    """Raised when a compiled contract artifact cannot be read."""

    def __init__(self, message: str, artifact: Optional[str] = None, **kwargs):
        details = {"artifact": artifact} if artifact else {}
        details.update(kwargs)
        super().__init__(message, details, "ArtifactError")


class ArtifactsNotFoundError(ArtifactError):
    """Raised when the artifacts directory does not exist."""

    def __init__(self, path: str, **kwargs):
        super().__init__(
            f"Artifacts directory not found: {path}",
            artifact=path,
            **kwargs
        )
        self.error_code = "ArtifactsNotFoundError"


# ============================================================================
# Run Errors
# ============================================================================

class RunFinishedError(EthGasError):
    """Raised when a finished gas run is asked to attribute more gas."""

    def __init__(self, operation: str):
        super().__init__(
            f"Cannot {operation}: the gas run has already finished",
            {"operation": operation},
            "RunFinishedError"
        )


# ============================================================================
# Error Formatting Utilities
# ============================================================================

def format_error(e: Exception, json_mode: bool = False) -> str:
    """
    Format an exception for display.

    Args:
        e: The exception to format
        json_mode: If True, output as JSON; otherwise use colored text

    Returns:
        Formatted error string
    """
    from ethgas.utils.colors import error

    if isinstance(e, EthGasError):
        if json_mode:
            return e.to_json()
        return error(e.message)
    if json_mode:
        return json.dumps({
            "error": True,
            "type": type(e).__name__,
            "message": format_exception_message(e)
        }, indent=2)
    return error(format_exception_message(e))


def format_exception_message(e: Exception) -> str:
    """
    Extract a clean, user-friendly error message from any exception.

    Args:
        e: Exception instance

    Returns:
        Clean error message string
    """
    # Web3RPCError and similar carry the RPC error object as args[0]
    if e.args:
        first_arg = e.args[0]
        if isinstance(first_arg, dict):
            return first_arg.get('message', str(e))
        return str(first_arg)
    return str(e)
