"""
Error handling policies for treesync.

This module provides a flexible error handling system through the Policy pattern,
allowing users to define how failures of queued structural operations are reported.
A policy never stops the operation queue: whatever it does, the next queued
operation still starts.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional
import sys


class ErrorPolicy(ABC):
    """
    Base class for operation failure policies.

    Subclasses implement different strategies for reporting errors
    raised by queued operations.
    """

    @abstractmethod
    def handle(self, error: BaseException, operation_name: str, node: Any = None) -> None:
        """
        Report an error raised by a queued operation.

        Args:
            error: The exception that was raised (or CancelledError)
            operation_name: Name of the operation that failed (e.g., 'move')
            node: The tree node the operation was acting on, if known
        """
        pass

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts (empty for stateless policies)
        """
        return {}


def _describe_node(node: Any) -> Optional[str]:
    """Best-effort printable name for a node in error records."""
    if node is None:
        return None
    if hasattr(node, 'get_id'):
        return str(node.get_id())
    return str(node)


def _error_record(error: BaseException, operation_name: str, node: Any) -> dict:
    return {
        'node': _describe_node(node),
        'operation': operation_name,
        'error': error,
        'error_type': type(error).__name__,
        'error_message': str(error)
    }


class ContinueOnErrorsPolicy(ErrorPolicy):
    """
    Policy that logs errors and lets the queue continue.

    Errors are collected for later inspection. This is the default
    catch-all reporter of the operation queue.
    """

    def __init__(self, verbose: bool = True):
        """
        Initialize the policy.

        Args:
            verbose: If True, print warnings to stderr when errors occur
        """
        self.errors = []
        self.verbose = verbose

    def handle(self, error: BaseException, operation_name: str, node: Any = None) -> None:
        """Record the error and optionally print a warning."""
        record = _error_record(error, operation_name, node)
        self.errors.append(record)

        if self.verbose:
            target = record['node'] if record['node'] is not None else 'unknown'
            print(f"\nWARNING: Error in {operation_name} for node '{target}': {error}",
                  file=sys.stderr)

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        return {
            'total_errors': len(self.errors),
            'cancelled': sum(1 for e in self.errors if e['error_type'] == 'CancelledError'),
            'errors': self.errors  # Full error details
        }


class CollectErrorsPolicy(ContinueOnErrorsPolicy):
    """
    Policy that collects all errors without printing, for batch processing.

    Useful in tests and for presenting all errors at the end.
    """

    def __init__(self):
        """Initialize the policy."""
        super().__init__(verbose=False)


class CallbackPolicy(ErrorPolicy):
    """Policy that forwards every error to a user-supplied callable."""

    def __init__(self, on_error: Callable[[BaseException, str, Any], None]):
        self.on_error = on_error
        self.error_count = 0

    def handle(self, error: BaseException, operation_name: str, node: Any = None) -> None:
        self.error_count += 1
        self.on_error(error, operation_name, node)

    def get_statistics(self) -> dict:
        return {'total_errors': self.error_count}


def create_error_policy(verbose: bool = True,
                        on_error: Optional[Callable[[BaseException, str, Any], None]] = None) -> ErrorPolicy:
    """
    Convenience function to create the queue's error policy.

    Args:
        verbose: If True, print warnings for errors (ignored when on_error is given)
        on_error: Optional callback receiving (error, operation_name, node)

    Returns:
        A CallbackPolicy when on_error is given, otherwise a ContinueOnErrorsPolicy
    """
    if on_error is not None:
        return CallbackPolicy(on_error)
    return ContinueOnErrorsPolicy(verbose=verbose)
