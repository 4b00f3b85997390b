"""Source validation and console reporting."""

from salesdwh.validation.core import ValidationResult, ValidationRunner
from salesdwh.validation.reporter import ConsoleReporter

__all__ = ["ConsoleReporter", "ValidationResult", "ValidationRunner"]
