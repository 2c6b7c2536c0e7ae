"""Validation package."""

from couple_tracker.validation.validator import DateRecordValidator

__all__ = ["DateRecordValidator"]
