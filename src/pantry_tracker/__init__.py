"""Household pantry tracking service."""
