"""Domain models for the pantry tracker."""
