"""Support ticket tracking service."""
