"""Statsgatherer listeners — host event entry points and their registration."""
