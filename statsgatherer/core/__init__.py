"""Statsgatherer core — config inspection, record building, serialization."""
