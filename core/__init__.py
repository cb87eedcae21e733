"""Shared configuration, logging and date utilities."""
