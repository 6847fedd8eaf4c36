"""Auditum command-line interface."""
