"""Trace store backends and data models."""
