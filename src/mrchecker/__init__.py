"""Automatic merge-request checker backed by language-model rule evaluation."""

__version__ = "0.1.0"
