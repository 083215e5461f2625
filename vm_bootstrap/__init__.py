"""Resolve the most specific bootstrap shell script for a newly provisioned VM."""

__version__ = "0.1.0"
