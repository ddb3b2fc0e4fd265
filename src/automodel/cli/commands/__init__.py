"""CLI command implementations for automodel.

This module contains the command implementations:
- check: Run a model selection for a prompt
- config: Manage configuration
"""
