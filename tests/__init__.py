"""Test suite for the pytest-tasty package.

This package contains unit and integration tests validating action
classification, context composition, suite registration, pytest
integration, and the command-line interface.
"""
