"""Test suite for the restdo package.

This package contains unit and integration tests validating document
cursor behavior, body normalization, do section parsing, and error
reporting for declarative REST test steps.
"""
