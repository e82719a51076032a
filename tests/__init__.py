"""
Test suite for ClinicSync.

Covers the backend routes, the authorization gates and the client session layer.
"""
import os

# Set environment for testing
os.environ["TESTING"] = "1"
