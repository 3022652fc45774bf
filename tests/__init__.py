"""Test configuration."""

import os

os.environ["DEPSIZE_ENVIRONMENT"] = "testing"
os.environ.setdefault("DEPSIZE_LOG_LEVEL", "INFO")
