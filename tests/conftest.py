"""Test configuration and fixtures."""

import os
from pathlib import Path

import logfire

FIXTURES = Path(__file__).parent / "fixtures"

# Settings are read from the environment when the container is built
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("POLICY__PATH", str(FIXTURES / "invite-policies.json"))
os.environ.setdefault("ADMIN__GROUP", "admins")
os.environ.setdefault("AUTHENTIK__FLOW_SLUG", "default-enrollment-flow")
os.environ.setdefault("APP_NAME", "Example Community")

# Spans and logs stay local during tests
logfire.configure(send_to_logfire=False, console=False)
