"""Strongly typed identifiers for invite portal entities.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

InviteLogId = NewType("InviteLogId", UUID)
BulkJobId = NewType("BulkJobId", UUID)
