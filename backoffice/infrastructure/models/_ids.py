"""Primary key helpers shared by the ORM models."""

import uuid


def new_id() -> str:
    return str(uuid.uuid4())
