import uuid


def gen_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


def positional_id(prefix: str, index: int) -> str:
    # Stable id for list items persisted without one; loading the same record twice must match.
    return f"{prefix}-{index}"
