from src.changes.submitter import ChangeRequest, ChangeSubmitter, describe_change

__all__ = [
    "ChangeRequest",
    "ChangeSubmitter",
    "describe_change",
]
