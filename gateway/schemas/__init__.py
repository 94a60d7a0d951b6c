# gateway/schemas/__init__.py
from gateway.schemas.sessions import ErrorOut, SessionRecord, VerifyOut

__all__ = ["ErrorOut", "SessionRecord", "VerifyOut"]
