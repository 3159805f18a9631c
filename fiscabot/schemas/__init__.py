"""
Pydantic schemas.
"""

from fiscabot.schemas.denuncia import LOCAL_ONLY_FIELDS, Denuncia, SubmissionResponse

__all__ = ["Denuncia", "LOCAL_ONLY_FIELDS", "SubmissionResponse"]
