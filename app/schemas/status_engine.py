"""Pydantic schemas for status engine administration."""

from pydantic import BaseModel


class SweepResponse(BaseModel):
    message: str
    scanned: int
    moved: int
    skipped: bool
