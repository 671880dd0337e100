"""Referral schemas."""

from pydantic import BaseModel


class ReferralCodeResponse(BaseModel):
    code: str
