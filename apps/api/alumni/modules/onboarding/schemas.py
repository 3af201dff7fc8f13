"""Onboarding schemas."""

from pydantic import BaseModel

from alumni.schemas.common import PhoneText, RequiredText, ShortText


class OnboardingProfileRequest(BaseModel):
    """Payload sent when a member completes the onboarding form."""

    full_name: RequiredText
    batch_year: int
    location_state: ShortText = None
    industry: ShortText = None
    job_title: ShortText = None
    phone: PhoneText = None
