"""Household (danji) models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from pyhthome.models._base import HtBaseModel


class Danji(HtBaseModel):
    """A residence the account is linked to.

    Fields are mapped from the ``danjiList`` entries of the household
    endpoint.
    """

    site_id: str
    """Apartment complex (site) identifier."""
    dong: str
    """Building identifier."""
    ho: str
    """Unit identifier."""
    is_approved: bool = False
    """Whether the vendor approved this account for the residence."""
    site_name: str = ""
    site_address: str = ""
    homepage_domain: str = ""

    def context(self) -> HouseholdContext:
        return HouseholdContext(site_id=self.site_id, dong=self.dong, ho=self.ho)


class HouseholdResult(HtBaseModel):
    danji_list: list[Danji]


class HouseholdResponse(HtBaseModel):
    """Envelope of ``GET proxy/bearer/api/v1/user/danji/household``."""

    result_data: HouseholdResult


class HouseholdContext(BaseModel):
    """The (site, building, unit) triple a session is authorized for.

    Resolved on every refresh and never cached across refreshes, because
    the vendor ties it to the current login token.
    """

    model_config = ConfigDict(frozen=True)

    site_id: str
    dong: str
    ho: str
