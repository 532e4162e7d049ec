"""Household lookup and household-scoped authorization.

Endpoints:
  - GET proxy/bearer/api/v1/user/danji/household
  - POST getctoctoken
"""

from __future__ import annotations

from pyhthome._constants import AUTHORIZE_ENDPOINT, CLIENT_ID, HOUSEHOLD_ENDPOINT
from pyhthome._transport import Sender
from pyhthome.exceptions import HtAuthorizationError, HtNoApprovedHouseholdError
from pyhthome.models import HouseholdContext, HouseholdResponse, parse_model


def select_approved_household(response: HouseholdResponse) -> HouseholdContext:
    """Pick the first approved danji.

    Raises
    ------
    HtNoApprovedHouseholdError
        If no danji is flagged ``isApproved``.
    """
    for danji in response.result_data.danji_list:
        if danji.is_approved:
            return danji.context()
    raise HtNoApprovedHouseholdError("No approved household found")


async def fetch_household(http: Sender, token: str) -> HouseholdContext:
    response = await http.send("GET", HOUSEHOLD_ENDPOINT, token=token)
    response.raise_for_status("fetch household information")
    parsed = parse_model(HouseholdResponse, response.json(), endpoint=HOUSEHOLD_ENDPOINT)
    return select_approved_household(parsed)


async def authorize_household(http: Sender, token: str, household: HouseholdContext) -> None:
    """Upgrade *token* to control devices of *household*.

    The response body carries nothing the client needs; only the status
    matters.
    """
    response = await http.send(
        "POST",
        AUTHORIZE_ENDPOINT,
        token=token,
        json={
            "siteId": household.site_id,
            "dong": household.dong,
            "ho": household.ho,
            "clientId": CLIENT_ID,
        },
    )
    if not response.ok:
        raise HtAuthorizationError(f"Failed to update access token: {response.status} {response.reason}.")
