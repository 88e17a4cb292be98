from typing import Optional

from pydantic import Field

from auction.outcry import OutcryConfig
from forms import RequestForm
from schema.auction import AuctionVisibility, BiddingType


class NewTeamForm(RequestForm):
    name: str = Field(min_length=1)


class CreateAuctionForm(RequestForm):
    name: str = Field(min_length=1, max_length=255)
    league_id: Optional[str] = None
    visibility: AuctionVisibility = AuctionVisibility.PRIVATE
    bidding_type: BiddingType = BiddingType.SEALED
    budget_per_team: int = Field(ge=0)
    # kept only for open outcry auctions
    outcry_config: Optional[OutcryConfig] = None
    teams: list[NewTeamForm] = Field(default_factory=list)


class TeamEntryForm(RequestForm):
    # existing team when set; a new team otherwise
    id: Optional[str] = None
    name: str = Field(min_length=1, max_length=255)
    captain_id: Optional[str] = None


class UpdateTeamsForm(RequestForm):
    teams: list[TeamEntryForm]
