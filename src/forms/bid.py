from typing import Optional

from pydantic import Field

from forms import RequestForm


class OpenRoundForm(RequestForm):
    player_id: str = Field(min_length=1)
    tier_id: Optional[str] = None
    base_price: int = Field(default=0, ge=0)


class SealedBidForm(RequestForm):
    team_id: str = Field(min_length=1)
    amount: int = Field(gt=0)


class RaisePaddleForm(RequestForm):
    team_id: str = Field(min_length=1)
