from pydantic import Field

from forms import RequestForm


class SaleForm(RequestForm):
    player_id: str = Field(min_length=1)
    team_id: str = Field(min_length=1)
    amount: int = Field(gt=0)
