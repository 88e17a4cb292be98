from typing import Literal, Optional

from forms import RequestForm


class JoinAuctionForm(RequestForm):
    role: Literal['CAPTAIN', 'VIEWER'] = 'VIEWER'
    team_id: Optional[str] = None
