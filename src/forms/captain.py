from pydantic import Field

from forms import RequestForm


class ChangeCaptainForm(RequestForm):
    new_captain_id: str = Field(min_length=1)
