from typing import Any, Optional

from forms import RequestForm
from schema.auction import AuctionStatus


class StateForm(RequestForm):
    # any JSON; replaces the stored document when the key is sent
    queue_state: Any = None
    status: Optional[AuctionStatus] = None

    @property
    def has_queue_state(self):
        return 'queue_state' in self.model_fields_set
