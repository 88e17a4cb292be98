#
# schema - database tables and shared pydantic base
#
#
import pydantic


class StrictBaseModel(pydantic.BaseModel):
    """
    Value objects and stored JSON documents; unknown keys are rejected.
    """
    model_config = pydantic.ConfigDict(extra="forbid")


# import tables so that metadata is complete whenever schema is imported
from schema import base  # noqa: E402,F401
from schema import user  # noqa: E402,F401
from schema import club  # noqa: E402,F401
from schema import auction  # noqa: E402,F401
from schema import team  # noqa: E402,F401
from schema import rounds  # noqa: E402,F401
