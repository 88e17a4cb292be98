#
# forms - request bodies
#
#
import pydantic
from pydantic.alias_generators import to_camel

import errors


class RequestForm(pydantic.BaseModel):
    """
    JSON request body. Fields are snake_case in python and camelCase on
    the wire; unknown keys are dropped.
    """
    model_config = pydantic.ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore',
    )

    @classmethod
    def parse(cls, data):
        try:
            return cls.model_validate(data)
        except pydantic.ValidationError as e:
            raise errors.ValidationError(
                "Invalid request data", details=field_errors(e)) from e


def field_errors(exc):
    """ One {field, message} per failed field """
    return [
        {
            'field': '.'.join(str(part) for part in err['loc']),
            'message': err['msg'],
        }
        for err in exc.errors()
    ]
