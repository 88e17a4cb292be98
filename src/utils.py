#
# utils.py - various things
#
#
import datetime
import http

import errors


#
# helpers
#
def isok(code):
    """
    Status code is in the 200 range
    """
    return code >= 200 and code < 300


def jsonify(code=http.HTTPStatus.OK, **kwargs):
    import flask
    r = flask.jsonify(**kwargs)
    r.status_code = code
    return r


def json_body():
    """
    The request's JSON object; anything else is a validation error
    """
    import flask
    data = flask.request.get_json(silent=True)
    if not isinstance(data, dict):
        raise errors.ValidationError("Request body must be a JSON object")
    return data


#
# time
#
def utcnow():
    """ Naive UTC timestamp, which is what the DateTime columns hold """
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


def isoformat(value):
    if value is None:
        return None
    return value.isoformat()
