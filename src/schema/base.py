#
# base.py - all tables should derive
#
#
import uuid

from main import db
import utils


def new_id():
    return str(uuid.uuid4())


class Base(db.Model):
    __abstract__ = True

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    created = db.Column(db.DateTime(), default=utils.utcnow)
    updated = db.Column(db.DateTime(), default=utils.utcnow,
        onupdate=utils.utcnow)
