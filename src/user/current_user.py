from flask_login import AnonymousUserMixin, UserMixin


class CurrentUser(UserMixin):
    """ The authenticated caller; wraps the User row for the request """

    def __init__(self, user):
        self.userid = user.id
        self.user = user

    def get_id(self):
        return self.userid

    def is_admin(self):
        return self.user.is_admin()


class Anonymous(AnonymousUserMixin):
    user = None
    userid = None

    def is_admin(self):
        return False
