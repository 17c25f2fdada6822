"""Login state kept in the Django session."""
SESSION_FLAG = 'pos_logged_in'
SESSION_USER = 'pos_username'


def login(request, username):
    # New session key on login so a pre-login cookie cannot be reused
    request.session.cycle_key()
    request.session[SESSION_FLAG] = True
    request.session[SESSION_USER] = username


def logout(request):
    request.session.flush()


def is_logged_in(request):
    session = getattr(request, 'session', None)
    return bool(session is not None and session.get(SESSION_FLAG))
