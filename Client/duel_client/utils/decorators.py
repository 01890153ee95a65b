"""
Transition Decorators

Contains decorators shared by the session controller and match engine
transition functions.
"""

from functools import wraps


def requires_live_session(f):
    """
    Decorator rejecting a transition once the connection has permanently failed.

    The session is frozen until the user restarts the client.
    """
    @wraps(f)
    def decorated_function(session, *args, **kwargs):
        from ..services.session_store import Transition

        if session.is_frozen:
            return Transition.reject(session, 'session frozen after connection failure')
        return f(session, *args, **kwargs)

    return decorated_function
