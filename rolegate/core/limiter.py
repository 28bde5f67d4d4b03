"""SlowAPI limiter shared by main (app.state.limiter) and the route modules.

Credential endpoints are keyed by client address and limited harder than
graph writes; reads are not limited.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

LOGIN_LIMIT = "10/minute"
REGISTER_LIMIT = "5/minute"
REFRESH_LIMIT = "30/minute"
PASSWORD_CHANGE_LIMIT = "5/minute"
WRITE_ENDPOINT_LIMIT = "120/minute"

limit_auth = limiter.limit(LOGIN_LIMIT)
limit_register = limiter.limit(REGISTER_LIMIT)
limit_refresh = limiter.limit(REFRESH_LIMIT)
limit_password_change = limiter.limit(PASSWORD_CHANGE_LIMIT)
limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)
