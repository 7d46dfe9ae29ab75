from slowapi import Limiter
from slowapi.util import get_remote_address

# Limiter único compartilhado pelos routers; registrado em app.state no main
limiter = Limiter(key_func=get_remote_address)
