# Gunicorn configuration for the expense API
from config import get_settings

settings = get_settings()

# Application factory
wsgi_app = "app:create_app()"

# Server socket
bind = f"{settings.host}:{settings.port}"

# Worker processes
workers = settings.web_concurrency
worker_class = "sync"
timeout = 30
keepalive = 10

# Restart workers periodically to keep memory flat on small instances
max_requests = 1000
max_requests_jitter = 50
preload_app = True

# Logging
accesslog = "-"
errorlog = "-"
loglevel = settings.log_level.lower()

proc_name = "expense_ledger"


def when_ready(server):
    server.log.info("Expense API ready on %s with %s worker(s)", bind, workers)
