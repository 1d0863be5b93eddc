# Gunicorn settings for the ScholarHub API.
# Run with: gunicorn -c gunicorn.conf.py
import os

wsgi_app = "scholarhub:create_app()"

# Bind & workers
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
threads = int(os.getenv("GUNICORN_THREADS", "4"))
timeout = 60
graceful_timeout = 30
keepalive = 5

# Each worker builds its own app, so the search-sync thread pool is created
# after fork rather than shared with the master.
preload_app = False

# Logs to stdout/stderr
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# Trust proxy headers
forwarded_allow_ips = "*"
proxy_protocol = False
