# gunicorn.conf.py
import os

# Worker configuration
wsgi_app = "fanzone.wsgi:application"
workers = int(os.getenv("GUNICORN_WORKERS", 2))
worker_class = "sync"
worker_connections = 1000
timeout = int(os.getenv("GUNICORN_TIMEOUT", 120))
keepalive = 2
max_requests = 1000
max_requests_jitter = 50

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("GUNICORN_LOG_LEVEL", "info")

# Process naming
proc_name = "fanzone-chat"

# Bind address
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")

# Behind the Koyeb proxy
forwarded_allow_ips = "*"
