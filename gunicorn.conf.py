"""
Gunicorn configuration for the Mooda API.

Env vars that override defaults:
  PORT     : TCP port to bind
  WORKERS  : number of worker processes (default: 1)

Keep WORKERS=1 when SCHEDULER_ENABLED=true: every worker process would
otherwise start its own nightly scheduler thread.
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

workers = int(os.environ.get("WORKERS", "1"))

worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5

# The manual analysis trigger runs synchronously; allow it to finish.
timeout = 300

loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'

graceful_timeout = 30
