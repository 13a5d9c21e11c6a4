# gunicorn.conf.py
import os

# PDF rendering is the slowest request; calculations return in milliseconds
timeout = 60
graceful_timeout = 30

# 'gthread' workers: report.plot_lock serializes pyplot across threads
worker_class = 'gthread'

# Concurrency settings
workers = int(os.environ.get("WEB_CONCURRENCY", 2))
threads = 4
bind = f"0.0.0.0:{os.environ.get('PORT', 5000)}"

# Logging
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = '-'
errorlog = '-'
