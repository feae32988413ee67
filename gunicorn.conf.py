# gunicorn.conf.py - Production configuration
import multiprocessing
import os

# Environment-based configuration
env = os.getenv('FLASK_ENV', 'production')

# Server socket
bind = os.getenv('BIND', "0.0.0.0:8000")
backlog = 2048

# Worker processes
# Each request blocks on COS and the database, so scale with threads rather than async workers
workers = int(os.getenv('GUNICORN_WORKERS', multiprocessing.cpu_count() * 2 + 1))
worker_class = "gthread"
threads = int(os.getenv('GUNICORN_THREADS', 4))
timeout = 120  # 10 MiB uploads to COS on slow links
keepalive = 2

# Restart workers - more aggressive in production
max_requests = 1500 if env == 'production' else 1000
max_requests_jitter = 100 if env == 'production' else 50
preload_app = True

# Logging - environment specific
if env == 'production':
    errorlog = "/var/log/gunicorn/error.log"
    loglevel = "warning"
    accesslog = "/var/log/gunicorn/access.log"
else:
    errorlog = "-"  # stderr
    loglevel = "info"
    accesslog = "-"  # stdout

access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s"'

# Process naming
proc_name = f'cos-drive-{env}'

# Server mechanics
daemon = False
pidfile = None
user = None
group = None
tmp_upload_dir = None

def on_starting(server):
    server.log.info(f"Starting cos-drive in {env} mode")
