# Gunicorn configuration for the ClinicVoice API
import os
import sys

# Add src directory to Python path
current_dir = os.path.dirname(os.path.abspath(__file__))
src_path = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

# Server socket
bind = f"0.0.0.0:{os.environ.get('PORT', 8000)}"
backlog = 2048

# Worker processes; visit numbering locks are per process, the unique
# (patient_id, visit_number) index covers the rest
workers = int(os.environ.get('WEB_CONCURRENCY', 1))
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 1000
# Extraction calls can take most of a minute
timeout = 90
keepalive = 2

max_requests = 1000
max_requests_jitter = 50

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.environ.get('LOG_LEVEL', 'info').lower()

proc_name = "clinicvoice-api"

preload_app = True
daemon = False

wsgi_app = "clinicvoice.app:app"
