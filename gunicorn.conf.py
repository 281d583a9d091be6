# gunicorn.conf.py  (run: gunicorn -c gunicorn.conf.py natalchart.main:app)
import multiprocessing, os

bind = f"0.0.0.0:{os.getenv('PORT','5000')}"
workers = max(2, multiprocessing.cpu_count())  # pure CPU-bound chart math, no I/O
threads = 1
worker_class = "sync"
timeout = 30
graceful_timeout = 10
keepalive = 2
accesslog = "-"   # stdout
errorlog = "-"    # stderr
loglevel = os.getenv("LOGLEVEL", "info")

# add request id if present
access_log_format = (
    '%(h)s - "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" '
    'req_id:%({X-Request-ID}i)s rt:%(L)s'
)
