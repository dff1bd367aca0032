import os
import threading
import time

from rendezvous.stats import STATS_FILENAME, save_file


_flush_started = threading.Event()


def flush_logs(app, ctx=None) -> dict:
    """Persist buffered logs and the stats counters, then clear the buffers.

    Writes ``<name> (<ms timestamp>).json`` for each non-empty buffer and
    always rewrites ``stats_log.json``. Returns the filenames written.
    """
    if ctx is None:
        ctx = app.extensions['rendezvous']
    log_dir = app.config['LOG_DIR']
    os.makedirs(log_dir, exist_ok=True)

    stamp = int(time.time() * 1000)
    buffers = ctx.sink.swap_buffers()
    written = {}
    for name in ('matches_log', 'debug_log', 'error_log'):
        entries = getattr(buffers, name)
        if not entries:
            continue
        path = os.path.join(log_dir, f"{name} ({stamp}).json")
        if save_file(entries, path):
            written[name] = path
        else:
            ctx.sink.error(f"Could not write {path}")

    stats_path = os.path.join(log_dir, STATS_FILENAME)
    if save_file(ctx.sink.snapshot(), stats_path):
        written['stats_log'] = stats_path
    else:
        ctx.sink.error(f"Could not write {stats_path}")

    app.logger.info(f"[flush] wrote {len(written)} file(s) to {log_dir}")
    return written


def schedule_log_flush(app) -> None:
    """Start the periodic flush worker.

    - No-ops in TESTING mode unless ENABLE_FLUSH_IN_TESTS is set
    - Ensures a single worker per process
    - Only touches the stats/log sink, never the registries
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_FLUSH_IN_TESTS'):
        return
    if _flush_started.is_set():
        app.logger.info("[flush-skip] worker already running")
        return
    _flush_started.set()

    interval = int(app.config.get('LOGGING_INTERVAL', 14400))
    app.logger.info(f"[flush-set] interval={interval}s dir={app.config['LOG_DIR']}")

    def _worker(delay: int):
        while True:
            time.sleep(delay)
            try:
                flush_logs(app)
            except OSError as exc:
                app.logger.error(f"[flush-error] {exc}")

    thread = threading.Thread(target=_worker, args=(interval,), name='log-flush', daemon=True)
    thread.start()
