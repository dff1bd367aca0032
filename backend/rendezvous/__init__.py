from flask import Flask
import click
import os
from config import Config

from rendezvous.context import ServerContext
from rendezvous.stats import STATS_FILENAME, load_file, load_stats, save_file
from rendezvous.models import StatsLog


def load_config_overrides(flask_app, errors=None) -> None:
    """Overlay the optional JSON config file (lower-case keys) onto app.config."""
    path = flask_app.config.get('CONFIG_FILE')
    if not path:
        return
    overrides = load_file(path, errors)
    if overrides is None:
        return
    if not isinstance(overrides, dict):
        if errors is not None:
            errors.append(f"Could not load {path}: expected a JSON object")
        return
    flask_app.config.update({key.upper(): value for key, value in overrides.items()})
    flask_app.logger.info(f"[config] applied {len(overrides)} override(s) from {path}")


def create_app(config_class=Config, transport=None, clock=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    # Load failures are kept until the error log exists
    load_errors = []
    load_config_overrides(flask_app, load_errors)

    # Missing server keys raise here and stop the process
    ctx_kwargs = {'transport': transport, 'stats': load_stats(flask_app.config['LOG_DIR'], load_errors)}
    if clock is not None:
        ctx_kwargs['clock'] = clock
    ctx = ServerContext(flask_app.config, flask_app.logger, **ctx_kwargs)
    flask_app.extensions['rendezvous'] = ctx
    for message in load_errors:
        ctx.sink.error(message)

    # Import and register blueprints here
    from rendezvous.main import main
    flask_app.register_blueprint(main)

    from rendezvous.api.logs import logs
    # Log files are served straight from the root, e.g. /stats_log.json
    flask_app.register_blueprint(logs)

    @click.command('stats-reset')
    def stats_reset_command():
        """Zeroes the cumulative stats and rewrites the stats file."""
        ctx.sink.reset()
        log_dir = flask_app.config['LOG_DIR']
        os.makedirs(log_dir, exist_ok=True)
        save_file(StatsLog().to_dict(), os.path.join(log_dir, STATS_FILENAME))
        print('Stats have been reset!')

    @click.command('flush-logs')
    def flush_logs_command():
        """Writes buffered logs and stats to LOG_DIR now."""
        from rendezvous.services.scheduler import flush_logs
        written = flush_logs(flask_app, ctx)
        for path in written.values():
            print(path)

    flask_app.cli.add_command(stats_reset_command)
    flask_app.cli.add_command(flush_logs_command)

    return flask_app
