import os

from flask import Blueprint, current_app, send_from_directory, abort, Response

logs = Blueprint('logs', __name__)


@logs.route('/<path:filename>', methods=['GET'])
def get_log_file(filename):
    """
    Serves a flushed log file by name. Only the basename of the request path
    is honoured, so nothing outside LOG_DIR is reachable.
    """
    name = os.path.basename(filename)
    log_dir = os.path.abspath(current_app.config['LOG_DIR'])
    if not name or not os.path.isfile(os.path.join(log_dir, name)):
        return Response('Not found', status=404, mimetype='text/plain')
    mimetype = 'application/json' if name.endswith('.json') else 'text/plain'
    try:
        return send_from_directory(log_dir, name, mimetype=mimetype)
    except OSError:
        abort(500)
