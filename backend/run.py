import sys

from rendezvous import create_app
from rendezvous.services.scheduler import schedule_log_flush
from rendezvous.udp import UDPServer

try:
    app = create_app()
except RuntimeError as exc:
    print(exc, file=sys.stderr)
    sys.exit(1)


def main():
    ctx = app.extensions['rendezvous']
    udp = UDPServer(ctx, host=app.config['UDP_HOST'], port=app.config['UDP_PORT'])
    udp.start_background()
    schedule_log_flush(app)
    port = app.config['HTTP_PORT']
    ctx.sink.debug(f"HTTP server is running on http://localhost:{port}/")
    # Serve log files over HTTP; the UDP loop runs in its own thread
    app.run(host='0.0.0.0', port=port)


if __name__ == '__main__':
    main()
