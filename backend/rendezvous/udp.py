import socket
import threading

from rendezvous.router import handle_datagram

# Largest possible UDP datagram; recvfrom truncates silently past the buffer
BUF_SIZE = 65535


class UDPServer:
    """Single receive loop; each datagram is fully handled before the next."""

    def __init__(self, ctx, host: str = '0.0.0.0', port: int = 63567):
        self.ctx = ctx
        self.host = host
        self.port = port
        self.sock = None
        self._stopped = threading.Event()

    def bind(self):
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((self.host, self.port))
        self.sock = sock
        self.ctx.bind_transport(sock)
        address = sock.getsockname()
        self.ctx.sink.debug(f"The socket is now listening to {address[0]}:{address[1]}")
        return sock

    def serve_forever(self):
        if self.sock is None:
            self.bind()
        while not self._stopped.is_set():
            try:
                data, addr = self.sock.recvfrom(BUF_SIZE)
            except OSError as exc:
                if self._stopped.is_set():
                    break
                self.ctx.sink.error(f"[recv-error] {exc}")
                continue
            handle_datagram(self.ctx, data, addr)

    def start_background(self) -> threading.Thread:
        if self.sock is None:
            self.bind()
        thread = threading.Thread(target=self.serve_forever, name='udp-rendezvous', daemon=True)
        thread.start()
        return thread

    def stop(self):
        self._stopped.set()
        if self.sock is not None:
            self.sock.close()
