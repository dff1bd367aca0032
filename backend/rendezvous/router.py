from rendezvous.models import Endpoint, MessageType
from rendezvous.protocol import (
    MalformedPacket,
    UndecodablePacket,
    UnknownMessageType,
    decode_packet,
    keys_match,
    validate_payload,
)

RANDOM_MATCHMAKING = 'random_matchmaking'
PRIVATE_LOBBY = 'private_lobby'

# Which shared secret gates each request type
KEY_FAMILY = {
    MessageType.RANDOM_MATCHMAKING_BEGIN: RANDOM_MATCHMAKING,
    MessageType.RANDOM_MATCHMAKING_CANCEL: RANDOM_MATCHMAKING,
    MessageType.HOLEPUNCHING_BEGIN: RANDOM_MATCHMAKING,
    MessageType.HOLEPUNCHING_CANCEL: RANDOM_MATCHMAKING,
    MessageType.PRIVATE_LOBBY_RESERVE: PRIVATE_LOBBY,
    MessageType.PRIVATE_LOBBY_FIND: PRIVATE_LOBBY,
    MessageType.PRIVATE_LOBBY_FREE: PRIVATE_LOBBY,
}


def handle_datagram(ctx, raw: bytes, address) -> None:
    """Process one inbound datagram to completion.

    Never raises: every failure ends up as a counter, an error-log entry, or
    both. Malformed packets and bad keys never get a reply.
    """
    ctx.sink.incr('received_packets')
    endpoint = Endpoint(address[0], address[1])
    try:
        _route(ctx, raw, endpoint)
    except UndecodablePacket as exc:
        ctx.sink.error(f"[undecodable] {endpoint.ip}:{endpoint.port}: {exc}")
    except MalformedPacket as exc:
        ctx.sink.incr('invalid_packets')
        ctx.logger.debug(f"[malformed] {endpoint.ip}:{endpoint.port}: {exc}")
    except UnknownMessageType:
        ctx.sink.incr('invalid_typed_packets')
    except Exception as exc:
        ctx.sink.error(f"[packet-error] {endpoint.ip}:{endpoint.port}: {exc!r}")


def _route(ctx, raw: bytes, endpoint: Endpoint) -> None:
    packet = decode_packet(raw)

    registries = ctx.registries_for(packet.version)
    if registries is None:
        ctx.responder.send(
            MessageType.INCORRECT_VERSION,
            f"Your game's version ({packet.version}) is not supported by the matchmaking server.",
            endpoint,
        )
        return

    msg_type = packet.message_type()
    family = KEY_FAMILY.get(msg_type)
    if family is not None and not keys_match(packet.key(family), ctx.server_keys[family]):
        return
    data = validate_payload(msg_type, packet.data)

    if msg_type == MessageType.RANDOM_MATCHMAKING_BEGIN:
        registries.matchmaking.begin(ctx, endpoint)
    elif msg_type == MessageType.RANDOM_MATCHMAKING_CANCEL:
        registries.matchmaking.cancel(ctx, endpoint)
    elif msg_type == MessageType.HOLEPUNCHING_BEGIN:
        ctx.holepunch.begin(ctx, data, endpoint)
    elif msg_type == MessageType.HOLEPUNCHING_CANCEL:
        ctx.holepunch.cancel(ctx, data, endpoint)
    elif msg_type == MessageType.PRIVATE_LOBBY_RESERVE:
        registries.lobbies.reserve(ctx, data, endpoint)
    elif msg_type == MessageType.PRIVATE_LOBBY_FIND:
        registries.lobbies.find(ctx, data, endpoint)
    elif msg_type == MessageType.PRIVATE_LOBBY_FREE:
        registries.lobbies.free(ctx, endpoint)
    elif msg_type == MessageType.FETCH_NEWS:
        fetch_news(ctx, data, endpoint)
    else:
        # Server-to-client types are never valid requests
        raise UnknownMessageType(packet.type)


def fetch_news(ctx, client_version, endpoint: Endpoint) -> None:
    if client_version != ctx.latest_version:
        message = f"A new version of Bear Bash is available! ({ctx.latest_version})"
    else:
        message = ctx.news
    ctx.responder.send(MessageType.NEWS, message, endpoint)
