A = ('10.0.0.1', 5001)
B = ('10.0.0.2', 5002)
C = ('10.0.0.3', 5003)


def test_first_player_waits(ctx, send, transport):
    send(A, 'random_matchmaking_begin')
    assert transport.drain() == [
        (A, {'type': 'random_matchmaking_confirmation', 'data': 'Added to the list'}),
    ]
    assert len(ctx.versions['1.0.0'].matchmaking) == 1


def test_two_players_are_paired(ctx, send, transport):
    send(A, 'random_matchmaking_begin')
    transport.drain()
    send(B, 'random_matchmaking_begin')
    sent = transport.drain()
    # B is confirmed first, then both receive the same match id
    assert sent[0] == (B, {'type': 'random_matchmaking_confirmation', 'data': 'Added to the list'})
    found = [(addr, msg['data']) for addr, msg in sent if msg['type'] == 'random_matchmaking_found']
    assert found == [(A, 0), (B, 0)]
    assert len(ctx.versions['1.0.0'].matchmaking) == 0
    assert ctx.sink.stats.total_matches == 1


def test_match_ids_increase(ctx, send, transport):
    for addr in (A, B, C, ('10.0.0.4', 5004)):
        send(addr, 'random_matchmaking_begin')
    ids = [msg['data'] for _, msg in transport.drain() if msg['type'] == 'random_matchmaking_found']
    assert ids == [0, 0, 1, 1]
    assert ctx.match_id_counter == 2


def test_match_id_seeded_from_config(flask_app, ctx, send, transport):
    ctx.match_id_counter = 41
    send(A, 'random_matchmaking_begin')
    send(B, 'random_matchmaking_begin')
    assert [m['data'] for _, m in transport.drain() if m['type'] == 'random_matchmaking_found'] == [41, 41]


def test_repeat_begin_refreshes_without_duplicating(ctx, send, transport, clock):
    send(A, 'random_matchmaking_begin')
    clock.advance(5)
    send(A, 'random_matchmaking_begin')
    queue = ctx.versions['1.0.0'].matchmaking
    assert len(queue) == 1
    assert queue.entries[0].timestamp == clock.now
    assert transport.drain()[-1] == (A, {'type': 'random_matchmaking_confirmation', 'data': 'Already in the list'})


def test_stale_entry_is_swept_on_next_begin(ctx, send, transport, clock):
    send(A, 'random_matchmaking_begin')
    clock.advance(8)
    # Lazy expiry: nothing changes until the queue is touched again
    assert len(ctx.versions['1.0.0'].matchmaking) == 1
    send(B, 'random_matchmaking_begin')
    transport.drain()
    queue = ctx.versions['1.0.0'].matchmaking
    assert [e.endpoint for e in queue.entries] == [B]


def test_entry_at_timeout_boundary_survives(ctx, send, transport, clock):
    send(A, 'random_matchmaking_begin')
    clock.advance(7.9)
    send(B, 'random_matchmaking_begin')
    assert any(m['type'] == 'random_matchmaking_found' for _, m in transport.drain())


def test_versions_are_isolated(ctx, send, transport):
    send(A, 'random_matchmaking_begin', version='1.0.0')
    send(B, 'random_matchmaking_begin', version='1.1.0')
    assert not any(m['type'] == 'random_matchmaking_found' for _, m in transport.drain())
    assert len(ctx.versions['1.0.0'].matchmaking) == 1
    assert len(ctx.versions['1.1.0'].matchmaking) == 1


def test_cancel_removes_and_always_confirms(ctx, send, transport):
    send(A, 'random_matchmaking_cancel')
    send(B, 'random_matchmaking_begin')
    send(B, 'random_matchmaking_cancel')
    sent = transport.drain()
    assert sent[0] == (A, {'type': 'random_matchmaking_cancel_confirmation', 'data': 'Removed from the list'})
    assert sent[-1][1]['type'] == 'random_matchmaking_cancel_confirmation'
    assert len(ctx.versions['1.0.0'].matchmaking) == 0


def test_full_queue_logs_and_stays_silent(ctx, send, transport):
    queue = ctx.versions['1.0.0'].matchmaking
    queue.limit = 1
    send(A, 'random_matchmaking_begin')
    transport.drain()
    # A second arrival cannot be added with limit 1, so no pairing happens either
    send(B, 'random_matchmaking_begin')
    assert transport.drain() == []
    assert ctx.sink.buffers.error_log == ['Matchmaking list is full: 1']


def test_backlog_is_drained_in_one_pass(ctx, send, transport):
    queue = ctx.versions['1.0.0'].matchmaking
    queue.limit = 10
    from rendezvous.models import Endpoint, Entry
    queue.entries = [Entry(Endpoint(*A), ctx.now()), Entry(Endpoint(*B), ctx.now()), Entry(Endpoint(*C), ctx.now())]
    send(('10.0.0.4', 5004), 'random_matchmaking_begin')
    found = [addr for addr, m in transport.drain() if m['type'] == 'random_matchmaking_found']
    assert found == [A, B, C, ('10.0.0.4', 5004)]
    assert len(queue) == 0
    assert ctx.sink.stats.total_matches == 2


def test_matches_log_records_ips(ctx, send):
    send(A, 'random_matchmaking_begin')
    send(B, 'random_matchmaking_begin')
    assert ctx.sink.buffers.matches_log == [{'match_id': 0, 'ip1': '10.0.0.1', 'ip2': '10.0.0.2'}]


def test_matches_log_skipped_without_ip_logging(ctx, send):
    ctx.sink.log_connected_ips = False
    send(A, 'random_matchmaking_begin')
    send(B, 'random_matchmaking_begin')
    assert ctx.sink.buffers.matches_log == []
    assert ctx.sink.stats.total_matches == 1
