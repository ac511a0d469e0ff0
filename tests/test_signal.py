from loopdeck.core.signal import SignalBridge, SignalEmitter


def test_emit_reaches_handlers_in_connect_order():
    bridge = SignalBridge()
    seen = []
    bridge.connect("ping", lambda v: seen.append(("a", v)))
    bridge.connect("ping", lambda v: seen.append(("b", v)))

    bridge.emit("ping", 1)

    assert seen == [("a", 1), ("b", 1)]


def test_failing_handler_does_not_stop_others(caplog):
    bridge = SignalBridge()
    seen = []

    def boom():
        raise RuntimeError("boom")

    bridge.connect("ping", boom)
    bridge.connect("ping", lambda: seen.append(1))
    bridge.emit("ping")

    assert seen == [1]
    assert "boom" in caplog.text


def test_disconnect_during_emit_is_deferred():
    bridge = SignalBridge()
    seen = []
    conn = None

    def once():
        seen.append("once")
        conn.disconnect()

    conn = bridge.connect("ping", once)
    bridge.connect("ping", lambda: seen.append("always"))

    bridge.emit("ping")
    bridge.emit("ping")

    assert seen == ["once", "always", "always"]


def test_blocked_signal_is_dropped():
    bridge = SignalBridge()
    seen = []
    bridge.connect("ping", lambda: seen.append(1))
    bridge.block("ping")
    bridge.emit("ping")
    bridge.unblock("ping")
    bridge.emit("ping")
    assert seen == [1]


def test_emitter_without_bridge_is_silent():
    emitter = SignalEmitter()
    emitter.emit("ping")
    assert emitter.connect("ping", print) is None
