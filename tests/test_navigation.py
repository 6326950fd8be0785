"""Tests for wayfinder.navigation — coordinator state machine and Navigator wiring."""

import pytest

from wayfinder.config import RouterConfig
from wayfinder.dispatch.engine import DispatchOutcome
from wayfinder.errors import UnsupportedEnvironment
from wayfinder.navigation import Navigator, compose_url, parse_location
from wayfinder.router import Router
from wayfinder.testing import MemoryNavigator, Recorder


def _router(nav: MemoryNavigator | None, calls: Recorder, **options: object) -> Router:
    r = Router(navigator=nav, **options)
    r.define("id", r"(\d+)")
    for path in ("/", "/home", "/users/<id>"):
        r.route("entering", path, calls.handler(f"enter {path}"))
        r.route("active", path, calls.handler(f"active {path}"))
        r.route("leaving", path, calls.handler(f"leave {path}"))
    return r


class TestComposeUrl:
    def test_root_is_base(self) -> None:
        assert compose_url("/", RouterConfig(base_url="/app/")) == "/app/"

    def test_with_marker(self) -> None:
        assert compose_url("/users/42", RouterConfig(base_url="/app/")) == "/app/#!/users/42"

    def test_without_marker(self) -> None:
        cfg = RouterConfig(base_url="/app/", omit_marker=True)
        assert compose_url("/users/42", cfg) == "/app/users/42"


class TestParseLocation:
    def test_marker(self) -> None:
        assert parse_location("#!/users/42", RouterConfig()) == "/users/42"

    def test_plain_hash_is_not_a_route(self) -> None:
        assert parse_location("#section-2", RouterConfig()) is None

    def test_base_url_when_marker_omitted(self) -> None:
        cfg = RouterConfig(base_url="/app/", omit_marker=True)
        assert parse_location("/app/users/42", cfg) == "users/42"

    def test_custom_marker(self) -> None:
        assert parse_location("#/about", RouterConfig(marker="#")) == "/about"


class TestRequest:
    def test_entering_updates_state(self, calls: Recorder) -> None:
        r = _router(None, calls)
        assert r.initiated is False

        outcome = r.dispatch("entering", "users//42/")
        assert outcome is DispatchOutcome.MATCHED
        assert r.current_path == "/users/42"
        assert r.initiated is True

    def test_duplicate_entering_suppressed(self, nav: MemoryNavigator, calls: Recorder) -> None:
        r = _router(nav, calls)
        r.dispatch("entering", "/home")
        dispatched = list(calls.names)
        pushes = list(nav.pushed)

        assert r.dispatch("entering", "/home") is DispatchOutcome.SUPPRESSED
        assert calls.names == dispatched
        assert nav.pushed == pushes
        assert nav.assigned == []

    def test_suppression_skips_auto_hooks(self, calls: Recorder) -> None:
        r = _router(None, calls, on=calls.handler("hook"))
        r.dispatch("entering", "/home")
        r.dispatch("entering", "/home")

        assert calls.names == ["hook", "enter /home"]

    def test_active_for_current_path_suppressed(self, calls: Recorder) -> None:
        r = _router(None, calls)
        r.dispatch("entering", "/home")
        assert r.dispatch("active", "/home") is DispatchOutcome.SUPPRESSED

    def test_active_before_initiation_runs(self, calls: Recorder) -> None:
        r = _router(None, calls)
        assert r.dispatch("active", "/") is DispatchOutcome.MATCHED
        assert r.initiated is False

    def test_leaving_never_suppressed(self, calls: Recorder) -> None:
        r = _router(None, calls)
        r.dispatch("entering", "/home")
        r.dispatch("leaving", "/home")
        r.dispatch("leaving", "/home")

        assert calls.names == ["enter /home", "leave /home", "leave /home"]

    def test_unknown_phase_ignored(self, calls: Recorder) -> None:
        r = _router(None, calls, on=calls.handler("hook"))
        assert r.dispatch("during", "/home") is DispatchOutcome.IGNORED
        assert calls.calls == []

    def test_entering_not_found_still_becomes_current(self, nav: MemoryNavigator, calls: Recorder) -> None:
        r = _router(nav, calls, not_found=calls.handler("404"))
        assert r.dispatch("entering", "/nowhere") is DispatchOutcome.NOT_FOUND
        assert r.current_path == "/nowhere"
        assert nav.pushed == ["/#!/nowhere"]


class TestNavigate:
    def test_phase_order(self, calls: Recorder) -> None:
        r = _router(None, calls)
        r.dispatch("entering", "/home")
        calls.calls.clear()

        r.navigate("/users/7")
        assert calls.calls == [
            ("leave /home", ()),
            ("enter /users/<id>", ("7",)),
            ("active /users/<id>", ("7",)),
        ]
        assert r.current_path == "/users/7"

    def test_same_path_suppressed(self, calls: Recorder) -> None:
        r = _router(None, calls)
        r.navigate("/home")
        calls.calls.clear()

        assert r.navigate("/home/") is DispatchOutcome.SUPPRESSED
        assert calls.calls == []

    def test_returns_entering_outcome(self, calls: Recorder) -> None:
        r = _router(None, calls)
        assert r.navigate("/missing") is DispatchOutcome.NOT_FOUND


class TestReflect:
    def test_history_push_with_marker(self, calls: Recorder) -> None:
        nav = MemoryNavigator()
        r = _router(nav, calls, base_url="/app/")
        r.dispatch("entering", "/users/42")
        r.dispatch("entering", "/")

        assert nav.pushed == ["/app/#!/users/42", "/app/"]

    def test_history_push_without_marker(self, calls: Recorder) -> None:
        nav = MemoryNavigator()
        r = _router(nav, calls, omit_marker=True)
        r.dispatch("entering", "/users/42")

        assert nav.pushed == ["/users/42"]

    def test_location_fallback(self, calls: Recorder) -> None:
        nav = MemoryNavigator(supports_history=False)
        r = _router(nav, calls)
        r.dispatch("entering", "/home")

        assert nav.pushed == []
        assert nav.assigned == ["#!/home"]

    def test_config_overrides_navigator_capability(self, calls: Recorder) -> None:
        nav = MemoryNavigator(supports_history=True)
        r = _router(nav, calls, use_history=False)
        r.dispatch("entering", "/home")

        assert nav.assigned == ["#!/home"]

    def test_assignment_echo_does_not_redispatch(self, calls: Recorder) -> None:
        nav = MemoryNavigator("#!/", supports_history=False)
        r = _router(nav, calls)
        r.init()
        calls.calls.clear()

        r.dispatch("entering", "/home")
        assert calls.names == ["enter /home"]


class TestInit:
    def test_requires_navigator(self) -> None:
        with pytest.raises(UnsupportedEnvironment):
            Router().init()

    def test_requires_change_notification(self) -> None:
        class Deaf:
            supports_history = False

            def current_location(self) -> str:
                return ""

        r = Router(navigator=Deaf())  # type: ignore[arg-type]
        with pytest.raises(UnsupportedEnvironment):
            r.init()

    def test_memory_navigator_satisfies_protocol(self) -> None:
        assert isinstance(MemoryNavigator(), Navigator)

    def test_initial_sync_from_location(self, calls: Recorder) -> None:
        nav = MemoryNavigator("/#!/users/42")
        r = _router(nav, calls)
        r.init()

        assert calls.calls == [
            ("enter /users/<id>", ("42",)),
            ("active /users/<id>", ("42",)),
        ]
        assert r.current_path == "/users/42"
        assert r.initiated

    def test_initial_sync_waits_for_load(self, calls: Recorder) -> None:
        nav = MemoryNavigator("#!/home", loaded=False)
        r = _router(nav, calls)
        r.init()
        assert calls.calls == []

        nav.finish_loading()
        assert calls.names == ["enter /home", "active /home"]

    def test_explicit_path_strips_base_url(self, calls: Recorder) -> None:
        nav = MemoryNavigator()
        r = _router(nav, calls, base_url="/app/")
        r.init("/app/home")

        assert r.current_path == "/home"
        assert calls.names == ["enter /home", "active /home"]

    def test_unrecognized_location_syncs_root(self, calls: Recorder) -> None:
        nav = MemoryNavigator("#top")
        r = _router(nav, calls)
        r.init()

        assert r.current_path == "/"
        assert calls.names == ["enter /", "active /"]

    def test_user_navigation(self, calls: Recorder) -> None:
        nav = MemoryNavigator("#!/home")
        r = _router(nav, calls)
        r.init()
        calls.calls.clear()

        nav.go("#!/users/3")
        assert calls.names == ["leave /home", "enter /users/<id>", "active /users/<id>"]

    def test_user_navigation_to_plain_hash_ignored(self, calls: Recorder) -> None:
        nav = MemoryNavigator("#!/home")
        r = _router(nav, calls)
        r.init()
        calls.calls.clear()

        nav.go("#footnote")
        assert calls.calls == []
        assert r.current_path == "/home"

    def test_before_unload_dispatches_leaving(self, calls: Recorder) -> None:
        nav = MemoryNavigator("#!/home")
        r = _router(nav, calls)
        r.init()
        calls.calls.clear()

        nav.unload()
        assert calls.names == ["leave /home"]

    def test_reinit_replaces_subscriptions(self, calls: Recorder) -> None:
        nav = MemoryNavigator("#!/home")
        r = _router(nav, calls)
        r.init()
        r.init()
        calls.calls.clear()

        assert nav.listener_count == 2
        nav.go("#!/users/1")
        assert calls.names == ["leave /home", "enter /users/<id>", "active /users/<id>"]

    def test_reinit_does_not_resync(self, calls: Recorder) -> None:
        nav = MemoryNavigator("#!/home")
        r = _router(nav, calls)
        r.init()
        r.init()

        assert calls.names == ["enter /home", "active /home"]

    def test_teardown(self, calls: Recorder) -> None:
        nav = MemoryNavigator("#!/home")
        r = _router(nav, calls)
        r.init()
        r.teardown()
        calls.calls.clear()

        assert nav.listener_count == 0
        nav.go("#!/users/1")
        nav.unload()
        assert calls.calls == []
