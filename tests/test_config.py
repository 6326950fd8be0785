"""Tests for wayfinder.config — RouterConfig frozen dataclass."""

import pytest

from wayfinder.config import Ordering, ParamScope, RouterConfig, as_callables
from wayfinder.errors import ConfigurationError
from wayfinder.routing.route import Phase


def _hook() -> None:
    pass


def _other() -> None:
    pass


class TestRouterConfig:
    def test_defaults(self) -> None:
        cfg = RouterConfig()

        assert cfg.marker == "#!"
        assert cfg.base_url == "/"
        assert cfg.use_history is None
        assert cfg.omit_marker is False
        assert cfg.ordering is Ordering.NONE
        assert cfg.param_scope is ParamScope.ANCESTORS
        assert cfg.asynchronous is False
        assert cfg.not_found == ()

    def test_frozen(self) -> None:
        cfg = RouterConfig()

        with pytest.raises(AttributeError):
            cfg.asynchronous = True  # type: ignore[misc]

    def test_instances_do_not_share_state(self) -> None:
        a = RouterConfig.from_options(not_found=[_hook])
        b = RouterConfig()

        assert a.not_found == (_hook,)
        assert b.not_found == ()


class TestFromOptions:
    def test_ordering_from_string(self) -> None:
        assert RouterConfig.from_options(ordering="forward").ordering is Ordering.FORWARD
        assert RouterConfig.from_options(ordering="BACKWARD").ordering is Ordering.BACKWARD

    def test_ordering_false_means_none(self) -> None:
        assert RouterConfig.from_options(ordering=False).ordering is Ordering.NONE

    def test_unknown_ordering(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown ordering"):
            RouterConfig.from_options(ordering="sideways")

    def test_param_scope(self) -> None:
        assert RouterConfig.from_options(param_scope="path").param_scope is ParamScope.PATH

    def test_unknown_param_scope(self) -> None:
        with pytest.raises(ConfigurationError, match="param_scope"):
            RouterConfig.from_options(param_scope="everything")

    def test_single_not_found_normalized(self) -> None:
        assert RouterConfig.from_options(not_found=_hook).not_found == (_hook,)

    def test_hook_aliases(self) -> None:
        cfg = RouterConfig.from_options(on=_hook, before=[_hook, _other], after=_other)

        assert cfg.hooks_for(Phase.ENTERING) == (_hook,)
        assert cfg.hooks_for(Phase.ACTIVE) == (_hook, _other)
        assert cfg.hooks_for(Phase.LEAVING) == (_other,)

    def test_canonical_hook_names(self) -> None:
        cfg = RouterConfig.from_options(leaving=_hook)
        assert cfg.leaving_hooks == (_hook,)

    def test_field_names_for_hooks(self) -> None:
        cfg = RouterConfig.from_options(active_hooks=[_hook])
        assert cfg.active_hooks == (_hook,)

    def test_alias_and_phase_name_conflict(self) -> None:
        with pytest.raises(ConfigurationError, match="entering_hooks"):
            RouterConfig.from_options(on=_hook, entering=_other)

    def test_alias_and_field_name_conflict(self) -> None:
        with pytest.raises(ConfigurationError, match="leaving_hooks"):
            RouterConfig.from_options(leaving_hooks=_hook, after=_other)

    def test_unknown_option(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown router option"):
            RouterConfig.from_options(recurse="forward")


class TestAsCallables:
    def test_none(self) -> None:
        assert as_callables(None) == ()

    def test_list(self) -> None:
        assert as_callables([_hook, _other]) == (_hook, _other)

    def test_rejects_non_callable(self) -> None:
        with pytest.raises(ConfigurationError, match="Expected a callable"):
            as_callables([_hook, "nope"])  # type: ignore[list-item]
