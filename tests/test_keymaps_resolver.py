from __future__ import annotations

from markdown_engine.keymaps import (
    ActionRef,
    Binding,
    KeyChord,
    KeymapRegistry,
    KeymapResolver,
    WhenClause,
)


def make_action(action_id: str) -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    binding_id: str,
    *,
    chord: str = "ctrl+k",
    action_id: str = "format.test",
    when: tuple[WhenClause, ...] = (),
    priority: int = 0,
) -> Binding:
    return Binding(
        id=binding_id,
        chord=KeyChord.parse(chord),
        action_id=action_id,
        when=when,
        priority=priority,
    )


def build_registry(bindings: list[Binding]) -> KeymapRegistry:
    registry = KeymapRegistry()
    action_ids = {binding.action_id for binding in bindings}
    for action_id in action_ids:
        registry.register_action(make_action(action_id))
    for binding in bindings:
        registry.register_binding(binding)
    return registry


def test_resolver_matches_chord() -> None:
    binding = make_binding("shortcut.k")
    resolver = KeymapResolver(build_registry([binding]))

    result = resolver.resolve("ctrl+k")

    assert result.status == "match"
    assert result.match is not None
    assert result.match.binding.id == binding.id
    assert result.match.action.id == "format.test"


def test_resolver_reports_miss_for_unbound_chord() -> None:
    resolver = KeymapResolver(build_registry([make_binding("shortcut.k")]))

    assert resolver.resolve(KeyChord.parse("ctrl+j")).status == "miss"


def test_resolver_blocks_when_gate_fails() -> None:
    gated = make_binding(
        "shortcut.bold",
        chord="ctrl+b",
        when=(WhenClause("has_selection"),),
        action_id="format.bold",
    )
    resolver = KeymapResolver(build_registry([gated]))

    blocked = resolver.resolve("ctrl+b", context={"has_selection": False})
    assert blocked.status == "blocked"
    assert blocked.match is None

    hit = resolver.resolve("ctrl+b", context={"has_selection": True})
    assert hit.status == "match"
    assert hit.match is not None
    assert hit.match.binding.id == gated.id


def test_resolver_prefers_higher_priority() -> None:
    low = make_binding("low", when=(WhenClause("a"),), action_id="format.low")
    high = make_binding(
        "high", when=(WhenClause("b"),), action_id="format.high", priority=5
    )
    resolver = KeymapResolver(build_registry([low, high]))

    result = resolver.resolve("ctrl+k", context={"a": True, "b": True})

    assert result.match is not None
    assert result.match.binding.id == "high"


def test_resolver_sees_new_bindings() -> None:
    registry = build_registry([])
    resolver = KeymapResolver(registry)
    assert resolver.resolve("ctrl+x").status == "miss"

    registry.register_action(make_action("format.x"))
    registry.register_binding(make_binding("shortcut.x", chord="ctrl+x", action_id="format.x"))

    match = resolver.resolve("ctrl+x")
    assert match.status == "match"
    assert match.match is not None
    assert match.match.binding.id == "shortcut.x"
