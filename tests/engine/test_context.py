# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Tests for resource context construction, phases, defaults and nesting.
"""

import asyncio

import pytest

from rcrender.engine import (
    DuplicatePrimaryError,
    MalformedObjectOutputError,
    ResourceContext,
    ResourceStateError,
    UnknownDirectiveError,
    UnknownResourceError,
    UnsupportedOutputModeError,
)
from rcrender.engine.directives import DirectiveKind


async def _render(app, name, in_data=None):
    ctx = ResourceContext(app, name, in_data)
    out = await ctx.process()
    return ctx, out


class TestConstruction:
    def test_root_mode(self, make_app):
        app = make_app({"page": [{"raw": "a"}]})
        ctx = ResourceContext(app, "page", "seed")
        assert ctx.depth == 0
        assert ctx.root is ctx
        assert ctx.parent is app
        assert ctx.app is app
        assert ctx.in_data == "seed"
        assert [op.directives for op in ctx.operations] == [{"raw": "a"}]
        assert all(not queue for queue in ctx.queues.values())

    def test_nested_mode(self, make_app):
        app = make_app({"page": [{"raw": "a"}]})
        root = ResourceContext(app, "page")
        child = ResourceContext(root, "page", "seed")
        grandchild = ResourceContext(child, "page")
        assert child.depth == 1
        assert grandchild.depth == 2
        assert child.root is root
        assert grandchild.root is root
        assert grandchild.parent_depth == 1
        assert child.operations is None
        assert not hasattr(child, "parent")
        assert child.app is app
        assert root.children == [child, grandchild]
        assert (child.index, grandchild.index) == (0, 1)

    def test_unknown_resource(self, make_app):
        with pytest.raises(UnknownResourceError):
            ResourceContext(make_app({}), "missing")

    def test_definition_is_copied(self, make_app):
        definition = [{"raw": {"k": "v"}}]
        app = make_app({"page": definition})
        ctx = ResourceContext(app, "page")
        ctx.operations[0].directives["raw"]["k"] = "changed"
        assert app.resources["page"].main == [{"raw": {"k": "v"}}]


class TestProcess:
    @pytest.mark.asyncio
    async def test_default_output_is_raw(self, make_app):
        app = make_app({"page": [{"raw": "a"}, {"raw": "b"}, {"raw": "c"}]})
        ctx, out = await _render(app, "page")
        assert out == "abc"
        assert ctx.operations[-1].directives == {"out": "raw"}

    @pytest.mark.asyncio
    async def test_default_input_is_seed(self, make_app):
        seed = {"k": [1, 2]}
        app = make_app({"page": [{"raw": "a"}]})
        ctx, _ = await _render(app, "page", seed)
        assert ctx.in_value is seed
        assert ctx.operations[0].directives == {"in": "raw"}

    @pytest.mark.asyncio
    async def test_defaults_keep_positions(self, make_app):
        app = make_app({"page": [{"raw": "x"}]})
        ctx, out = await _render(app, "page")
        assert [op.directives for op in ctx.operations] == [{"in": "raw"}, {"raw": "x"}, {"out": "raw"}]
        assert out == "x"

    @pytest.mark.asyncio
    async def test_explicit_in_and_out_are_not_duplicated(self, make_app):
        app = make_app({"page": [{"in": "raw"}, {"raw": "a"}, {"raw": "b"}, {"out": "first_serve"}]})
        ctx, out = await _render(app, "page", "seed")
        assert out == "a"
        assert len(ctx.operations) == 4
        assert len(ctx.queues[DirectiveKind.input]) == 1
        assert len(ctx.queues[DirectiveKind.output]) == 1
        assert ctx.in_value == "seed"

    @pytest.mark.asyncio
    async def test_stored_definition_untouched(self, make_app):
        app = make_app({"page": [{"raw": "a"}]})
        await _render(app, "page")
        _, out = await _render(app, "page")
        assert app.resources["page"].main == [{"raw": "a"}]
        assert out == "a"

    @pytest.mark.asyncio
    async def test_object_output(self, make_app):
        app = make_app({"page": [{"raw": '{"x":1'}, {"raw": "}"}, {"out": "object"}]})
        _, out = await _render(app, "page")
        assert out == {"x": 1}

    @pytest.mark.asyncio
    async def test_malformed_object_output(self, make_app):
        app = make_app({"page": [{"raw": '{"x":'}, {"out": "object"}]})
        with pytest.raises(MalformedObjectOutputError):
            await _render(app, "page")

    @pytest.mark.asyncio
    async def test_property_output_uses_as_key(self, make_app):
        app = make_app(
            {
                "page": [
                    {"raw": {"x": "foo"}},
                    {"raw": {"y": "bar"}},
                    {"out": "property", "as": None},
                ]
            }
        )
        ctx, out = await _render(app, "page", "x")
        assert out == "foo"
        assert ctx.operations[-1].as_value == "x"

    @pytest.mark.asyncio
    async def test_unsupported_output_mode(self, make_app):
        app = make_app({"page": [{"raw": "a"}, {"out": "xml"}]})
        with pytest.raises(UnsupportedOutputModeError):
            await _render(app, "page")

    @pytest.mark.asyncio
    async def test_operations_without_data_are_skipped(self, make_app):
        app = make_app({"page": [{"raw": "a"}, {"as": None}, {"raw": "b"}]})
        _, out = await _render(app, "page", "seed")
        assert out == "ab"

    @pytest.mark.asyncio
    async def test_unknown_directive(self, make_app):
        app = make_app({"page": [{"raw": "a", "bogus": 1}]})
        with pytest.raises(UnknownDirectiveError):
            await _render(app, "page")

    @pytest.mark.asyncio
    async def test_process_twice(self, make_app):
        ctx = ResourceContext(make_app({"page": [{"raw": "a"}]}), "page")
        await ctx.process()
        with pytest.raises(ResourceStateError):
            await ctx.process()

    @pytest.mark.asyncio
    async def test_nested_without_operations(self, make_app):
        root = ResourceContext(make_app({"page": []}), "page")
        with pytest.raises(ResourceStateError):
            await ResourceContext(root, "page").process()

    @pytest.mark.asyncio
    async def test_stored_data_joins_output(self, make_app):
        app = make_app({"page": [{"data": "static"}, {"raw": "!"}]})
        _, out = await _render(app, "page")
        assert out == "static!"

    @pytest.mark.asyncio
    async def test_stored_with_feeds_primary(self, make_app):
        app = make_app({"page": [{"yml": None, "_with": "a: 1"}, {"out": "first_serve"}]})
        _, out = await _render(app, "page")
        assert out == {"a": 1}


class TestPhases:
    @pytest.mark.asyncio
    async def test_primary_sees_secondary_and_input(self, make_app):
        seen = {}
        app = make_app({"page": [{"with": [{"raw": "hello "}, {"raw": "world"}], "custom": "shout", "as": None}]})

        @app.custom_handler("shout")
        def shout(resource, operation):
            seen["in"] = resource.in_value
            seen["as"] = operation.as_value
            operation.data = operation.with_value.upper()

        _, out = await _render(app, "page", "seed")
        assert out == "HELLO WORLD"
        assert seen == {"in": "seed", "as": "seed"}

    @pytest.mark.asyncio
    async def test_phase_order(self, make_app):
        events = []
        app = make_app(
            {
                "page": [
                    {"custom": "primary"},
                    {"with": [{"custom": "secondary"}], "raw": "r"},
                ]
            }
        )

        @app.custom_handler("primary")
        async def primary(resource, operation):
            await asyncio.sleep(0)
            events.append(("primary", resource.depth))
            operation.data = "p"

        @app.custom_handler("secondary")
        def secondary(resource, operation):
            events.append(("secondary", resource.depth))
            operation.data = "s"

        _, out = await _render(app, "page")
        assert events == [("secondary", 1), ("primary", 0)]
        assert out == "pr"


class TestNesting:
    @pytest.mark.asyncio
    async def test_with_spawns_nested_context(self, make_app):
        captured = []
        app = make_app({"page": [{"with": [{"custom": "capture"}], "raw": "parent"}]})

        @app.custom_handler("capture")
        def capture(resource, operation):
            captured.append(resource)
            operation.data = f"in={resource.in_value}"

        ctx, _ = await _render(app, "page", "seed")
        nested = captured[0]
        operation = ctx.operations[1]
        assert nested.depth == ctx.depth + 1
        assert nested.root is ctx.root
        assert nested.name == "page"
        assert operation.with_value == nested.out_value == "in=seed"
        assert ctx.children == [nested]

    @pytest.mark.asyncio
    async def test_deep_nesting_shares_root(self, make_app):
        captured = []
        app = make_app({"page": [{"with": [{"with": [{"custom": "capture"}], "raw": "mid"}], "raw": "top"}]})

        @app.custom_handler("capture")
        def capture(resource, operation):
            captured.append(resource)
            operation.data = "leaf"

        ctx, out = await _render(app, "page")
        leaf = captured[0]
        assert out == "top"
        assert leaf.depth == 2
        assert leaf.parent_depth == 1
        assert leaf.root is ctx
        assert len(ctx.children) == 2
        assert ctx.operations[1].with_value == "mid"

    @pytest.mark.asyncio
    async def test_nested_error_aborts_parent(self, make_app):
        app = make_app({"page": [{"with": [{"bogus": 1}], "raw": "a"}]})
        with pytest.raises(UnknownDirectiveError):
            await _render(app, "page")


class TestPrimaryMarker:
    @pytest.mark.asyncio
    async def test_two_primaries_fail_before_any_handler(self, make_app):
        calls = []
        app = make_app({"page": [{"custom": "record"}, {"raw": "a", "md": None}]})
        app.register_custom("record", lambda resource, operation: calls.append(operation))
        with pytest.raises(DuplicatePrimaryError) as exc_info:
            await _render(app, "page")
        assert calls == []
        assert exc_info.value.index == 1
        assert sorted(exc_info.value.directives) == ["md", "raw"]

    @pytest.mark.asyncio
    async def test_stored_marker_blocks_primary(self, make_app):
        app = make_app({"page": [{"raw": "a", "primaryCounter": None}]})
        with pytest.raises(DuplicatePrimaryError):
            await _render(app, "page")

    @pytest.mark.asyncio
    async def test_shared_operation_runs_primary_once(self, make_app):
        calls = []
        app = make_app({"page": [{"custom": "record"}]})

        @app.custom_handler("record")
        async def record(resource, operation):
            calls.append(operation)
            await asyncio.sleep(0)
            operation.data = "once"

        ctx = ResourceContext(app, "page")
        ctx.operations.append(ctx.operations[0])
        with pytest.raises(DuplicatePrimaryError):
            await ctx.process()
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_concurrent_marker_check(self, make_app):
        app = make_app({"page": [{"raw": "a"}]})
        ctx = ResourceContext(app, "page")
        operation = ctx.operations[0]
        actions = [ctx._primary_action("raw", operation) for _ in range(5)]
        results = await asyncio.gather(*(f() for f in actions), return_exceptions=True)
        assert sum(1 for r in results if r is None) == 1
        assert sum(1 for r in results if isinstance(r, DuplicatePrimaryError)) == 4
        assert operation.primary_executed
        assert operation.data == "a"
