"""
Tests for StrategyResolver - ordered resolution with fallback.
"""

import logging

import pytest

from healing_locator.engine.queries import (
    PlaceholderQuery,
    RoleQuery,
    StructuralQuery,
    TargetDescription,
    TextQuery,
)
from healing_locator.engine.resolver import StrategyResolver
from healing_locator.exceptions import ResolutionFailure

RESOLVER_LOGGER = "healing_locator.engine.resolver"


@pytest.fixture
def resolver(page):
    return StrategyResolver(page, candidate_timeout_ms=200)


@pytest.fixture
def login_target():
    return TargetDescription("LoginButton", (
        RoleQuery("button", "Login"),
        TextQuery("Login"),
        StructuralQuery('button[type="submit"]'),
    ))


class TestFirstMatchWins:
    """The first visible candidate is returned without trying later ones."""

    @pytest.mark.asyncio
    async def test_returns_first_candidate(self, page, make_element, resolver, login_target):
        button = page.show(login_target.candidates[0], make_element("button"))

        element = await resolver.resolve(login_target)

        assert element is button
        assert len(page.waits) == 1
        assert page.waited_queries == [("role", "button", "Login")]

    @pytest.mark.asyncio
    async def test_later_candidates_never_compiled(self, page, make_element, resolver, login_target):
        page.show(login_target.candidates[0], make_element("button"))

        await resolver.resolve(login_target)

        assert [name for name, _ in page.calls] == ["query_by_role", "wait_until_visible"]

    @pytest.mark.asyncio
    async def test_uses_candidate_timeout(self, page, make_element, resolver, login_target):
        page.show(login_target.candidates[0], make_element("button"))

        await resolver.resolve(login_target)

        assert page.waits[0][1] == 200

    @pytest.mark.asyncio
    async def test_no_history_for_primary_match(self, page, make_element, resolver, login_target):
        page.show(login_target.candidates[0], make_element("button"))

        await resolver.resolve(login_target)

        assert resolver.get_healing_history() == {}


class TestFallbackOrder:
    """A failed candidate is logged and the next one is tried."""

    @pytest.mark.asyncio
    async def test_second_candidate_returned(self, page, make_element, resolver, login_target):
        button = page.show(login_target.candidates[1], make_element("button", text="Login"))

        element = await resolver.resolve(login_target)

        assert element is button
        assert page.waited_queries == [
            ("role", "button", "Login"),
            ("text", "Login", False),
        ]

    @pytest.mark.asyncio
    async def test_one_warning_and_one_heal_message(self, page, make_element, resolver, login_target, caplog):
        page.show(login_target.candidates[1], make_element("button"))
        caplog.set_level(logging.DEBUG, logger=RESOLVER_LOGGER)

        await resolver.resolve(login_target)

        records = [r for r in caplog.records if r.name == RESOLVER_LOGGER]
        warnings = [r for r in records if r.levelno == logging.WARNING]
        healed = [r for r in records if r.levelno == logging.INFO and "Self-healed" in r.getMessage()]
        assert len(warnings) == 1
        assert "LoginButton" in warnings[0].getMessage()
        assert "role: button with text: Login" in warnings[0].getMessage()
        assert len(healed) == 1
        assert healed[0].getMessage() == "Self-healed LoginButton using: text: Login"

    @pytest.mark.asyncio
    async def test_healing_history_recorded(self, page, make_element, resolver, login_target):
        page.show(login_target.candidates[2], make_element("button"))

        await resolver.resolve(login_target)

        assert resolver.get_healing_history() == {
            "LoginButton": ['css: button[type="submit"]'],
        }

    @pytest.mark.asyncio
    async def test_on_attempt_sees_every_outcome(self, page, make_element, resolver, login_target):
        page.show(login_target.candidates[1], make_element("button"))
        results = []

        await resolver.resolve(login_target, on_attempt=results.append)

        assert [(r.position, r.ok) for r in results] == [(0, False), (1, True)]
        assert results[0].error
        assert results[1].element is not None


class TestExhaustion:
    """Every candidate failing is fatal."""

    @pytest.mark.asyncio
    async def test_raises_resolution_failure(self, page, resolver, login_target):
        with pytest.raises(ResolutionFailure) as exc_info:
            await resolver.resolve(login_target)

        failure = exc_info.value
        assert failure.identifier == "LoginButton"
        assert failure.reason == "all candidates exhausted"
        assert failure.attempted == login_target.describe()
        assert "LoginButton" in str(failure)
        assert 'css: button[type="submit"]' in str(failure)

    @pytest.mark.asyncio
    async def test_every_candidate_tried_once(self, page, resolver, login_target):
        with pytest.raises(ResolutionFailure):
            await resolver.resolve(login_target)

        assert len(page.waits) == 3

    @pytest.mark.asyncio
    async def test_boundary_errors_are_misses(self, page, make_element, resolver):
        async def broken(query, timeout_ms):
            raise RuntimeError("target closed")

        page.wait_until_visible = broken
        target = TargetDescription("Saudi", (PlaceholderQuery("Saudi ID"),))

        with pytest.raises(ResolutionFailure):
            await resolver.resolve(target)


class TestAttempt:
    """Test single-candidate attempts."""

    @pytest.mark.asyncio
    async def test_timeout_override(self, page, resolver):
        result = await resolver.attempt("X", TextQuery("Login"), timeout_ms=100)

        assert not result.ok
        assert page.waits[0][1] == 100

    @pytest.mark.asyncio
    async def test_compile_errors_propagate(self, resolver):
        class Broken:
            def describe(self):
                return "broken"

            def compile(self, page):
                raise TypeError("cannot compile")

        with pytest.raises(TypeError):
            await resolver.attempt("X", Broken())
