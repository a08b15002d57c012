"""Tests for memoization and invalidation."""

from __future__ import annotations

from functools import partial

import pytest

from simplecache.core import hashcode
from simplecache.core.errors import InvalidTTL
from simplecache.core.memoize import Memoizer
from simplecache.core.store import Cache

TTL = 1000


class Adder:
    def __init__(self, n):
        self.n = n

    def __call__(self, x):
        return x + self.n


class ForgetfulCache(Cache):
    """Drops every entry right after answering is_valid."""

    def is_valid(self, key):
        result = super().is_valid(key)
        self.clear()
        return result


@pytest.fixture
def store(clock) -> Cache:
    return Cache(clock)


@pytest.fixture
def memoizer(store) -> Memoizer:
    return Memoizer(store)


class TestMemoize:
    def test_calls_function_once_within_ttl(self, memoizer):
        calls = []

        def expensive(x):
            calls.append(x)
            return {"data": x * 2}

        wrapped = memoizer.memoize(expensive, TTL)
        assert wrapped(21) == {"data": 42}
        assert wrapped(21) == {"data": 42}
        assert calls == [21]

    def test_calls_again_after_ttl(self, memoizer, store, clock):
        count = 0

        def counter():
            nonlocal count
            count += 1
            return count

        wrapped = memoizer.memoize(counter, TTL)
        assert wrapped() == 1
        clock.tick(TTL - 1)
        assert wrapped() == 1
        clock.tick(1)
        assert wrapped() == 2
        assert store.get(wrapped.key_for()) == 2

    def test_different_args_are_cached_separately(self, memoizer, store):
        def compute(x):
            return x * 2

        wrapped = memoizer.memoize(compute, TTL)
        assert wrapped(5) == 10
        assert wrapped(10) == 20
        assert len(store.keys()) == 2

    def test_keyword_arguments_are_part_of_the_key(self, memoizer):
        def scale(x, factor=1):
            return x * factor

        wrapped = memoizer.memoize(scale, TTL)
        assert wrapped(3) == 3
        assert wrapped(3, factor=2) == 6
        assert wrapped.key_for(3, factor=2) == wrapped.key_for(3, **{"factor": 2})
        assert wrapped.key_for(3) != wrapped.key_for(3, factor=2)

    def test_key_layout(self, memoizer, monkeypatch):
        monkeypatch.setattr(hashcode, "of_function", lambda fn: 1234)
        monkeypatch.setattr(hashcode, "of", lambda value: 5678)

        def f(*args):
            return args

        wrapped = memoizer.memoize(f, TTL)
        assert wrapped.function_hash == 1234
        assert wrapped.key_for(False, 0, "") == "1234:5678"

    def test_hashes_the_argument_tuple(self, memoizer):
        def f(*args):
            return args

        wrapped = memoizer.memoize(f, TTL)
        assert wrapped.key_for(1, 2) == f"{hashcode.of_function(f)}:{hashcode.of((1, 2))}"
        assert wrapped.key_for() == f"{hashcode.of_function(f)}:{hashcode.of_string('[]')}"

    def test_function_hash_is_computed_once(self, memoizer, monkeypatch):
        calls = []
        original = hashcode.of_function

        def spy(fn):
            calls.append(fn)
            return original(fn)

        monkeypatch.setattr(hashcode, "of_function", spy)

        def f(x):
            return x

        wrapped = memoizer.memoize(f, TTL)
        wrapped(1)
        wrapped(2)
        wrapped(1)
        assert calls == [f]

    def test_keeps_reference_to_original(self, memoizer, store):
        def f(x):
            return x + 1

        wrapped = memoizer.memoize(f, TTL)
        assert wrapped.original is f
        assert wrapped.__wrapped__ is f
        assert wrapped.__name__ == "f"
        assert wrapped.original(1) == 2
        assert store.keys() == []

    def test_exceptions_are_not_cached(self, memoizer, store):
        attempts = []

        def flaky():
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("boom")
            return "ok"

        wrapped = memoizer.memoize(flaky, TTL)
        with pytest.raises(RuntimeError):
            wrapped()
        assert store.keys() == []
        assert wrapped() == "ok"
        assert len(attempts) == 2

    @pytest.mark.parametrize("ttl", [0, -1, None])
    def test_rejects_bad_ttl_at_wrap_time(self, memoizer, ttl):
        def f():
            return 1

        with pytest.raises(InvalidTTL):
            memoizer.memoize(f, ttl)

    def test_stale_entry_is_overwritten(self, memoizer, store, clock):
        results = iter(["first", "second"])

        def f():
            return next(results)

        wrapped = memoizer.memoize(f, TTL)
        wrapped()
        clock.tick(TTL)
        assert store.get(wrapped.key_for()) == "first"
        assert wrapped() == "second"
        assert store.get(wrapped.key_for()) == "second"
        assert store.is_valid(wrapped.key_for()) is True

    def test_decorator_form(self, memoizer):
        calls = []

        @memoizer.memoized(TTL)
        def square(x):
            calls.append(x)
            return x * x

        assert square(4) == 16
        assert square(4) == 16
        assert calls == [4]

    def test_explicit_identity(self, memoizer):
        def f(x):
            return x

        wrapped = memoizer.memoize(f, TTL, identity="reports.f")
        assert wrapped.function_hash == hashcode.of_string("reports.f")


class TestInvalidate:
    def _populate(self, memoizer, store):
        def double(x):
            return x * 2

        def triple(x):
            return x * 3

        wrapped_double = memoizer.memoize(double, TTL)
        wrapped_triple = memoizer.memoize(triple, TTL)
        for x in [1, 2, 3, 4]:
            wrapped_double(x)
            wrapped_triple(x)
        store.set("unrelated", "keep", TTL)
        return double, wrapped_double, wrapped_triple

    def test_wrapped_function(self, memoizer, store):
        _, wrapped_double, wrapped_triple = self._populate(memoizer, store)
        assert memoizer.invalidate(wrapped_double) == 4
        assert store.keys(lambda k: k.startswith(f"{wrapped_double.function_hash}:")) == []
        assert len(store.keys(lambda k: k.startswith(f"{wrapped_triple.function_hash}:"))) == 4
        assert store.has("unrelated")

    def test_original_function_resolves_same_hash(self, memoizer, store):
        double, wrapped_double, _ = self._populate(memoizer, store)
        assert hashcode.of_function(double) == wrapped_double.function_hash
        assert memoizer.invalidate(double) == 4
        assert len(store.keys()) == 5

    def test_wrapper_method(self, memoizer, store):
        _, wrapped_double, _ = self._populate(memoizer, store)
        assert wrapped_double.invalidate() == 4
        assert wrapped_double.invalidate() == 0

    def test_identity_string(self, memoizer, store):
        def f(x):
            return x

        wrapped = memoizer.memoize(f, TTL, identity="reports.f")
        wrapped(1)
        wrapped(2)
        assert memoizer.invalidate("reports.f") == 2
        assert store.keys() == []

    def test_removes_stale_entries_too(self, memoizer, store, clock):
        _, wrapped_double, _ = self._populate(memoizer, store)
        clock.tick(TTL * 2)
        assert memoizer.invalidate(wrapped_double) == 4

    def test_next_call_recomputes(self, memoizer, store):
        calls = []

        def f(x):
            calls.append(x)
            return x

        wrapped = memoizer.memoize(f, TTL)
        wrapped(1)
        memoizer.invalidate(wrapped)
        wrapped(1)
        assert calls == [1, 1]


class TestDistinctCallables:
    def test_partials_with_different_arguments(self, memoizer):
        square = memoizer.memoize(partial(pow, exp=2), TTL)
        cube = memoizer.memoize(partial(pow, exp=3), TTL)
        assert square(3) == 9
        assert cube(3) == 27

    def test_lambdas_sharing_a_line(self, memoizer):
        ops = {"inc": lambda x: x + 1, "dbl": lambda x: x * 2}
        inc = memoizer.memoize(ops["inc"], TTL)
        dbl = memoizer.memoize(ops["dbl"], TTL)
        assert inc(5) == 6
        assert dbl(5) == 10

    def test_callable_instances_with_different_state(self, memoizer):
        a1 = memoizer.memoize(Adder(1), TTL)
        a100 = memoizer.memoize(Adder(100), TTL)
        assert a1(1) == 2
        assert a100(1) == 101

    def test_invalidate_plain_instance_only_hits_its_entries(self, memoizer, store):
        one, hundred = Adder(1), Adder(100)
        a1 = memoizer.memoize(one, TTL)
        a100 = memoizer.memoize(hundred, TTL)
        a1(1)
        a100(1)
        assert memoizer.invalidate(one) == 1
        assert store.keys() == [a100.key_for(1)]


class TestEntryRemovedDuringLookup:
    def test_recomputes_instead_of_returning_none(self, clock):
        calls = []

        def f(x):
            calls.append(x)
            return x * 10

        wrapped = Memoizer(ForgetfulCache(clock)).memoize(f, TTL)
        assert wrapped(1) == 10
        assert wrapped(1) == 10
        assert calls == [1, 1]
