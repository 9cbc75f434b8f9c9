"""Tests for cycle-walking format-preserving permutations."""

import pytest

from cyclewalk import (
    CycleWalkFPE,
    DomainError,
    DomainSplit,
    RetryExhaustedError,
    derive_key,
    fpe,
    fpe_inverse,
    permutation,
)

SMALL_SIZES = [
    16, 461, 161, 324, 879, 104, 820, 742, 783, 795, 735, 619, 217,
    267, 282, 575, 581, 709, 10, 698, 656, 1004, 1005, 467, 445, 787,
]


@pytest.mark.parametrize("n", [2, 3, 16, 25, 1000, 1024, 1025, 65537, 1045211, 2**40 + 3])
def test_domain_split_is_minimal(n: int) -> None:
    """2^bits covers n and 2^(bits-1) does not."""
    split = DomainSplit.from_size(n)
    assert (1 << split.bits) >= n
    assert (1 << (split.bits - 1)) < n
    assert split.left_bits == split.bits // 2
    assert split.left_bits + split.right_bits == split.bits


def test_domain_split_single_element() -> None:
    split = DomainSplit.from_size(1)
    assert split.bits == 0
    assert split.is_identity


def test_domain_split_full_width() -> None:
    split = DomainSplit.from_size(2**64)
    assert (split.bits, split.left_bits, split.right_bits) == (64, 32, 32)


@pytest.mark.parametrize("n", SMALL_SIZES)
def test_fpe_bijection_small(n: int, key: int) -> None:
    """fpe over [0, n) hits every value exactly once."""
    outputs = [fpe(j, n, key) for j in range(n)]
    assert sorted(outputs) == list(range(n)), f"fpe is not a bijection for n={n}"


def test_fpe_bijection_boundary(key: int) -> None:
    """n = 2^16 + 1 forces the largest possible embedding domain."""
    n = 65537
    outputs = permutation(n, key)
    assert sorted(outputs) == list(range(n))


def test_fpe_single_element_identity() -> None:
    """A one-element domain maps 0 to 0 for any key."""
    for k in [0, 1, derive_key(1), 2**64 - 1]:
        assert fpe(0, 1, k) == 0
        assert fpe_inverse(0, 1, k) == 0


def test_fpe_two_elements(key: int) -> None:
    """With a one-bit domain the high half is empty and the map is the identity."""
    assert permutation(2, key) == [0, 1]


def test_fpe_determinism(key: int) -> None:
    for x in range(0, 5000, 37):
        assert fpe(x, 5000, key) == fpe(x, 5000, key)


def test_fpe_key_sensitivity() -> None:
    """Different keys disagree on most inputs."""
    n = 1000
    a = permutation(n, derive_key(1))
    b = permutation(n, derive_key(2))
    differing = sum(1 for p, q in zip(a, b) if p != q)
    assert differing > 0.9 * n


def test_fpe_reasonable_entropy(key: int) -> None:
    """Consecutive outputs over 256 values flip each low bit about half the time."""
    v = [fpe(j, 256, key) for j in range(256)]
    p = [0.0] * 8

    for j in range(1, 256):
        x = v[j] ^ v[j - 1]
        for i in range(8):
            p[i] += ((x >> i) & 1) / 256.0

    for i in range(8):
        assert abs(0.5 - p[i]) < 0.125, f"bit {i} flip rate {p[i]:.3f} is biased"


@pytest.mark.parametrize("n", [10, 1005, 4097])
def test_fpe_inverse_round_trip(n: int, key: int) -> None:
    for x in range(n):
        assert fpe_inverse(fpe(x, n, key), n, key) == x


def test_fpe_derived_schedule(key: int) -> None:
    n = 1005
    outputs = permutation(n, key, schedule="derived")
    assert sorted(outputs) == list(range(n))
    assert outputs != permutation(n, key)


def test_fpe_rounds_change_mapping(key: int) -> None:
    n = 500
    assert permutation(n, key, rounds=4) != permutation(n, key, rounds=6)
    assert sorted(permutation(n, key, rounds=6)) == list(range(n))


def test_fpe_full_width_domain(key: int) -> None:
    """n = 2^64 is a plain 64-bit Feistel permutation."""
    f = CycleWalkFPE(n=2**64, key=key)
    for x in [0, 1, 2**63, 2**64 - 1, 123456789]:
        y = f.encrypt(x)
        assert 0 <= y < 2**64
        assert f.decrypt(y) == x


@pytest.mark.parametrize("n", [0, -5])
def test_fpe_rejects_empty_domain(n: int, key: int) -> None:
    with pytest.raises(DomainError, match="n must be >= 1"):
        fpe(0, n, key)


@pytest.mark.parametrize("value", [-1, 10, 11, 10**20])
def test_fpe_rejects_out_of_range_input(value: int, key: int) -> None:
    with pytest.raises(DomainError):
        fpe(value, 10, key)


def test_fpe_rejects_non_integer_input(key: int) -> None:
    with pytest.raises(DomainError):
        fpe(1.0, 10, key)


def test_fpe_rejects_bad_max_attempts(key: int) -> None:
    with pytest.raises(DomainError):
        CycleWalkFPE(n=10, key=key, max_attempts=0)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"schedule": "bogus"},
        {"rounds": 0},
        {"rounds": "4"},
        {"hash_key": (1 << 64, 0)},
        {"hash_key": (1, 2, 3)},
        {"max_attempts": 0},
        {"key": -1},
    ],
)
def test_single_element_domain_validates_parameters(kwargs, key: int) -> None:
    """n == 1 builds no network but still rejects bad parameters."""
    params = {"key": key, **kwargs}
    with pytest.raises(DomainError):
        CycleWalkFPE(n=1, **params)


def test_fpe_single_element_rejects_unknown_schedule(key: int) -> None:
    with pytest.raises(DomainError, match="schedule"):
        fpe(0, 1, key, schedule="bogus")


def test_fpe_retry_exhaustion(key: int) -> None:
    """A one-step ceiling fails once some walk leaves [0, n)."""
    n = 1025
    f = CycleWalkFPE(n=n, key=key, max_attempts=1)
    with pytest.raises(RetryExhaustedError) as excinfo:
        for x in range(n):
            f.encrypt(x)

    err = excinfo.value
    assert err.n == n
    assert err.attempts == 1
    assert 0 <= err.value < n
    assert isinstance(err, RuntimeError)


def test_walk_lengths(key: int) -> None:
    """Power-of-two domains never walk; others walk at least once."""
    f = CycleWalkFPE(n=1024, key=key)
    assert {f.walk(x)[1] for x in range(1024)} == {1}

    g = CycleWalkFPE(n=1025, key=key)
    lengths = [g.walk(x)[1] for x in range(1025)]
    assert min(lengths) == 1
    assert max(lengths) > 1
    assert sum(lengths) / len(lengths) < 4


def test_cycle_walk_fpe_sequence_protocol(key: int) -> None:
    f = CycleWalkFPE(n=100, key=key)
    assert len(f) == 100
    assert list(f) == [f[i] for i in range(100)]
    assert list(f) == permutation(100, key)
    assert f[7] == fpe(7, 100, key)


def test_cycle_walk_fpe_matches_functional_api(key: int) -> None:
    f = CycleWalkFPE(n=777, key=key, rounds=5, schedule="derived")
    for x in range(0, 777, 13):
        assert f.encrypt(x) == fpe(x, 777, key, rounds=5, schedule="derived")
        assert f.decrypt(x) == fpe_inverse(x, 777, key, rounds=5, schedule="derived")
