import threading

import pytest

from unitydap.kernel.artifacts import Release
from unitydap.kernel.errors import ExhaustionError, FilesystemError, RegistryError, VerificationError
from unitydap.kernel.ranking import SEMANTIC
from unitydap.kernel.resolution import BinaryResolver

RELEASE_2_0_0 = Release(version="2.0.0", asset_url="https://example.com/2.0.0/unity-debug-adapter.zip")

# --- Fixtures ---

@pytest.fixture
def build_resolver(fake_release_source, fake_inventory, fake_provisioner):
    def _build(release=RELEASE_2_0_0, registry_error=None, local=(), fs_error=None, working=(), **kwargs):
        source = fake_release_source(release=release, error=registry_error)
        inventory = fake_inventory(names=list(local), error=fs_error)
        provisioner = fake_provisioner(working=set(working))
        return BinaryResolver(source, inventory, provisioner, **kwargs), source, inventory, provisioner
    return _build

# --- Happy paths ---

def test_resolve_downloads_latest_release_into_empty_work_dir(build_resolver):
    resolver, _, _, provisioner = build_resolver(working={"unity-debug-adapter-2.0.0"})

    path = resolver.resolve()

    assert path == "/adapters/unity-debug-adapter-2.0.0/Release/unity-debug-adapter.exe"
    assert [c.is_remote for c in provisioner.attempts] == [True]
    assert resolver.cached.absolute_path == path
    assert resolver.cached.directory_name == "unity-debug-adapter-2.0.0"


def test_resolve_prefers_existing_install_of_same_version(build_resolver):
    resolver, _, _, provisioner = build_resolver(
        local=["unity-debug-adapter-2.0.0"],
        working={"unity-debug-adapter-2.0.0"},
    )

    resolver.resolve()

    assert len(provisioner.attempts) == 1
    assert not provisioner.attempts[0].is_remote


def test_resolve_uses_newer_local_install_over_older_release(build_resolver):
    resolver, _, _, provisioner = build_resolver(
        local=["unity-debug-adapter-3.0.0"],
        working={"unity-debug-adapter-3.0.0", "unity-debug-adapter-2.0.0"},
    )

    assert "unity-debug-adapter-3.0.0" in resolver.resolve()
    assert len(provisioner.attempts) == 1


# --- Cache fast path ---

def test_second_resolve_returns_cached_path_without_io(build_resolver):
    resolver, source, inventory, provisioner = build_resolver(working={"unity-debug-adapter-2.0.0"})

    first = resolver.resolve()
    second = resolver.resolve()

    assert first == second
    assert source.calls == 1
    assert inventory.calls == 1
    assert len(provisioner.attempts) == 1


def test_failed_resolve_does_not_populate_cache(build_resolver):
    resolver, source, _, _ = build_resolver()

    with pytest.raises(ExhaustionError):
        resolver.resolve()

    assert resolver.cached is None
    with pytest.raises(ExhaustionError):
        resolver.resolve()
    assert source.calls == 2


def test_concurrent_resolves_provision_once(build_resolver):
    resolver, _, _, provisioner = build_resolver(working={"unity-debug-adapter-2.0.0"})
    results = []

    threads = [threading.Thread(target=lambda: results.append(resolver.resolve())) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(set(results)) == 1
    assert len(provisioner.attempts) == 1


# --- Fallback ---

def test_registry_failure_falls_back_to_local_install(build_resolver):
    resolver, _, _, provisioner = build_resolver(
        registry_error="network unreachable",
        local=["unity-debug-adapter-1.5.0"],
        working={"unity-debug-adapter-1.5.0"},
    )

    assert "unity-debug-adapter-1.5.0" in resolver.resolve()
    assert [c.directory_name for c in provisioner.attempts] == ["unity-debug-adapter-1.5.0"]


def test_failed_top_candidate_falls_back_to_next(build_resolver):
    resolver, _, _, provisioner = build_resolver(
        local=["unity-debug-adapter-1.0.0"],
        working={"unity-debug-adapter-1.0.0"},
    )

    path = resolver.resolve()

    assert "unity-debug-adapter-1.0.0" in path
    assert [c.directory_name for c in provisioner.attempts] == [
        "unity-debug-adapter-2.0.0",
        "unity-debug-adapter-1.0.0",
    ]


def test_stops_after_first_success(build_resolver):
    resolver, _, _, provisioner = build_resolver(
        local=["unity-debug-adapter-1.0.0", "unity-debug-adapter-0.9.0"],
        working={"unity-debug-adapter-2.0.0", "unity-debug-adapter-1.0.0", "unity-debug-adapter-0.9.0"},
    )

    resolver.resolve()

    assert len(provisioner.attempts) == 1


def test_filesystem_failure_with_remote_candidate_still_resolves(build_resolver):
    resolver, _, _, _ = build_resolver(fs_error="permission denied", working={"unity-debug-adapter-2.0.0"})

    assert "unity-debug-adapter-2.0.0" in resolver.resolve()


def test_filesystem_failure_then_remote_failure_records_both_in_order(build_resolver):
    resolver, _, _, provisioner = build_resolver(fs_error="permission denied")

    with pytest.raises(ExhaustionError) as exc_info:
        resolver.resolve()

    causes = exc_info.value.causes
    assert [type(c) for c in causes] == [FilesystemError, VerificationError]
    assert "permission denied" in str(causes[0])
    assert [c.is_remote for c in provisioner.attempts] == [True]
    assert resolver.cached is None


def test_semantic_ordering_is_passed_to_ranking(build_resolver):
    resolver, _, _, provisioner = build_resolver(
        registry_error="offline",
        local=["unity-debug-adapter-1.9.0", "unity-debug-adapter-1.10.0"],
        working={"unity-debug-adapter-1.9.0", "unity-debug-adapter-1.10.0"},
        ordering=SEMANTIC,
    )

    assert "unity-debug-adapter-1.10.0" in resolver.resolve()


# --- Exhaustion ---

def test_registry_failure_and_empty_work_dir_raises_exhaustion(build_resolver):
    resolver, _, _, _ = build_resolver(registry_error="network unreachable")

    with pytest.raises(ExhaustionError) as exc_info:
        resolver.resolve()

    assert "network unreachable" in str(exc_info.value)
    assert [type(c) for c in exc_info.value.causes] == [RegistryError]


def test_exhaustion_lists_every_failure_in_order(build_resolver):
    resolver, _, _, _ = build_resolver(
        registry_error="rate limited",
        local=["unity-debug-adapter-1.2.0", "unity-debug-adapter-1.1.0"],
    )

    with pytest.raises(ExhaustionError) as exc_info:
        resolver.resolve()

    causes = exc_info.value.causes
    assert [type(c) for c in causes] == [RegistryError, VerificationError, VerificationError]
    message = str(exc_info.value)
    assert message.index("rate limited") < message.index("1.2.0") < message.index("1.1.0")


def test_filesystem_failure_without_remote_is_fatal(build_resolver):
    resolver, _, _, provisioner = build_resolver(registry_error="offline", fs_error="permission denied")

    with pytest.raises(ExhaustionError) as exc_info:
        resolver.resolve()

    assert [type(c) for c in exc_info.value.causes] == [RegistryError, FilesystemError]
    assert isinstance(exc_info.value.__cause__, FilesystemError)
    assert provisioner.attempts == []


def test_lexicographic_ranking_picks_1_9_before_1_10(build_resolver):
    resolver, _, _, provisioner = build_resolver(
        registry_error="offline",
        local=["unity-debug-adapter-1.10.0", "unity-debug-adapter-1.9.0"],
        working={"unity-debug-adapter-1.9.0", "unity-debug-adapter-1.10.0"},
    )

    assert "unity-debug-adapter-1.9.0" in resolver.resolve()
