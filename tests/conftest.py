from importlib.metadata import PackageNotFoundError, distributions, requires
import threading
from typing import Callable, List, Optional
import uuid

import httpx
import pytest
from packaging.requirements import Requirement
from packaging.utils import canonicalize_name

from gameasure.config import EngineConfig
from gameasure.events import Transport
from gameasure.models import AppInfo, ClientIdentifier, Collect


def get_project_dependencies():
    try:
        deps = requires("gameasure") or []
    except PackageNotFoundError:
        return {}
    return {
        canonicalize_name(Requirement(dep).name): dep
        for dep in deps
        if "extra ==" not in dep
    }


def pytest_configure(config):
    main_deps_specs = get_project_dependencies()
    all_dists = {canonicalize_name(dist.metadata['Name']):
                 (dist.metadata['Name'], dist.version)
                 for dist in distributions()}

    print(f"\n[{len(main_deps_specs)}] Main Dependencies:")
    print("-" * 60)
    print("%-20s %-25s %-15s" % ("Package", "Specification", "Installed"))
    print("-" * 60)

    for pkg_norm, spec in sorted(main_deps_specs.items()):
        if pkg_norm in all_dists:
            name, version = all_dists[pkg_norm]
            print("%-20s %-25s %-15s" % (name, spec, version))


CLIENT_ID = uuid.UUID("0f8fad5b-d9cb-469f-a165-70867728950e")


@pytest.fixture
def defaults() -> Collect:
    return Collect(
        user=ClientIdentifier(anonymous_id=CLIENT_ID),
        tracking_id="UA-1234-1",
        user_language="en",
        app_info=AppInfo(name="Demo", identifier="com.example.demo", version="1.2"),
    )


class Recorder:
    """
    Records every request a MockTransport receives and answers with
    the configured status, or raises the configured exception.
    """

    def __init__(self, status_code: int = 200):
        self.status_code = status_code
        self.error: Optional[Exception] = None
        self.requests: List[httpx.Request] = []
        self.bodies: List[str] = []
        self._cond = threading.Condition()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        with self._cond:
            self.requests.append(request)
            self.bodies.append(request.content.decode("utf-8"))
            self._cond.notify_all()

        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, text="")

    def wait_for(self, count: int, timeout: float = 5.0) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: len(self.requests) >= count, timeout)


class SinkCollector:
    def __init__(self):
        self.messages: List[str] = []
        self._cond = threading.Condition()

    def __call__(self, message: str) -> None:
        with self._cond:
            self.messages.append(message)
            self._cond.notify_all()

    def wait_for(self, count: int, timeout: float = 5.0) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: len(self.messages) >= count, timeout)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def sink() -> SinkCollector:
    return SinkCollector()


@pytest.fixture
def transport_factory() -> Callable[[Recorder], Transport]:
    def _create(recorder: Recorder, timeout: float = 20.0) -> Transport:
        return Transport(timeout=timeout, http_transport=httpx.MockTransport(recorder))

    return _create


@pytest.fixture
def fast_config() -> EngineConfig:
    return EngineConfig(
        endpoint="https://collect.test/batch",
        single_endpoint="https://collect.test/collect",
        flush_delay=0.2,
        timeout=5.0,
    )


@pytest.fixture
def recorder_factory() -> Callable[..., Recorder]:
    return Recorder
