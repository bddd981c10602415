# Shared fixtures for the SwordMinder test-suite.
# Qt runs on the offscreen platform so the suite works without a display.

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402

from swordminder.gui.app.autosave import AutosaveLocations  # noqa: E402
from swordminder.gui.services.service_locator import services  # noqa: E402
from tests.factories import Clock, FakeBible  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_services():
    yield
    services.clear()


@pytest.fixture
def locations(tmp_path):
    return AutosaveLocations.at(tmp_path)


@pytest.fixture
def clock():
    return Clock(datetime(2026, 10, 19, 9, 0, 0))


@pytest.fixture
def make_view_model(qapp, locations, clock):
    """Factory building view models on the temporary storage root.

    Every view model gets a FakeBible unless one is passed; background loads
    are joined on teardown so no QThread outlives its test.
    """
    from swordminder.gui.viewmodels import SwordMinderViewModel

    created = []

    def _make(**kwargs):
        kwargs.setdefault("locations", locations)
        kwargs.setdefault("bible", FakeBible())
        kwargs.setdefault("clock", clock)
        vm = SwordMinderViewModel(**kwargs)
        created.append(vm)
        return vm

    yield _make
    for vm in created:
        worker = vm._load_worker
        if worker is not None:
            worker.cancel()
            worker.wait(2000)
