import time

import pytest

from parcel_shipping_client.context import RequestContext
from parcel_shipping_client.errors import CancellationError, RequestTimeoutError


def test_background_context_never_expires():
    context = RequestContext.background()

    assert context.remaining() is None
    assert context.expired is False
    context.check()


def test_cancel_is_observed_by_check():
    context = RequestContext.background()
    context.cancel()

    assert context.cancelled is True
    with pytest.raises(CancellationError):
        context.check()


def test_with_timeout_reports_remaining_time():
    context = RequestContext.with_timeout(60)

    remaining = context.remaining()
    assert remaining is not None
    assert 0 < remaining <= 60


def test_elapsed_deadline_raises_timeout():
    context = RequestContext(deadline=time.monotonic() - 0.5)

    assert context.remaining() == 0.0
    with pytest.raises(RequestTimeoutError):
        context.check()
    with pytest.raises(TimeoutError):
        context.check()
