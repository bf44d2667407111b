"""Assertion helper utilities for tests."""

from __future__ import annotations


def assert_problem(resp, status: int, code: str | None = None) -> dict:
    """Check an RFC 7807 error response and return its body.

    Parameters
    ----------
    resp:
        Flask test response.
    status:
        Expected HTTP status.
    code:
        Expected machine-readable ``code`` field, if any.
    """

    assert resp.status_code == status, resp.get_json()
    assert resp.mimetype == "application/problem+json"
    body = resp.get_json()
    assert body["status"] == status
    if code is not None:
        assert body["code"] == code
    return body


def assert_page_meta(body: dict, *, total: int, page: int = 1) -> None:
    """Validate the ``meta`` block of a paginated response."""

    meta = body["meta"]
    assert meta["total"] == total
    assert meta["page"] == page
    assert meta["hasNext"] == (meta["page"] * meta["limit"] < total)
