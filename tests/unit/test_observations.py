"""Unit tests for observation operations and paging."""

from typing import Any

import httpx
import pytest
from conftest import HOST, SOLUTION, Recorder

from starfish_sdk.exceptions import EmptyResultError
from starfish_sdk.operations.common import PagedResult, iter_pages, prepare_paging_response
from starfish_sdk.service import StarfishService


def _build_observations() -> dict[str, Any]:
    return {
        "observations": [
            {
                "timestamp": "2016-08-15T21:53:31.238Z",
                "temperature": 37.5,
                "acceleration": {"x": 0.02, "y": 0.05, "z": 1.25},
                "humidity": 123,
                "batteryLevel": 82,
            },
        ],
    }


class TestGetObservations:
    """Tests for the solution-wide observation listing."""

    @pytest.mark.asyncio
    async def test_returns_page(self, recorder: Recorder, token_service: StarfishService) -> None:
        body = [_build_observations()]
        recorder.queue(body)

        page = await token_service.get_observations()

        assert page == PagedResult(data=body)
        assert page.as_dict() == {"data": body}
        assert str(recorder.requests[0].url) == f"{HOST}/api/solutions/{SOLUTION}/observations"

    @pytest.mark.asyncio
    async def test_empty_array_is_valid(self, recorder: Recorder, token_service: StarfishService) -> None:
        recorder.queue([])

        page = await token_service.get_observations()

        assert page.data == []
        assert page.as_dict() == {"data": []}

    @pytest.mark.asyncio
    async def test_null_body_is_error(self, recorder: Recorder, token_service: StarfishService) -> None:
        recorder.queue(None)
        with pytest.raises(EmptyResultError, match="^No observations found$"):
            await token_service.get_observations()

    @pytest.mark.asyncio
    async def test_request_failure_propagates(self, recorder: Recorder, token_service: StarfishService) -> None:
        recorder.queue("Really Bad Error", status_code=500)
        with pytest.raises(httpx.HTTPStatusError):
            await token_service.get_observations()

    @pytest.mark.asyncio
    async def test_next_page_surfaced(self, recorder: Recorder, token_service: StarfishService) -> None:
        next_page = f"{HOST}/api/solutions/{SOLUTION}/observations?cursor=abc"
        recorder.queue([_build_observations()], headers={"next_page": next_page})

        page = await token_service.get_observations()

        assert page.next_page == next_page
        assert page.as_dict()["next_page"] == next_page

    @pytest.mark.asyncio
    async def test_query(self, recorder: Recorder, token_service: StarfishService) -> None:
        recorder.queue([])

        await token_service.query_observations({"from": "x", "to": "y"})

        assert str(recorder.requests[0].url).endswith("/observations?from=x&to=y")


class TestDeviceObservations:
    """Tests for per-device observation listing."""

    @pytest.mark.asyncio
    async def test_device_id_and_solution_in_uri(self, recorder: Recorder, token_service: StarfishService) -> None:
        recorder.queue([_build_observations()])

        await token_service.get_device_observations("1234")

        assert str(recorder.requests[0].url) == f"{HOST}/api/solutions/{SOLUTION}/devices/1234/observations"

    @pytest.mark.asyncio
    async def test_returns_page(self, recorder: Recorder, token_service: StarfishService) -> None:
        body = [_build_observations()]
        recorder.queue(body)

        page = await token_service.get_device_observations("1234")

        assert page.data == body
        assert page.next_page is None

    @pytest.mark.asyncio
    async def test_empty_array_is_valid(self, recorder: Recorder, token_service: StarfishService) -> None:
        recorder.queue([])
        page = await token_service.get_device_observations("1234")
        assert page.data == []

    @pytest.mark.asyncio
    async def test_null_body_is_error(self, recorder: Recorder, token_service: StarfishService) -> None:
        recorder.queue(None)
        with pytest.raises(EmptyResultError, match="No observations found"):
            await token_service.get_device_observations("1234")

    @pytest.mark.asyncio
    async def test_query(self, recorder: Recorder, token_service: StarfishService) -> None:
        recorder.queue([])

        await token_service.query_device_observations("did", {"limit": 5})

        assert str(recorder.requests[0].url).endswith("/devices/did/observations?limit=5")


class TestPostDeviceObservation:
    """Tests for post_device_observation."""

    @pytest.mark.asyncio
    async def test_success(self, recorder: Recorder, token_service: StarfishService) -> None:
        recorder.queue("something")
        observation = _build_observations()

        result = await token_service.post_device_observation("deviceId", observation)

        assert result == "something"
        request = recorder.requests[0]
        assert request.method == "POST"
        assert str(request.url) == f"{HOST}/api/solutions/{SOLUTION}/devices/deviceId/observations"
        assert recorder.json_body(0) == observation

    @pytest.mark.asyncio
    async def test_failure(self, recorder: Recorder, token_service: StarfishService) -> None:
        error = httpx.ReadTimeout("timed out")
        recorder.fail(error)
        with pytest.raises(httpx.ReadTimeout) as exc_info:
            await token_service.post_device_observation("deviceId", _build_observations())
        assert exc_info.value is error


class TestGetNextPage:
    """Tests for next-page traversal."""

    @pytest.mark.parametrize("next_page", ["", None])
    @pytest.mark.asyncio
    async def test_missing_uri_fails_without_requests(
        self,
        next_page: str | None,
        recorder: Recorder,
        credentials_service: StarfishService,
    ) -> None:
        """The token is not consulted, so not even a token request is made."""
        with pytest.raises(EmptyResultError, match="^next_page not found$"):
            await credentials_service.get_next_page(next_page)
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_fetches_absolute_uri(self, recorder: Recorder, token_service: StarfishService) -> None:
        uri = "https://other.example.com/api/solutions/TEST/observations?cursor=2"
        recorder.queue([{"temperature": 1}], headers={"next_page": uri + "&more=1"})

        page = await token_service.get_next_page(uri)

        assert str(recorder.requests[0].url) == uri
        assert recorder.requests[0].headers["Authorization"] == "tokenissecret"
        assert page.data == [{"temperature": 1}]
        assert page.next_page == uri + "&more=1"

    @pytest.mark.asyncio
    async def test_null_body(self, recorder: Recorder, token_service: StarfishService) -> None:
        recorder.queue(None)
        with pytest.raises(EmptyResultError, match="next_page not found"):
            await token_service.get_next_page(f"{HOST}/page/2")


class TestPaging:
    """Tests for paging helpers."""

    def test_prepare_paging_response_drops_empty_header(self) -> None:
        assert prepare_paging_response([1], "") == PagedResult(data=[1], next_page=None)

    @pytest.mark.asyncio
    async def test_iter_pages_follows_next_page(self) -> None:
        pages = {
            "p2": PagedResult(data=[2], next_page="p3"),
            "p3": PagedResult(data=[3]),
        }
        requested: list[str] = []

        async def _fetch(uri: str) -> PagedResult:
            requested.append(uri)
            return pages[uri]

        collected = [page.data async for page in iter_pages(PagedResult(data=[1], next_page="p2"), _fetch)]

        assert collected == [[1], [2], [3]]
        assert requested == ["p2", "p3"]

    @pytest.mark.asyncio
    async def test_service_iter_observation_pages(self, recorder: Recorder, token_service: StarfishService) -> None:
        second = f"{HOST}/api/solutions/{SOLUTION}/devices/d1/observations?page=2"
        recorder.queue([{"n": 1}], headers={"next_page": second})
        recorder.queue([{"n": 2}])

        data = [page.data async for page in token_service.iter_observation_pages("d1", {"limit": 1})]

        assert data == [[{"n": 1}], [{"n": 2}]]
        assert recorder.urls() == [
            f"{HOST}/api/solutions/{SOLUTION}/devices/d1/observations?limit=1",
            second,
        ]
