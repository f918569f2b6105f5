"""Performance regression tests: constant query count (N+1 prevention).

The part-request list and detail views must run a bounded number of SQL
queries regardless of how many requests, items or timeline entries exist.
"""

from __future__ import annotations

import pytest

from modules.part_requests.dtos import CreatePartRequestDTO

pytestmark = pytest.mark.performance


@pytest.fixture()
def part_requests(part_request_service, staff_user, customer, vehicle, part):
    created = []
    for i in range(10):
        part_request = part_request_service.create_part_request(
            staff_user,
            CreatePartRequestDTO(
                customer_id=customer.id,
                vehicle_id=vehicle.id,
                items=[
                    {"part_id": part.id, "quantity": 1},
                    {"free_text_name": f"Ricambio {i}", "quantity": 2},
                ],
            ),
        )
        part_request_service.set_status(staff_user, str(part_request.id), "ORDINATO")
        created.append(part_request)
    return created


class TestPartRequestListQueryCount:
    def test_list_query_count_is_constant(
        self, auth_client, staff_user, part_requests, django_assert_max_num_queries
    ):
        """Expected queries (bounded):

        1. Session + user lookup
        2. COUNT for pagination
        3. SELECT requests JOIN customer, vehicle
        4. Prefetch items
        5. Prefetch timeline JOIN user
        6. Catalog part names
        """
        api = auth_client(staff_user)

        with django_assert_max_num_queries(8):
            response = api.get("/api/v1/part-requests/")

        assert response.status_code == 200
        assert response.json()["count"] == 10


class TestPartRequestRetrieveQueryCount:
    def test_retrieve_query_count_is_constant(
        self, auth_client, staff_user, part_requests, django_assert_max_num_queries
    ):
        api = auth_client(staff_user)

        with django_assert_max_num_queries(8):
            response = api.get(f"/api/v1/part-requests/{part_requests[0].id}/")

        assert response.status_code == 200
        assert len(response.json()["items"]) == 2
        assert len(response.json()["timeline"]) == 2
