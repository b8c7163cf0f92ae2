# tests/test_pagination.py

from voucherdesk.utils.pagination import normalize_page, PageInfo


class TestNormalizePage:

    def test_flat_array(self):
        page = normalize_page([{"id": 1}, {"id": 2}, {"id": 3}])
        assert [r["id"] for r in page.items] == [1, 2, 3]
        assert page.info.to_dict() == {
            "current_page": 1, "last_page": 1, "per_page": 3, "total": 3, "from": 1, "to": 3,
        }

    def test_empty_flat_array(self):
        page = normalize_page([])
        assert page.items == []
        assert page.info.total == 0
        assert (page.info.from_, page.info.to) == (0, 0)
        assert page.info.last_page == 1

    def test_data_with_pagination(self):
        payload = {
            "success": True,
            "data": [{"id": 21}, {"id": 22}],
            "pagination": {"current_page": 2, "last_page": 4, "per_page": 20, "total": 62, "from": 21, "to": 22},
        }
        page = normalize_page(payload)
        assert len(page.items) == 2
        assert page.info == PageInfo(current_page=2, last_page=4, per_page=20, total=62, from_=21, to=22)
        assert page.info.has_next and page.info.has_previous

    def test_data_with_meta_missing_from_and_to(self):
        payload = {"data": [{"id": 41}], "meta": {"current_page": 3, "per_page": 20, "total": 41}}
        page = normalize_page(payload)
        assert page.info.last_page == 3
        assert (page.info.from_, page.info.to) == (41, 41)
        assert not page.info.has_next

    def test_nested_data_and_meta(self):
        payload = {"success": True, "data": {"data": [{"id": 1}], "meta": {"current_page": 1, "last_page": 2,
                                                                          "per_page": 1, "total": 2}}}
        page = normalize_page(payload)
        assert page.items == [{"id": 1}]
        assert page.info.last_page == 2
        assert page.info.has_next

    def test_paginator_object(self):
        payload = {"success": True, "data": {
            "current_page": 1, "data": [{"id": 9}, {"id": 8}], "from": 1, "last_page": 5,
            "per_page": 2, "to": 2, "total": 10,
        }}
        page = normalize_page(payload)
        assert [r["id"] for r in page.items] == [9, 8]
        assert page.info.to_dict()["last_page"] == 5
        assert page.info.total == 10

    def test_request_params_fill_gaps(self):
        payload = {"data": [{"id": i} for i in range(5)], "total": 25}
        page = normalize_page(payload, params={"page": "3", "per_page": 5})
        assert page.info.current_page == 3
        assert page.info.per_page == 5
        assert page.info.last_page == 5
        assert (page.info.from_, page.info.to) == (11, 15)

    def test_alternate_rows_key(self):
        payload = {"success": True, "employees": [{"id": 1}], "pagination": {"total": 1}}
        page = normalize_page(payload, rows_key="employees")
        assert page.items == [{"id": 1}]

    def test_unrecognised_payload_is_an_empty_page(self):
        page = normalize_page({"success": True, "data": None})
        assert page.items == []
        assert page.info.total == 0
