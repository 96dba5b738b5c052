"""Tests for uniform error responses."""

import pytest
from fastapi.testclient import TestClient

from budget_api.errors import ShutdownError
from budget_api.main import create_app
from budget_api.services.budget_service import BudgetService
from fakes import FakeBackend

ROUTES = [
    ("/budgets/list", "list_budgets"),
    ("/budgets/months", "list_budget_months"),
    ("/budgets/months/2024-01", "get_budget_month"),
    ("/accounts", "list_accounts"),
    ("/accounts/123/balance", "get_account_balance"),
    ("/accounts/123/transactions?startDate=2024-01-01&endDate=2024-01-31", "list_transactions"),
    ("/categories", "list_categories"),
    ("/category-groups", "list_category_groups"),
    ("/payees", "list_payees"),
    ("/rules", "list_rules"),
    ("/payees/payee-1/rules", "list_payee_rules"),
]


class TestDelegateErrors:
    """Budget query failures become a 500 with a short message."""

    @pytest.mark.parametrize("path,query", ROUTES)
    def test_delegate_failure_is_500(self, client, backend, path, query):
        """Should answer a failed query with a generic 500."""
        backend.fail(query, RuntimeError("sqlite: /data/secret/db.sqlite is locked"))

        response = client.get(path)

        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal Server Error",
            "message": f"Budget query '{query}' failed",
        }
        assert "secret" not in response.text
        assert "Traceback" not in response.text

    def test_failure_does_not_affect_other_requests(self, client, backend):
        """Should keep serving after one request fails."""
        backend.fail("list_payees", RuntimeError("boom"))

        assert client.get("/payees").status_code == 500
        assert client.get("/accounts").status_code == 200
        assert client.get("/status").status_code == 200


class TestTimeouts:

    @pytest.fixture
    def slow_client(self, settings):
        backend = FakeBackend()
        backend.delay = 0.5
        service = BudgetService(backend, timeout=0.05)
        with TestClient(create_app(service, settings)) as test_client:
            yield test_client
        # The timed-out query still holds the worker, so the close cannot run
        with pytest.raises(ShutdownError):
            service.release()

    def test_slow_query_times_out(self, slow_client):
        """Should answer a slow query with a 500 once the timeout passes."""
        response = slow_client.get("/accounts")
        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal Server Error",
            "message": "Budget query 'list_accounts' timed out",
        }


class TestOtherErrors:

    def test_unknown_route(self, client):
        """Should answer unknown paths with a JSON 404."""
        response = client.get("/transactions")
        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    def test_write_methods_not_allowed(self, client, backend):
        """Should refuse writes with a JSON 405."""
        response = client.post("/accounts", json={"name": "New"})
        assert response.status_code == 405
        assert response.json() == {"error": "Method Not Allowed"}
        assert backend.calls == []

    def test_unexpected_error_hides_detail(self, settings):
        """Should answer errors outside the query funnel with the generic 500."""
        backend = FakeBackend()
        backend.list_rules = lambda: [object()]
        service = BudgetService(backend, timeout=5)
        app = create_app(service, settings)
        try:
            with TestClient(app, raise_server_exceptions=False) as test_client:
                response = test_client.get("/rules")
        finally:
            service.release()

        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal Server Error",
            "message": "An unexpected error occurred.",
        }
