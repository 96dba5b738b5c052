"""Tests for category, payee and rule endpoints."""

from fakes import CATEGORIES, CATEGORY_GROUPS, PAYEES, RULES


class TestCategoriesAPI:

    def test_list_categories(self, client):
        """Should list all categories."""
        response = client.get("/categories")
        assert response.status_code == 200
        assert response.json() == CATEGORIES

    def test_list_category_groups_nests_categories(self, client):
        """Should list groups with their categories nested."""
        response = client.get("/category-groups")
        assert response.status_code == 200
        data = response.json()
        assert data == CATEGORY_GROUPS
        assert data[0]["categories"][0]["name"] == "Groceries"


class TestPayeesAPI:

    def test_list_payees(self, client):
        """Should list all payees."""
        response = client.get("/payees")
        assert response.status_code == 200
        assert response.json() == PAYEES

    def test_list_payee_rules(self, client, backend):
        """Should list the rules for one payee."""
        response = client.get("/payees/payee-1/rules")
        assert response.status_code == 200
        assert response.json() == RULES
        assert backend.called("list_payee_rules") == [("payee-1",)]

    def test_payee_without_rules(self, client):
        """Should return an empty list for a payee without rules."""
        response = client.get("/payees/payee-9/rules")
        assert response.status_code == 200
        assert response.json() == []


class TestRulesAPI:

    def test_list_rules(self, client):
        """Should list all rules."""
        response = client.get("/rules")
        assert response.status_code == 200
        assert response.json() == RULES
