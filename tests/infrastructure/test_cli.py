"""End-to-end tests for the click CLI against a temporary data directory."""

import json

import pytest
from click.testing import CliRunner

from backoffice.infrastructure.cli.main import cli


@pytest.fixture
def run(tmp_path):
    runner = CliRunner()

    def _run(*args: str):
        return runner.invoke(cli, ["--data-dir", str(tmp_path), "--user-id", "1", *args])

    return _run


@pytest.fixture
def stocked(run):
    assert run("product", "add", "--name", "Widget", "--price", "50").exit_code == 0
    assert run("product", "add", "--name", "Gadget", "--price", "100").exit_code == 0
    run("inventory", "receive", "--product-id", "1", "--quantity", "3", "--warehouse-id", "1")
    run("inventory", "receive", "--product-id", "1", "--quantity", "5", "--warehouse-id", "2")
    run("inventory", "receive", "--product-id", "2", "--quantity", "10")
    return run


class TestProductCommands:

    def test_add_and_list(self, run):
        result = run("product", "add", "--name", "Widget", "--price", "19.99")
        assert result.exit_code == 0
        assert "Product #1 'Widget' added at $19.99" in result.output
        assert "Widget" in run("product", "list").output

    def test_deactivated_product_cannot_be_ordered(self, run):
        run("product", "add", "--name", "Widget", "--price", "1")
        run("inventory", "receive", "--product-id", "1", "--quantity", "5")
        result = run("product", "update", "--id", "1", "--status", "inactive")
        assert "'Widget': $1.00, inactive" in result.output
        blocked = run("order", "create", "--items", "1:1")
        assert blocked.exit_code == 1
        assert "inactive and cannot be sold" in blocked.output

    def test_duplicate_is_a_clean_error(self, run):
        run("product", "add", "--name", "Widget", "--price", "1")
        result = run("product", "add", "--name", "Widget", "--price", "1")
        assert result.exit_code == 1
        assert "already exists" in result.output


class TestInventoryCommands:

    def test_show_breakdown(self, stocked):
        result = stocked("inventory", "show", "--product-id", "1")
        assert result.exit_code == 0
        assert "total" in result.output
        assert "8" in result.output

    def test_receive_reports_warehouse(self, stocked):
        result = stocked("inventory", "receive", "--product-id", "2", "--quantity", "1",
                         "--warehouse-id", "4")
        assert "1 on hand in warehouse 4" in result.output


class TestOrderCommands:

    def test_create_with_promotion(self, stocked, tmp_path):
        stocked("promotion", "add", "--code", "SPRING15", "--kind", "percent", "--value", "15",
                "--start", "2000-01-01", "--end", "2999-12-31")
        result = stocked("order", "create", "--items", "1:2,2:1", "--customer-id", "5",
                         "--promo", "spring15")
        assert result.exit_code == 0, result.output
        assert "DH000001" in result.output
        assert "SPRING15 - Order discount" in result.output
        assert "$170.00" in result.output

        records = [
            json.loads(line)
            for line in (tmp_path / "audit.jsonl").read_text().splitlines()
        ]
        assert records[-1]["action"] == "CREATE"
        assert records[-1]["entity_type"] == "Order"
        assert records[-1]["user_id"] == 1

    def test_corrupt_directory_does_not_fail_a_committed_order(self, stocked, tmp_path):
        (tmp_path / "directory.json").write_text("{not json")
        result = stocked("order", "create", "--items", "1:1", "--customer-id", "3")
        assert result.exit_code == 0, result.output
        assert "Customer: #3" in result.output
        assert "DH000001" in stocked("order", "list").output

    def test_unknown_promotion_is_reported_not_fatal(self, stocked):
        result = stocked("order", "create", "--items", "1:1", "--promo", "NOPE")
        assert result.exit_code == 0
        assert "not applied: unknown promotion code" in result.output

    def test_shortage_is_a_clean_error(self, stocked):
        result = stocked("order", "create", "--items", "1:9,2:1")
        assert result.exit_code == 1
        assert "Insufficient stock" in result.output
        assert "product 1: requested 9, available 8" in result.output
        assert "No orders found." in stocked("order", "list").output

    def test_bad_items_format(self, stocked):
        result = stocked("order", "create", "--items", "1-2")
        assert result.exit_code == 2
        assert "Expected 'ProductId:Quantity'" in result.output

    def test_show_list_and_status(self, stocked):
        stocked("order", "create", "--items", "1:1")
        assert "DH000001" in stocked("order", "show", "--id", "1").output

        result = stocked("order", "status", "--id", "1", "--to", "paid")
        assert result.exit_code == 0
        assert "now paid" in result.output
        assert "paid" in stocked("order", "list", "--status", "paid").output

        back = stocked("order", "status", "--id", "1", "--to", "pending")
        assert back.exit_code == 1
        assert "Cannot change order status" in back.output

    def test_show_unknown_order(self, run):
        result = run("order", "show", "--id", "42")
        assert result.exit_code == 1
        assert "Order #42 not found" in result.output


class TestPromotionCommands:

    def test_add_list_refresh(self, stocked):
        result = stocked("promotion", "add", "--code", "PAIR", "--kind", "fixed", "--value", "5",
                         "--start", "2000-01-01", "--end", "2000-12-31",
                         "--scope", "combo", "--products", "1,2")
        assert result.exit_code == 0, result.output
        assert "PAIR - Combo discount (inactive)" in result.output
        assert "PAIR" in stocked("promotion", "list").output
        assert "No status changes." in stocked("promotion", "refresh").output

    def test_scope_without_products_rejected(self, stocked):
        result = stocked("promotion", "add", "--code", "P", "--kind", "fixed", "--value", "5",
                         "--start", "2000-01-01", "--end", "2999-12-31", "--scope", "product")
        assert result.exit_code == 1
        assert "needs at least one product" in result.output

    def test_deleted_promotion_is_not_applied(self, stocked):
        stocked("promotion", "add", "--code", "GONE", "--kind", "fixed", "--value", "5",
                "--start", "2000-01-01", "--end", "2999-12-31")
        result = stocked("promotion", "delete", "--code", "gone")
        assert result.exit_code == 0, result.output
        assert "Promotion GONE deleted." in result.output

        result = stocked("order", "create", "--items", "1:1", "--promo", "GONE")
        assert result.exit_code == 0, result.output
        assert "not applied: promotion is deleted" in result.output

        again = stocked("promotion", "delete", "--code", "GONE")
        assert again.exit_code == 1
        assert "already deleted" in again.output
