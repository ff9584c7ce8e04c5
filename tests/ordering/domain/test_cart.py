import pytest
from storefront.ordering.checkout.assembler import reservation_plan
from storefront.ordering.checkout.cart import CartLine, parse_cart
from storefront.shared.errors import InvalidArgument


class TestCartLine:
    @pytest.mark.parametrize("quantity", [0, -1, 1.5, "2", None, True])
    def test_quantity_must_be_positive_integer(self, quantity):
        with pytest.raises(InvalidArgument):
            CartLine(product_id="prod-a", quantity=quantity)

    def test_missing_product_id(self):
        with pytest.raises(InvalidArgument):
            CartLine.from_dict({"quantity": 1})

    def test_size_and_color_are_free_form(self):
        line = CartLine.from_dict({"product_id": "prod-a", "quantity": 1, "size": "XXXL", "color": "Ultraviolet"})
        assert line.size == "XXXL"
        assert line.color == "Ultraviolet"


class TestParseCart:
    @pytest.mark.parametrize("raw", [[], None])
    def test_empty_cart_rejected(self, raw):
        with pytest.raises(InvalidArgument):
            parse_cart(raw)

    def test_keeps_input_order(self):
        lines = parse_cart([{"product_id": "b", "quantity": 1}, {"product_id": "a", "quantity": 2}])
        assert [line.product_id for line in lines] == ["b", "a"]


def test_reservation_plan_merges_quantities_in_first_seen_order():
    lines = parse_cart(
        [
            {"product_id": "b", "quantity": 3},
            {"product_id": "a", "quantity": 1},
            {"product_id": "b", "quantity": 2, "size": "L"},
        ]
    )
    assert list(reservation_plan(lines).items()) == [("b", 5), ("a", 1)]
