"""
Service tests for the cart/wishlist store.

These run CartService against the real repository and catalog on SQLite,
covering delta semantics, wishlist duplicate rejection, idempotent removal
and the guest cart merge.
"""
from itertools import permutations

import pytest
from sqlalchemy.exc import OperationalError

from storefront.data.models.cart_line import CartLineModel
from storefront.domain.enums import CartAction, CartKind
from storefront.domain.errors import (
    CustomerNotFound,
    DuplicateWishlistItem,
    InvalidInput,
    ItemNotFound,
    ProductNotFound,
)
from storefront.domain.guest_cart import GuestCart


def count_lines(db_session, customer_id, kind):
    return (
        db_session.query(CartLineModel)
        .filter(CartLineModel.customer_id == customer_id, CartLineModel.kind == kind.value)
        .count()
    )


class TestAddItem:

    def test_repeated_adds_produce_single_line_with_summed_quantity(self, cart_service, customer, make_product, db_session):
        make_product(5)

        for quantity in (2, 3, 1):
            cart_service.add_item(customer.id, 5, quantity, CartKind.CART)

        items = cart_service.list_items(customer.id, CartKind.CART)
        assert count_lines(db_session, customer.id, CartKind.CART) == 1
        assert len(items) == 1
        assert items[0]["quantity"] == 6

    def test_same_product_in_cart_and_wishlist_are_separate_lines(self, cart_service, customer, make_product):
        make_product(5)

        cart_service.add_item(customer.id, 5, 2, CartKind.CART)
        cart_service.add_item(customer.id, 5, 1, CartKind.WISHLIST)

        assert cart_service.list_items(customer.id, CartKind.CART)[0]["quantity"] == 2
        assert cart_service.list_items(customer.id, CartKind.WISHLIST)[0]["quantity"] == 1

    def test_second_wishlist_add_is_rejected_and_line_unchanged(self, cart_service, customer, make_product):
        make_product(8)
        cart_service.add_item(customer.id, 8, 1, CartKind.WISHLIST)

        with pytest.raises(DuplicateWishlistItem):
            cart_service.add_item(customer.id, 8, 4, CartKind.WISHLIST)

        items = cart_service.list_items(customer.id, CartKind.WISHLIST)
        assert len(items) == 1
        assert items[0]["quantity"] == 1

    def test_unknown_product_fails(self, cart_service, customer):
        with pytest.raises(ProductNotFound):
            cart_service.add_item(customer.id, 404, 1, CartKind.CART)

    def test_unpublished_product_fails(self, cart_service, customer, make_product):
        make_product(6, published=False)

        with pytest.raises(ProductNotFound):
            cart_service.add_item(customer.id, 6, 1, CartKind.CART)

    def test_unknown_customer_fails(self, cart_service, make_product):
        make_product(5)

        with pytest.raises(CustomerNotFound):
            cart_service.add_item(999, 5, 1, CartKind.CART)

    def test_inactive_customer_fails(self, cart_service, make_customer, make_product):
        inactive = make_customer(email="gone@example.com", active=False)
        make_product(5)

        with pytest.raises(CustomerNotFound):
            cart_service.add_item(inactive.id, 5, 1, CartKind.CART)

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_non_positive_quantity_is_invalid_input(self, cart_service, customer, make_product, db_session, quantity):
        make_product(5)

        with pytest.raises(InvalidInput):
            cart_service.add_item(customer.id, 5, quantity, CartKind.CART)

        assert count_lines(db_session, customer.id, CartKind.CART) == 0

    def test_add_publishes_added_event(self, cart_service, customer, make_product, received_events):
        make_product(5)

        cart_service.add_item(customer.id, 5, 2, CartKind.CART)
        cart_service.add_item(customer.id, 5, 1, CartKind.CART)

        assert [e.action for e in received_events] == [CartAction.ADDED, CartAction.ADDED]
        assert received_events[-1].quantity == 3
        assert received_events[-1].product_id == 5
        assert received_events[-1].kind == CartKind.CART


class TestSetQuantity:

    def test_deltas_from_fresh_line(self, cart_service, customer, make_product):
        make_product(5)

        cart_service.add_item(customer.id, 5, 3, CartKind.CART)
        cart_service.set_quantity(customer.id, 5, CartKind.CART, -1)
        result = cart_service.set_quantity(customer.id, 5, CartKind.CART, 2)

        assert result == 4

    @pytest.mark.parametrize("deltas", list(permutations([3, -1, 2])))
    def test_delta_order_does_not_change_final_quantity(self, cart_service, customer, make_product, deltas):
        make_product(5)
        cart_service.add_item(customer.id, 5, 5, CartKind.CART)

        for delta in deltas:
            cart_service.set_quantity(customer.id, 5, CartKind.CART, delta)

        assert cart_service.list_items(customer.id, CartKind.CART)[0]["quantity"] == 9

    def test_reaching_zero_deletes_line(self, cart_service, customer, make_product, db_session, received_events):
        make_product(5)
        cart_service.add_item(customer.id, 5, 2, CartKind.CART)

        result = cart_service.set_quantity(customer.id, 5, CartKind.CART, -2)

        assert result == 0
        assert count_lines(db_session, customer.id, CartKind.CART) == 0
        assert received_events[-1].action == CartAction.REMOVED

    def test_going_below_zero_deletes_line(self, cart_service, customer, make_product, db_session):
        make_product(5)
        cart_service.add_item(customer.id, 5, 2, CartKind.CART)

        assert cart_service.set_quantity(customer.id, 5, CartKind.CART, -10) == 0
        assert count_lines(db_session, customer.id, CartKind.CART) == 0

    def test_missing_line_raises_item_not_found(self, cart_service, customer, make_product):
        make_product(5)

        with pytest.raises(ItemNotFound):
            cart_service.set_quantity(customer.id, 5, CartKind.CART, 1)

    def test_wishlist_quantity_cannot_be_changed(self, cart_service, customer, make_product):
        make_product(5)
        cart_service.add_item(customer.id, 5, 1, CartKind.WISHLIST)

        with pytest.raises(InvalidInput):
            cart_service.set_quantity(customer.id, 5, CartKind.WISHLIST, 1)


class TestRemoveAndClear:

    def test_remove_twice_succeeds_both_times(self, cart_service, customer, make_product, db_session):
        make_product(5)
        cart_service.add_item(customer.id, 5, 1, CartKind.CART)

        assert cart_service.remove_item(customer.id, 5, CartKind.CART) is True
        assert cart_service.remove_item(customer.id, 5, CartKind.CART) is False
        assert count_lines(db_session, customer.id, CartKind.CART) == 0

    def test_remove_absent_line_publishes_nothing(self, cart_service, customer, received_events):
        cart_service.remove_item(customer.id, 5, CartKind.CART)

        assert received_events == []

    def test_remove_by_id_of_other_customer_is_item_not_found(self, cart_service, customer, make_customer, make_product):
        other = make_customer(email="other@example.com", username="other")
        make_product(5)
        line = cart_service.add_item(other.id, 5, 1, CartKind.WISHLIST)

        with pytest.raises(ItemNotFound):
            cart_service.remove_line_by_id(customer.id, line.id, CartKind.WISHLIST)

    def test_remove_by_id_of_other_kind_is_item_not_found(self, cart_service, customer, make_product):
        make_product(5)
        line = cart_service.add_item(customer.id, 5, 1, CartKind.CART)

        with pytest.raises(ItemNotFound):
            cart_service.remove_line_by_id(customer.id, line.id, CartKind.WISHLIST)

    def test_clear_returns_count_and_only_touches_one_kind(self, cart_service, customer, make_product):
        for pid in (1, 2, 3):
            make_product(pid)
            cart_service.add_item(customer.id, pid, 1, CartKind.CART)
        cart_service.add_item(customer.id, 1, 1, CartKind.WISHLIST)

        assert cart_service.clear(customer.id, CartKind.CART) == 3
        assert cart_service.list_items(customer.id, CartKind.CART) == []
        assert len(cart_service.list_items(customer.id, CartKind.WISHLIST)) == 1


class TestListItems:

    def test_items_in_insertion_order(self, cart_service, customer, make_product):
        for pid in (9, 3, 7):
            make_product(pid)
            cart_service.add_item(customer.id, pid, 1, CartKind.CART)
        # zwiekszenie istniejacej pozycji nie zmienia kolejnosci
        cart_service.add_item(customer.id, 9, 1, CartKind.CART)

        items = cart_service.list_items(customer.id, CartKind.CART)

        assert [i["product_id"] for i in items] == [9, 3, 7]

    def test_lines_of_removed_products_are_skipped(self, cart_service, customer, make_product, db_session):
        make_product(1)
        discontinued = make_product(2)
        cart_service.add_item(customer.id, 1, 1, CartKind.CART)
        cart_service.add_item(customer.id, 2, 1, CartKind.CART)

        discontinued.deleted = True
        db_session.commit()

        items = cart_service.list_items(customer.id, CartKind.CART)
        assert [i["product_id"] for i in items] == [1]

    def test_items_enriched_with_product_snapshot(self, cart_service, customer, make_product):
        make_product(1, name="Keyboard", price="199.99", picture_id=12, seo_filename="keyboard", mime_type="image/png")
        cart_service.add_item(customer.id, 1, 2, CartKind.WISHLIST)

        item = cart_service.list_items(customer.id, CartKind.WISHLIST)[0]

        assert item["name"] == "Keyboard"
        assert str(item["price"]) == "199.99"
        assert item["image_url"] == "/images/0000012_keyboard.png"

    def test_summary(self, cart_service, customer, make_product):
        make_product(1, price="10.00")
        make_product(2, price="2.50")
        cart_service.add_item(customer.id, 1, 2, CartKind.CART)
        cart_service.add_item(customer.id, 2, 4, CartKind.CART)

        summary = cart_service.summary(customer.id, CartKind.CART)

        assert summary["item_count"] == 2
        assert summary["total_quantity"] == 6
        assert str(summary["subtotal"]) == "30.00"


class TestMergeGuestCart:

    def test_merge_adds_guest_quantities_as_increments(self, cart_service, customer, make_product):
        make_product(7)
        make_product(9)
        cart_service.add_item(customer.id, 7, 1, CartKind.CART)
        guest = GuestCart.from_entries([(7, 2), (9, 1)])

        result = cart_service.merge_guest_cart(customer.id, guest, CartKind.CART)

        assert result["migrated"] == [7, 9]
        assert len(guest) == 0
        quantities = {i["product_id"]: i["quantity"] for i in cart_service.list_items(customer.id, CartKind.CART)}
        assert quantities == {7: 3, 9: 1}

    def test_retry_after_partial_failure_does_not_double_count(self, cart_service, customer, make_product):
        make_product(7)
        guest = GuestCart.from_entries([(7, 2), (9, 1)])

        # produkt 9 jeszcze nie istnieje - jego dodanie sie nie udaje
        first = cart_service.merge_guest_cart(customer.id, guest, CartKind.CART)

        assert first["migrated"] == [7]
        assert [f["product_id"] for f in first["failed"]] == [9]
        assert first["failed"][0]["error"] == "ProductNotFound"
        assert [e.product_id for e in guest] == [9]

        make_product(9)
        second = cart_service.merge_guest_cart(customer.id, guest, CartKind.CART)

        assert second["migrated"] == [9]
        assert len(guest) == 0
        quantities = {i["product_id"]: i["quantity"] for i in cart_service.list_items(customer.id, CartKind.CART)}
        assert quantities == {7: 2, 9: 1}

    def test_wishlist_merge_skips_existing_entries(self, cart_service, customer, make_product):
        make_product(1)
        make_product(2)
        cart_service.add_item(customer.id, 1, 1, CartKind.WISHLIST)
        guest = GuestCart.from_entries([(1, 1), (2, 1)])

        result = cart_service.merge_guest_cart(customer.id, guest, CartKind.WISHLIST)

        assert result["migrated"] == [2]
        assert result["skipped"] == [1]
        assert result["failed"] == []
        assert len(guest) == 0
        assert len(cart_service.list_items(customer.id, CartKind.WISHLIST)) == 2

    def test_merge_for_unknown_customer_keeps_guest_cart(self, cart_service, make_product):
        make_product(7)
        guest = GuestCart.from_entries([(7, 2)])

        with pytest.raises(CustomerNotFound):
            cart_service.merge_guest_cart(12345, guest, CartKind.CART)

        assert guest.quantity_of(7) == 2

    def test_merge_publishes_single_merged_event(self, cart_service, customer, make_product, received_events):
        make_product(7)
        make_product(9)

        cart_service.merge_guest_cart(customer.id, GuestCart.from_entries([(7, 1), (9, 1)]), CartKind.CART)

        assert [e.action for e in received_events] == [CartAction.MERGED]
        assert received_events[0].product_id is None

    def test_unexpected_error_on_one_entry_keeps_committed_entries_reported(
        self, cart_service, customer, make_product, monkeypatch
    ):
        make_product(7)
        make_product(9)
        guest = GuestCart.from_entries([(7, 2), (9, 1)])
        original_add = cart_service._add

        def flaky_add(customer_id, product_id, quantity, kind):
            if product_id == 9:
                raise OperationalError("INSERT INTO cart_lines", {}, Exception("database is locked"))
            return original_add(customer_id, product_id, quantity, kind)

        monkeypatch.setattr(cart_service, "_add", flaky_add)

        first = cart_service.merge_guest_cart(customer.id, guest, CartKind.CART)

        assert first["migrated"] == [7]
        assert first["failed"][0]["product_id"] == 9
        assert first["failed"][0]["error"] == "MergeEntryFailed"
        assert [e.product_id for e in guest] == [9]

        monkeypatch.setattr(cart_service, "_add", original_add)
        second = cart_service.merge_guest_cart(customer.id, guest, CartKind.CART)

        assert second["migrated"] == [9]
        quantities = {i["product_id"]: i["quantity"] for i in cart_service.list_items(customer.id, CartKind.CART)}
        assert quantities == {7: 2, 9: 1}

    def test_failing_subscriber_does_not_fail_committed_add(self, cart_service, customer, make_product, event_bus):
        make_product(5)

        def broken(event):
            raise RuntimeError("subscriber bug")

        event_bus.subscribe(broken)

        line = cart_service.add_item(customer.id, 5, 2, CartKind.CART)

        assert line.quantity == 2
        assert cart_service.list_items(customer.id, CartKind.CART)[0]["quantity"] == 2
