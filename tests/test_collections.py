"""Cart and wishlist collection tests."""

from storefront.session.collections import ProductCollection, SessionCollections


def ids(snapshot):
    return [p.id for p in snapshot]


class TestProductCollection:
    def test_add_appends_in_order(self, make_product):
        cart = ProductCollection("cart")
        assert cart.add(make_product(3))
        assert cart.add(make_product(1))
        assert cart.ids == [3, 1]
        assert len(cart) == 2

    def test_add_duplicate_id_is_noop(self, make_product):
        cart = ProductCollection("cart")
        cart.add(make_product(3, price=10))
        assert cart.add(make_product(3, price=99)) is False
        assert len(cart) == 1
        assert cart.items[0].price == 10

    def test_remove(self, make_product):
        cart = ProductCollection("cart")
        cart.add(make_product(1))
        cart.add(make_product(2))
        assert cart.remove(1) is True
        assert cart.ids == [2]

    def test_remove_missing_is_noop(self, make_product):
        cart = ProductCollection("cart")
        cart.add(make_product(1))
        assert cart.remove(42) is False
        assert cart.ids == [1]

    def test_clear(self, make_product):
        cart = ProductCollection("cart")
        cart.add(make_product(1))
        cart.clear()
        assert len(cart) == 0
        assert cart.items == ()

    def test_contains_by_product_or_id(self, make_product):
        cart = ProductCollection("cart")
        cart.add(make_product(5))
        assert 5 in cart
        assert make_product(5) in cart
        assert 6 not in cart

    def test_items_is_a_snapshot(self, make_product):
        cart = ProductCollection("cart")
        cart.add(make_product(1))
        snapshot = cart.items
        cart.add(make_product(2))
        assert ids(snapshot) == [1]


class TestObservers:
    def test_subscribe_replays_current_state(self, make_product):
        cart = ProductCollection("cart")
        cart.add(make_product(1))
        seen = []
        cart.subscribe(lambda snapshot: seen.append(ids(snapshot)))
        assert seen == [[1]]

    def test_every_mutation_is_broadcast(self, make_product):
        cart = ProductCollection("cart")
        first, second = [], []
        cart.subscribe(lambda s: first.append(ids(s)))
        cart.subscribe(lambda s: second.append(ids(s)))

        cart.add(make_product(1))
        cart.add(make_product(2))
        cart.remove(1)
        cart.clear()

        expected = [[], [1], [1, 2], [2], []]
        assert first == expected
        assert second == expected

    def test_noop_mutations_are_not_broadcast(self, make_product):
        cart = ProductCollection("cart")
        cart.add(make_product(1))
        seen = []
        cart.subscribe(lambda s: seen.append(ids(s)))
        cart.add(make_product(1))
        cart.remove(99)
        assert seen == [[1]]

    def test_late_subscriber_sees_latest(self, make_product):
        cart = ProductCollection("cart")
        cart.add(make_product(1))
        cart.add(make_product(2))
        cart.remove(2)
        seen = []
        cart.subscribe(lambda s: seen.append(ids(s)))
        assert seen == [[1]]

    def test_unsubscribe(self, make_product):
        cart = ProductCollection("cart")
        seen = []
        unsubscribe = cart.subscribe(lambda s: seen.append(ids(s)))
        unsubscribe()
        unsubscribe()
        cart.add(make_product(1))
        assert seen == [[]]

    def test_observer_may_unsubscribe_during_notification(self, make_product):
        cart = ProductCollection("cart")
        seen = []
        handle = {}

        def once(snapshot):
            seen.append(ids(snapshot))
            if snapshot:
                handle["unsubscribe"]()

        handle["unsubscribe"] = cart.subscribe(once)
        cart.add(make_product(1))
        cart.add(make_product(2))
        assert seen == [[], [1]]

    def test_failing_observer_does_not_stop_broadcast(self, make_product):
        cart = ProductCollection("cart")
        seen = []

        def broken(snapshot):
            if snapshot:
                raise RuntimeError("ui boom")

        cart.subscribe(broken)
        cart.subscribe(lambda s: seen.append(len(s)))

        assert cart.add(make_product(1)) is True
        assert cart.remove(1) is True
        cart.add(make_product(2))
        cart.clear()

        assert seen == [0, 1, 0, 1, 0]
        assert len(cart) == 0


class TestSessionCollections:
    def test_cart_and_wishlist_are_independent(self, make_product):
        session = SessionCollections()
        session.cart.add(make_product(1))
        session.wishlist.add(make_product(2))
        assert session.cart.ids == [1]
        assert session.wishlist.ids == [2]

    def test_instances_do_not_share_state(self, make_product):
        a, b = SessionCollections(), SessionCollections()
        a.cart.add(make_product(1))
        assert len(b.cart) == 0

    def test_clear_empties_both(self, make_product):
        session = SessionCollections()
        session.cart.add(make_product(1))
        session.wishlist.add(make_product(1))
        session.clear()
        assert len(session.cart) == 0 and len(session.wishlist) == 0
