import pytest

from pwcb.errors import MAX_QUANTITY, InsufficientQuantity, InvalidQuantity, NotFoundError, PermissionDenied
from pwcb.models import db, InventoryEntry
from pwcb.services import ledger
from pwcb.services.unit_of_work import RowLocks, UnitOfWork, ledger_key

from conftest import make_admin, make_item, make_player


def _credit(user_id, item_id, amount):
    with UnitOfWork() as uow:
        uow.lock([ledger_key(user_id, item_id)])
        ledger.credit(uow, user_id, item_id, amount)


def test_credit_twice_yields_single_row(ctx):
    admin = make_admin()
    alice = make_player()
    sword = make_item(admin)

    _credit(alice.id, sword.id, 3)
    _credit(alice.id, sword.id, 4)

    rows = InventoryEntry.query.filter_by(user_id=alice.id, item_id=sword.id).all()
    assert len(rows) == 1
    assert rows[0].quantity == 7


def test_credit_keeps_first_obtained_at(ctx):
    admin = make_admin()
    alice = make_player()
    sword = make_item(admin)

    _credit(alice.id, sword.id, 1)
    first = InventoryEntry.query.filter_by(user_id=alice.id).one().obtained_at
    _credit(alice.id, sword.id, 1)
    assert InventoryEntry.query.filter_by(user_id=alice.id).one().obtained_at == first


def test_debit_without_row_is_insufficient(ctx):
    admin = make_admin()
    alice = make_player()
    sword = make_item(admin)

    with pytest.raises(InsufficientQuantity) as exc:
        with UnitOfWork() as uow:
            ledger.debit(uow, alice.id, sword.id, 1)
    assert exc.value.available == 0
    assert InventoryEntry.query.count() == 0


def test_debit_more_than_held_rolls_back(ctx):
    admin = make_admin()
    alice = make_player()
    sword = make_item(admin)
    _credit(alice.id, sword.id, 2)

    with pytest.raises(InsufficientQuantity):
        with UnitOfWork() as uow:
            ledger.debit(uow, alice.id, sword.id, 3)
    assert ledger.quantity_of(alice.id, sword.id) == 2


def test_debit_to_zero_keeps_row(ctx):
    admin = make_admin()
    alice = make_player()
    sword = make_item(admin)
    _credit(alice.id, sword.id, 2)

    with UnitOfWork() as uow:
        ledger.debit(uow, alice.id, sword.id, 2)

    row = InventoryEntry.query.filter_by(user_id=alice.id, item_id=sword.id).one()
    assert row.quantity == 0


def test_get_orders_most_recent_first(ctx):
    admin = make_admin()
    alice = make_player()
    first = make_item(admin, name="First")
    second = make_item(admin, name="Second", item_type="armor", stats={"armor": 2})

    _credit(alice.id, first.id, 1)
    _credit(alice.id, second.id, 2)
    _credit(alice.id, first.id, 5)

    inv = ledger.get(alice.id)
    assert [r["name"] for r in inv] == ["Second", "First"]
    assert inv[0]["stats"] == {"armor": 2}
    assert inv[1]["quantity"] == 6


def test_grant_creates_row(ctx):
    admin = make_admin()
    alice = make_player()
    potion = make_item(admin, name="Potion", item_type="consumable")

    ledger.grant_item(admin, alice.id, potion.id, 10)

    inv = ledger.get_inventory(alice)
    assert len(inv) == 1
    assert inv[0]["item_id"] == potion.id
    assert inv[0]["quantity"] == 10


def test_grant_requires_admin(ctx):
    admin = make_admin()
    alice = make_player()
    potion = make_item(admin, name="Potion", item_type="consumable")

    with pytest.raises(PermissionDenied):
        ledger.grant_item(alice, alice.id, potion.id, 1)
    assert ledger.get(alice.id) == []


@pytest.mark.parametrize("qty", [0, -3, "abc", None, True, 1.5, float("inf"), float("nan"), MAX_QUANTITY + 1, 2**63])
def test_grant_rejects_bad_quantity(ctx, qty):
    admin = make_admin()
    alice = make_player()
    potion = make_item(admin, name="Potion", item_type="consumable")

    with pytest.raises(InvalidQuantity):
        ledger.grant_item(admin, alice.id, potion.id, qty)


def test_grant_unknown_user_or_item(ctx):
    admin = make_admin()
    alice = make_player()
    potion = make_item(admin, name="Potion", item_type="consumable")

    with pytest.raises(NotFoundError):
        ledger.grant_item(admin, 9999, potion.id, 1)
    with pytest.raises(NotFoundError):
        ledger.grant_item(admin, alice.id, 9999, 1)
    assert db.session.query(InventoryEntry).count() == 0


def test_grant_up_to_bound_then_overflow_rolls_back(ctx):
    admin = make_admin()
    alice = make_player()
    potion = make_item(admin, name="Potion", item_type="consumable")

    ledger.grant_item(admin, alice.id, potion.id, MAX_QUANTITY)
    with pytest.raises(InvalidQuantity):
        ledger.grant_item(admin, alice.id, potion.id, 1)
    assert ledger.quantity_of(alice.id, potion.id) == MAX_QUANTITY


@pytest.mark.parametrize("item_id", [1.9, True, "1.0", float("inf"), 2**64])
def test_grant_rejects_ids_that_name_no_row(ctx, item_id):
    admin = make_admin()
    alice = make_player()
    make_item(admin, name="Potion", item_type="consumable")

    with pytest.raises(NotFoundError):
        ledger.grant_item(admin, alice.id, item_id, 1)
    assert db.session.query(InventoryEntry).count() == 0


def test_row_locks_released_with_unit_of_work(ctx):
    admin = make_admin()
    alice = make_player()
    sword = make_item(admin)
    locks = RowLocks()

    with UnitOfWork(locks=locks) as uow:
        uow.lock([ledger_key(alice.id, sword.id), ledger_key(admin.id, sword.id)])
        assert len(locks) == 2
        ledger.credit(uow, alice.id, sword.id, 1)
    assert len(locks) == 0
    assert ledger.quantity_of(alice.id, sword.id) == 1
