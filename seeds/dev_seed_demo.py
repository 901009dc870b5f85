"""Minimal seed for the transfer demo: two players, a few items, some stock."""
import json
from pathlib import Path

from pwcb import create_app
from pwcb.models import db
from pwcb.services import accounts, catalog, ledger

SEED_FILE = Path(__file__).with_name("starter_items.json")


def run():
    app = create_app()
    with app.app_context():
        db.drop_all()
        db.create_all()
        admin = accounts.seed_default_admin()
        alice = accounts.register("alice", "alice123")
        bob = accounts.register("bob", "bob1234")
        payload = json.loads(SEED_FILE.read_text(encoding="utf-8"))["items"]
        items = [catalog.create_item(admin, data) for data in payload]
        # alice starts with stock to hand out; bob starts empty
        for item in items[:3]:
            ledger.grant_item(admin, alice.id, item.id, 5)
        print("Seeded players", alice.username, bob.username, "items", len(items))

if __name__ == "__main__":
    run()
