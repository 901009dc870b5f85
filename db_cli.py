# db_cli.py — PWcb DB CLI
import os, sys, json, argparse, datetime
from typing import List

# Ensure local package import works when running directly
sys.path.insert(0, os.path.abspath("."))

from pwcb import create_app
from pwcb.errors import PwcbError
from pwcb.models import db, Item, User
from pwcb.services import accounts, catalog, ledger, statistics


def _fmt_dt(dt):
    if not dt: return None
    if isinstance(dt, (datetime.datetime, datetime.date)):
        return dt.isoformat()
    return str(dt)

def print_rows(rows: List[tuple], headers: List[str]) -> None:
    if not rows:
        print("(no rows)")
        return
    widths = [len(h) for h in headers]
    for r in rows:
        for i, v in enumerate(r):
            widths[i] = max(widths[i], len("" if v is None else str(v)))
    line = " | ".join(h.ljust(widths[i]) for i,h in enumerate(headers))
    print(line)
    print("-+-".join("-"*w for w in widths))
    for r in rows:
        print(" | ".join(("" if v is None else str(v)).ljust(widths[i]) for i,v in enumerate(r)))

def _admin():
    return accounts.seed_default_admin()

# --------------------
# Commands
# --------------------

def cmd_init(args):
    db.create_all()
    admin = _admin()
    print(json.dumps({"ok": True, "admin": admin.username}, indent=2))

def cmd_users(args):
    rows = [
        (u.id, u.username, u.role, _fmt_dt(u.created_at))
        for u in User.query.order_by(User.id.asc()).all()
    ]
    print_rows(rows, ["id", "username", "role", "created_at"])

def cmd_items(args):
    rows = [
        (i.id, i.name, i.item_type, i.rarity, json.dumps(i.stats) if i.stats else None)
        for i in catalog.list_items()
    ]
    print_rows(rows, ["id", "name", "type", "rarity", "stats"])

def cmd_seed_items(args):
    path = args.file
    if not os.path.exists(path):
        print(f"Seed file not found: {path}")
        return 1
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    admin = _admin()
    created = 0
    for data in payload.get("items") or []:
        if Item.query.filter_by(name=data.get("name")).first():
            continue
        catalog.create_item(admin, data)
        created += 1
    print(json.dumps({"ok": True, "created": created}, indent=2))

def cmd_grant(args):
    user = accounts.get_user_by_username(args.username)
    if not user:
        print("User not found.")
        return 1
    row = ledger.grant_item(_admin(), user.id, args.item_id, args.quantity)
    print(json.dumps({"ok": True, "user_id": row.user_id, "item_id": row.item_id,
                      "quantity": row.quantity}, indent=2))

def cmd_inventory(args):
    user = accounts.get_user_by_username(args.username)
    if not user:
        print("User not found.")
        return 1
    rows = [
        (r["item_id"], r["name"], r["rarity"], r["quantity"], r["obtained_at"])
        for r in ledger.get(user.id)
    ]
    print_rows(rows, ["item_id", "name", "rarity", "qty", "obtained_at"])

def cmd_stats(args):
    print(json.dumps(statistics.get_statistics(_admin()), indent=2))

def build_parser():
    p = argparse.ArgumentParser(description="PWcb DB CLI")
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("init", help="Create tables and the default admin")
    s.set_defaults(func=cmd_init)

    s = sub.add_parser("users", help="List accounts")
    s.set_defaults(func=cmd_users)

    s = sub.add_parser("items", help="List the item catalog")
    s.set_defaults(func=cmd_items)

    s = sub.add_parser("seed-items", help="Create catalog items from a JSON file")
    s.add_argument("file", nargs="?", default="seeds/starter_items.json")
    s.set_defaults(func=cmd_seed_items)

    s = sub.add_parser("grant", help="Grant items to a user as the default admin")
    s.add_argument("username")
    s.add_argument("item_id", type=int)
    s.add_argument("quantity", type=int)
    s.set_defaults(func=cmd_grant)

    s = sub.add_parser("inventory", help="Show a user's inventory")
    s.add_argument("username")
    s.set_defaults(func=cmd_inventory)

    s = sub.add_parser("stats", help="Print statistics counts")
    s.set_defaults(func=cmd_stats)

    return p

def main(argv=None, app=None):
    args = build_parser().parse_args(argv)
    app = app or create_app()
    with app.app_context():
        try:
            return args.func(args) or 0
        except PwcbError as e:
            print(json.dumps({"ok": False, **e.to_json()}, indent=2))
            return 1

if __name__ == "__main__":
    sys.exit(main())
