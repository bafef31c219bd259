"""User formatters."""

from slackcli.formatters._table import _field_block, _table, _trunc


def _flags(user):
    flags = []
    if user.get("is_bot"):
        flags.append("bot")
    if user.get("is_admin"):
        flags.append("admin")
    if user.get("deleted"):
        flags.append("deleted")
    return ",".join(flags)


def _users_table(users, footer):
    cols = [("Name", 20), ("Real name", 24), ("Email", 30), ("Flags", 10), ("ID", 0)]
    rows = [
        (
            _trunc(u.get("name") or "", 20),
            _trunc(u.get("real_name") or "", 24),
            _trunc(u.get("email") or "", 30),
            _flags(u),
            u.get("id", ""),
        )
        for u in users
    ]
    return _table(cols, rows, footer)


def format_users_table(result):
    users = result.get("users", [])
    if not users:
        return "No users found."
    footer = f"Total: {len(users)} users"
    if result.get("has_more"):
        footer += f" (more available, --cursor {result.get('next_cursor')})"
    return _users_table(users, footer)


def format_user_search(result):
    users = result.get("users", [])
    if not users:
        return f"No users matching '{result.get('query')}'."
    return _users_table(users, f"{len(users)} users match '{result.get('query')}'")


def format_user_info(result):
    """Format one block per user."""
    users = result.get("users", [])
    if not users:
        return "No users found."
    blocks = []
    for u in users:
        blocks.append(
            _field_block(
                [
                    ("User", u.get("id")),
                    ("Name", u.get("name")),
                    ("Real name", u.get("real_name")),
                    ("Display", u.get("display_name")),
                    ("Email", u.get("email")),
                    ("Title", u.get("title")),
                    ("Timezone", u.get("tz")),
                    ("Flags", _flags(u)),
                ]
            )
        )
    return "\n\n".join(blocks)
